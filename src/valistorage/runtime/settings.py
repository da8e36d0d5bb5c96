# SPDX-License-Identifier: MIT
"""Centralised library configuration management.

This module exposes :class:`Settings`, a ``pydantic-settings`` model that
combines values sourced from an optional YAML configuration file and
environment variables. Environment variables take precedence over file-based
values and the merged configuration is validated before use.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import logfire
import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from valistorage.constants import DEFAULT_PREFIX, DEFAULT_STORAGE_FILE, ENV_PREFIX
from valistorage.models import AppConfig
from valistorage.observability.monitoring import LogLevel

DEFAULT_CONFIG_PATH = Path("config") / "app.yaml"


class Settings(BaseSettings):
    """Library settings combining file-based and environment configuration."""

    default_prefix: str = Field(
        DEFAULT_PREFIX, description="Prefix applied to keys when none is given."
    )
    storage_path: Path = Field(
        DEFAULT_STORAGE_FILE, description="File backing the 'local' storage type."
    )
    diagnostics: bool = Field(
        False,
        description=(
            "Development mode: emit advisory warnings describing malformed"
            " migrations, foreign payloads and failed writes."
        ),
    )
    log_level: LogLevel = Field(
        "warn", description="Baseline logging verbosity; CLI -v/-q adjust it."
    )
    logfire_token: str | None = Field(
        None, description="Logfire authentication token, if available.", repr=False
    )

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra="ignore")


def _read_app_config(path: Path) -> AppConfig:
    """Return the YAML configuration at ``path`` or defaults when missing.

    Raises:
        RuntimeError: If the file exists but cannot be parsed or validated.
    """
    with logfire.span("settings.read_app_config", attributes={"path": str(path)}):
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logfire.debug("No configuration file found", path=str(path))
            return AppConfig()
        except (OSError, yaml.YAMLError) as exc:
            raise RuntimeError(
                f"An error occurred while reading the YAML file: {exc}"
            ) from exc
        try:
            return AppConfig.model_validate(raw or {})
        except ValidationError as exc:
            raise RuntimeError(f"Invalid configuration file {path}: {exc}") from exc


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load and validate library settings.

    Values are read from the YAML configuration file (``config/app.yaml`` by
    default; a missing file is not an error) and then merged with environment
    variables using ``pydantic-settings``. When a value is provided in both
    sources the environment variable wins. A ``.env`` file in the working
    directory is loaded automatically when present.

    Args:
        config_path: Optional path to a YAML configuration file.

    Returns:
        Settings: Fully validated configuration.

    Raises:
        RuntimeError: If the configuration file or any value is invalid.
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    config = _read_app_config(path)
    env_file_path = Path(".env")
    env_file = env_file_path if env_file_path.exists() else None

    # Init kwargs outrank the environment in pydantic-settings, so only pass
    # file values the environment does not already override.
    overrides: dict[str, Any] = {
        name: value
        for name, value in config.model_dump(exclude_none=True).items()
        if f"{ENV_PREFIX}{name.upper()}" not in os.environ
    }
    if "storage_path" in overrides:
        overrides["storage_path"] = Path(
            os.path.expandvars(str(overrides["storage_path"]))
        ).expanduser()
    try:
        return Settings(_env_file=env_file, **overrides)
    except ValidationError as exc:
        # Summarise validation issues so the caller receives clear feedback.
        details = "; ".join(
            f"{'.'.join(map(str, error['loc']))}: {error['msg']}"
            for error in exc.errors()
        )
        raise RuntimeError(f"Invalid configuration: {details}") from exc


__all__ = ["DEFAULT_CONFIG_PATH", "Settings", "load_settings"]
