# SPDX-License-Identifier: MIT
"""Test configuration for valistorage.

Logfire is configured to stay local and every test gets a fresh runtime
environment whose file-backed store lives in ``tmp_path``.
"""

from __future__ import annotations

from pathlib import Path

import logfire
import pytest

from valistorage.observability import telemetry
from valistorage.runtime import RuntimeEnv, Settings


@pytest.fixture(scope="session", autouse=True)
def _configure_logfire():
    """Keep telemetry in-process; nothing is exported or printed."""

    logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture(autouse=True)
def runtime_env(tmp_path: Path):
    """Initialise a diagnostics-enabled runtime environment for each test."""

    RuntimeEnv.reset()
    env = RuntimeEnv.initialize(
        Settings(storage_path=tmp_path / "store" / "local.json", diagnostics=True)
    )
    yield env
    RuntimeEnv.reset()


@pytest.fixture(autouse=True)
def _reset_telemetry():
    """Start every test with empty migration metrics."""

    telemetry.reset()
    yield
    telemetry.reset()


class LogRecorder:
    """Stand-in for the ``logfire`` module capturing log calls by level."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str, dict]] = []

    def _record(self, level: str):
        def log(message: str, /, *args, **kwargs) -> None:
            self.records.append((level, message, kwargs))

        return log

    def __getattr__(self, name: str):
        if name in {"debug", "info", "warning", "error"}:
            return self._record(name)
        raise AttributeError(name)

    def levels(self, level: str) -> list[dict]:
        """Return the keyword arguments of records logged at ``level``."""

        return [kwargs for lvl, _msg, kwargs in self.records if lvl == level]


@pytest.fixture()
def log_recorder() -> LogRecorder:
    """Provide a fresh :class:`LogRecorder`."""

    return LogRecorder()
