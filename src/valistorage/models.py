# SPDX-License-Identifier: MIT
"""Pydantic models shared by the storage layer and the migration engine.

:class:`VersionedRecord` is the decoded envelope persisted under every
managed key. :class:`StorageOptions` validates the arguments accepted by
:func:`valistorage.create` and :class:`AppConfig` describes the optional YAML
configuration file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Literal, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    field_validator,
)

StorageType = Literal["local", "session"]


class StrictModel(BaseModel):
    """Base model with strict settings to prevent shape drift."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=False)


class VersionedRecord(BaseModel):
    """Envelope pairing a schema ``version`` with an opaque ``value``.

    Extra keys in a stored envelope are ignored so payloads written by newer
    releases still decode.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    version: StrictInt = Field(..., description="Schema version of ``value``.")
    value: Any = Field(..., description="Caller payload; ``None`` is allowed.")


class StorageOptions(BaseModel):
    """Validated options for a :class:`~valistorage.storage.VersionedStorage`."""

    model_config = ConfigDict(
        extra="forbid", populate_by_name=True, arbitrary_types_allowed=True
    )

    key: StrictStr = Field(..., description="Key without the storage prefix.")
    version: StrictInt = Field(..., description="Current schema version.")
    migrations: Sequence[Any] | None = Field(
        None, description="Migration definitions applied to outdated records."
    )
    storage_type: StorageType = Field(
        "local", alias="type", description="Backend used to persist the value."
    )
    validator: Callable[[Any], Any] | None = Field(
        None,
        alias="validate",
        description="Predicate applied to values before they are returned.",
    )
    prefix: StrictStr | None = Field(
        None, description="Key prefix; the configured default when omitted."
    )
    auto_remove: StrictBool = Field(
        True, description="Delete records that cannot be read or migrated."
    )
    verbose: StrictBool = Field(
        True, description="Emit advisory warnings for recoverable problems."
    )

    @field_validator("migrations", mode="before")
    @classmethod
    def _require_list(cls, value: Any) -> Any:
        """Accept only lists or tuples for ``migrations``."""

        if value is not None and not isinstance(value, (list, tuple)):
            raise ValueError("migrations must be a list of migration definitions")
        return value


class AppConfig(StrictModel):
    """Settings that may be supplied through ``config/app.yaml``."""

    default_prefix: StrictStr | None = Field(
        None, description="Prefix applied to keys when none is given."
    )
    storage_path: Path | None = Field(
        None, description="File backing the ``local`` storage type."
    )
    diagnostics: bool | None = Field(
        None, description="Enable advisory warnings for misconfiguration."
    )
    log_level: str | None = Field(None, description="Logging verbosity level.")


__all__ = [
    "AppConfig",
    "StorageOptions",
    "StorageType",
    "StrictModel",
    "VersionedRecord",
]
