# SPDX-License-Identifier: MIT
"""Versioned key/value handles with transparent migration on read.

:func:`create` validates its options once and returns a
:class:`VersionedStorage` bound to a single key. Reads decode the stored
envelope and, when its version is older than the handle's, run the configured
migrations and persist the upgraded value.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, Sequence, TypeVar

import logfire
from pydantic import ValidationError

from valistorage.backends import Storage
from valistorage.diagnostics import warn
from valistorage.exceptions import InvalidOptionsError
from valistorage.migrations import migrate
from valistorage.models import StorageOptions, StorageType
from valistorage.runtime.environment import RuntimeEnv

from .codec import pack, unpack

T = TypeVar("T")

INVALID_OPTIONS_MESSAGE = 'You passed invalid options into "create". Please see docs.'
SAVE_FAILED_MESSAGE = (
    "Failed to save data. This may happen when the value is not JSON"
    " serialisable (for example it contains circular references) or the"
    " storage cannot be written."
)


class VersionedStorage(Generic[T]):
    """Handle reading and writing one versioned key.

    Instances are created through :func:`create`; they are cheap and hold no
    cached value, so several handles may share a key.
    """

    def __init__(self, options: StorageOptions, backend: Storage, prefix: str) -> None:
        self.options = options
        self.backend = backend
        self.storage_key = f"{prefix}{options.key}"

    @property
    def version(self) -> int:
        """Return the schema version this handle reads and writes."""
        return self.options.version

    def _is_valid(self, value: Any) -> bool:
        validator = self.options.validator
        if validator is None:
            return True
        try:
            return bool(validator(value))
        except Exception as exc:  # pylint: disable=broad-except
            logfire.debug("Validator raised", key=self.storage_key, error=repr(exc))
            return False

    def _clean(self, reason: str) -> None:
        logfire.debug(
            "Discarding unreadable record",
            key=self.storage_key,
            reason=reason,
            auto_remove=self.options.auto_remove,
        )
        if self.options.auto_remove:
            self.remove()

    def _save(self, value: Any) -> bool:
        packed = pack(self.options.version, value)
        if packed is None:
            if self.options.verbose:
                warn(SAVE_FAILED_MESSAGE, key=self.storage_key)
            return False
        try:
            self.backend.set_item(self.storage_key, packed)
        except OSError as exc:
            if self.options.verbose:
                warn(SAVE_FAILED_MESSAGE, key=self.storage_key, error=str(exc))
            return False
        return True

    def get(self) -> T | None:
        """Return the stored value, migrating it when outdated.

        Returns ``None`` when nothing is stored, the data cannot be decoded,
        the value fails validation, or migration is impossible. In the last
        two cases the record is removed if ``auto_remove`` is set.
        """
        with logfire.span("storage.get", attributes={"key": self.storage_key}):
            raw = self.backend.get_item(self.storage_key)
            if raw is None:
                return None

            record = unpack(raw, self.options.verbose)
            if record is None:
                return None

            if record.version == self.options.version:
                if not self._is_valid(record.value):
                    self._clean("validation failed")
                    return None
                return record.value

            if self.options.migrations is None:
                self._clean("outdated and no migrations configured")
                return None

            result = migrate(self.options.migrations, record, self.options.version)
            if not result.success:
                self._clean("migration failed")
                return None

            if not self._is_valid(result.value):
                self._clean("migrated value failed validation")
                return None

            self._save(result.value)
            return result.value

    def set(self, value: T) -> bool:
        """Store ``value`` at the current version.

        Returns:
            ``True`` when the value was written, ``False`` otherwise.
        """
        with logfire.span("storage.set", attributes={"key": self.storage_key}):
            return self._save(value)

    def remove(self) -> bool:
        """Delete the stored value.

        Returns:
            ``False`` when the backend could not be written, ``True`` otherwise.
        """
        try:
            self.backend.remove_item(self.storage_key)
        except OSError as exc:
            logfire.error("Failed to remove key", key=self.storage_key, error=str(exc))
            return False
        return True


def create(
    key: str,
    version: int,
    migrations: Sequence[Any] | None = None,
    storage_type: StorageType = "local",
    validate: Callable[[Any], Any] | None = None,
    prefix: str | None = None,
    auto_remove: bool = True,
    verbose: bool = True,
    storage: Storage | None = None,
) -> VersionedStorage[Any]:
    """Create a handle for the versioned value stored under ``key``.

    Args:
        key: Name of the value, without prefix.
        version: Current schema version of the value.
        migrations: Definitions upgrading older versions; see
            :func:`valistorage.migrations.migrate`.
        storage_type: ``"local"`` (file-backed) or ``"session"`` (in memory).
        validate: Predicate every returned value must satisfy.
        prefix: Key prefix; defaults to ``Settings.default_prefix``.
        auto_remove: Delete records that fail validation or migration.
        verbose: Emit advisory warnings in diagnostic mode.
        storage: Explicit backend overriding ``storage_type``.

    Returns:
        A :class:`VersionedStorage` bound to ``key``.

    Raises:
        InvalidOptionsError: If any option has the wrong type.
    """
    try:
        options = StorageOptions.model_validate(
            {
                "key": key,
                "version": version,
                "migrations": migrations,
                "type": storage_type,
                "validate": validate,
                "prefix": prefix,
                "auto_remove": auto_remove,
                "verbose": verbose,
            }
        )
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(map(str, error['loc']))}: {error['msg']}"
            for error in exc.errors()
        )
        warn(INVALID_OPTIONS_MESSAGE, details=details)
        raise InvalidOptionsError(details) from exc

    env = RuntimeEnv.ensure()
    backend = storage if storage is not None else env.storage(options.storage_type)
    resolved_prefix = (
        options.prefix if options.prefix is not None else env.settings.default_prefix
    )
    return VersionedStorage(options, backend, resolved_prefix)


__all__ = ["VersionedStorage", "create"]
