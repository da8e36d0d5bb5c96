# SPDX-License-Identifier: MIT
"""Bulk removal of every value managed under a prefix."""

from __future__ import annotations

import logfire

from valistorage.backends import Storage
from valistorage.models import StorageType
from valistorage.runtime.environment import RuntimeEnv


def remove_all(
    storage_type: StorageType = "local",
    prefix: str | None = None,
    storage: Storage | None = None,
) -> int:
    """Remove all keys starting with ``prefix`` from a backend.

    Keys the library does not manage are left untouched.

    Args:
        storage_type: Backend to clean, ``"local"`` or ``"session"``.
        prefix: Key prefix; defaults to ``Settings.default_prefix``.
        storage: Explicit backend overriding ``storage_type``.

    Returns:
        The number of removed keys; keys the backend failed to delete are
        logged and not counted.
    """
    env = RuntimeEnv.ensure()
    backend = storage if storage is not None else env.storage(storage_type)
    resolved = prefix if prefix is not None else env.settings.default_prefix
    with logfire.span("storage.remove_all", attributes={"prefix": resolved}):
        keys = [key for key in backend.keys() if key.startswith(resolved)]
        removed = 0
        for key in keys:
            try:
                backend.remove_item(key)
            except OSError as exc:
                logfire.error("Failed to remove key", key=key, error=str(exc))
                continue
            removed += 1
        logfire.info("Removed managed keys", prefix=resolved, count=removed)
        return removed


__all__ = ["remove_all"]
