# SPDX-License-Identifier: MIT
"""Versioned key/value persistence with transparent schema migration."""

from .exceptions import InvalidOptionsError, ValistorageError
from .migrations import (
    Failure,
    Migration,
    MigrationResult,
    Success,
    is_valid_migration,
    is_valid_migrations,
    migrate,
    normalize,
    resolve_path,
)
from .models import VersionedRecord
from .storage import VersionedStorage, create, remove_all

__all__ = [
    "Failure",
    "InvalidOptionsError",
    "Migration",
    "MigrationResult",
    "Success",
    "ValistorageError",
    "VersionedRecord",
    "VersionedStorage",
    "create",
    "is_valid_migration",
    "is_valid_migrations",
    "migrate",
    "normalize",
    "remove_all",
    "resolve_path",
]
