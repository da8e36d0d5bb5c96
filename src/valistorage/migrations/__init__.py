# SPDX-License-Identifier: MIT
"""Versioned migration engine.

Exports:
    migrate: Validate, resolve and apply migrations to a stored record.
    is_valid_migration: Check the shape of a single definition.
    is_valid_migrations: Check the shape of a definition list.
    parse_migrations: Convert definitions into typed :class:`Migration` objects.
    normalize: Order migrations by version without mutating the input.
    has_path: Test whether an ordered list links two versions.
    resolve_path: Return the migrations linking two versions.
    execute: Apply ordered steps atomically.
"""

from .engine import migrate
from .executor import execute
from .resolver import has_path, normalize, resolve_path
from .types import Failure, FailureReason, Migration, MigrationResult, Success
from .validation import (
    ConfigError,
    is_valid_migration,
    is_valid_migrations,
    parse_migrations,
)

__all__ = [
    "ConfigError",
    "Failure",
    "FailureReason",
    "Migration",
    "MigrationResult",
    "Success",
    "execute",
    "has_path",
    "is_valid_migration",
    "is_valid_migrations",
    "migrate",
    "normalize",
    "parse_migrations",
    "resolve_path",
]
