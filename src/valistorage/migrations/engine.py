# SPDX-License-Identifier: MIT
"""Public entry point composing validation, path resolution and execution."""

from __future__ import annotations

from typing import Any

import logfire

from valistorage.models import VersionedRecord
from valistorage.observability import telemetry

from .executor import execute
from .resolver import resolve_path
from .types import Failure, FailureReason, MigrationResult
from .validation import ConfigError, parse_migrations


def _reject(reason: FailureReason, detail: str) -> Failure:
    logfire.debug("Migration rejected", reason=reason.value, detail=detail)
    telemetry.record_failure(reason.value)
    return Failure()


def migrate(
    migrations: Any, record: VersionedRecord, target_version: int
) -> MigrationResult:
    """Migrate ``record`` to ``target_version`` using ``migrations``.

    Only call this when ``record.version`` differs from ``target_version``;
    an empty migration list always fails because it can bridge no gap.

    Args:
        migrations: Untrusted migration definitions.
        record: Decoded envelope read from storage.
        target_version: Version the caller currently expects.

    Returns:
        :class:`Success` with the migrated value, or :class:`Failure` for
        malformed or empty definitions, a missing path, a rejected validation
        or a failing step. No partially migrated value is ever returned.
    """

    with logfire.span(
        "migrations.migrate",
        attributes={"from_version": record.version, "to_version": target_version},
    ):
        telemetry.record_attempt()
        parsed = parse_migrations(migrations)
        if isinstance(parsed, ConfigError):
            return _reject(FailureReason.CONFIGURATION, parsed.reason)
        if not parsed:
            return _reject(FailureReason.CONFIGURATION, "no migrations defined")

        path = resolve_path(parsed, record.version, target_version)
        if path is None:
            return _reject(
                FailureReason.PATH_NOT_FOUND,
                f"{record.version} -> {target_version}",
            )

        result = execute(path, record.value)
        if result.success:
            telemetry.record_success(len(path))
            logfire.info(
                "Migrated record",
                from_version=record.version,
                to_version=target_version,
                steps=len(path),
            )
        return result


__all__ = ["migrate"]
