# SPDX-License-Identifier: MIT
"""Sequential, all-or-nothing application of resolved migration steps."""

from __future__ import annotations

from typing import Any, Sequence

import logfire

from valistorage.observability import telemetry

from .types import Failure, FailureReason, Migration, MigrationResult, Success


def _fail(
    reason: FailureReason, step: Migration, exc: Exception | None = None
) -> Failure:
    logfire.debug(
        "Migration step failed",
        reason=reason.value,
        version=step.version,
        error=repr(exc) if exc is not None else None,
    )
    telemetry.record_failure(reason.value)
    return Failure()


def execute(steps: Sequence[Migration], initial: Any) -> MigrationResult:
    """Apply ``steps`` in order starting from ``initial``.

    Each step's validator, when present, sees the value produced by the
    previous step and must accept it before the step's ``up`` runs. Any
    rejection or exception ends the run with :class:`Failure`; intermediate
    values are discarded and exceptions never propagate.

    Args:
        steps: Ordered migrations, normally the output of ``resolve_path``.
        initial: Value stored at the first step's version.

    Returns:
        :class:`Success` with the final value, or :class:`Failure`.
    """

    current = initial
    with logfire.span("migrations.execute", attributes={"steps": len(steps)}):
        for step in steps:
            if step.validate is not None:
                try:
                    accepted = step.validate(current)
                except Exception as exc:  # pylint: disable=broad-except
                    return _fail(FailureReason.STEP_VALIDATION, step, exc)
                if not accepted:
                    return _fail(FailureReason.STEP_VALIDATION, step)
            try:
                current = step.up(current)
            except Exception as exc:  # pylint: disable=broad-except
                return _fail(FailureReason.STEP_EXECUTION, step, exc)
    return Success(current)


__all__ = ["execute"]
