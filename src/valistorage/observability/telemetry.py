# SPDX-License-Identifier: MIT
"""Aggregate migration metrics for diagnostics and reporting.

Counts are kept in process memory for :func:`snapshot` and mirrored to
Logfire metric counters so exported telemetry carries the same figures.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

import logfire

MIGRATIONS_TOTAL = logfire.metric_counter("migrations_total")
"""Counter for migration attempts that reached the engine."""

MIGRATION_FAILURES_TOTAL = logfire.metric_counter("migration_failures_total")
"""Counter for failed migrations, labelled by ``reason``."""


@dataclass
class MigrationMetrics:
    """Totals collected since the last :func:`reset`."""

    attempts: int = 0
    successes: int = 0
    steps_applied: int = 0
    failures: Counter[str] = field(default_factory=Counter)

    @property
    def failure_total(self) -> int:
        """Return the number of failed migrations across all reasons."""

        return sum(self.failures.values())


_metrics = MigrationMetrics()


def record_attempt() -> None:
    """Track a migration request."""

    _metrics.attempts += 1
    MIGRATIONS_TOTAL.add(1)


def record_success(steps: int) -> None:
    """Track a migration that applied ``steps`` steps."""

    _metrics.successes += 1
    _metrics.steps_applied += steps


def record_failure(reason: str) -> None:
    """Track a failed migration for ``reason``."""

    _metrics.failures[reason] += 1
    MIGRATION_FAILURES_TOTAL.add(1, {"reason": reason})


def snapshot() -> MigrationMetrics:
    """Return a copy of the collected metrics."""

    return MigrationMetrics(
        attempts=_metrics.attempts,
        successes=_metrics.successes,
        steps_applied=_metrics.steps_applied,
        failures=Counter(_metrics.failures),
    )


def reset() -> None:
    """Clear all recorded metrics."""

    global _metrics
    _metrics = MigrationMetrics()


__all__ = [
    "MigrationMetrics",
    "record_attempt",
    "record_failure",
    "record_success",
    "reset",
    "snapshot",
]
