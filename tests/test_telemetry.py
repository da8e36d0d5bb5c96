# SPDX-License-Identifier: MIT
"""Tests for migration metrics."""

from valistorage.observability import telemetry


def test_snapshot_reports_recorded_values() -> None:
    telemetry.record_attempt()
    telemetry.record_attempt()
    telemetry.record_success(3)
    telemetry.record_failure("path_not_found")

    metrics = telemetry.snapshot()

    assert metrics.attempts == 2
    assert metrics.successes == 1
    assert metrics.steps_applied == 3
    assert metrics.failures == {"path_not_found": 1}
    assert metrics.failure_total == 1


def test_snapshot_is_a_copy() -> None:
    metrics = telemetry.snapshot()
    metrics.failures["step_execution"] += 5

    assert telemetry.snapshot().failure_total == 0


def test_reset_clears_metrics() -> None:
    telemetry.record_attempt()
    telemetry.record_failure("configuration")
    telemetry.record_failure("configuration")

    telemetry.reset()

    metrics = telemetry.snapshot()
    assert metrics.attempts == 0
    assert metrics.failure_total == 0
