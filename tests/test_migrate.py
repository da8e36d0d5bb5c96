# SPDX-License-Identifier: MIT
"""Tests for the migration orchestrator."""

import pytest

from valistorage.migrations import Failure, Migration, Success, migrate
from valistorage.models import VersionedRecord
from valistorage.observability import telemetry


def _append(suffix: str):
    return lambda value: value + suffix


def _record(version: int, value) -> VersionedRecord:
    return VersionedRecord(version=version, value=value)


class Tracker:
    """Callable factory recording every invocation."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def up(self, value):
        self.calls.append("up")
        return value

    def validate(self, value):
        self.calls.append("validate")
        return True


def test_migrates_through_three_steps() -> None:
    migrations = [
        {"version": 1, "up": _append("A")},
        {"version": 2, "up": _append("B")},
        {"version": 3, "up": _append("C")},
    ]

    result = migrate(migrations, _record(1, "start"), 4)

    assert result == Success("startABC")
    metrics = telemetry.snapshot()
    assert metrics.attempts == 1
    assert metrics.successes == 1
    assert metrics.steps_applied == 3


def test_gap_in_versions_fails() -> None:
    migrations = [{"version": 1, "up": _append("A")}, {"version": 3, "up": _append("C")}]

    assert migrate(migrations, _record(1, "start"), 4) == Failure()
    assert telemetry.snapshot().failures == {"path_not_found": 1}


def test_validator_rejecting_stored_value_fails() -> None:
    migrations = [
        {"version": 5, "validate": lambda v: v == "ping", "up": _append("pong")}
    ]

    assert migrate(migrations, _record(5, "pong"), 6) == Failure()


def test_empty_migration_list_fails() -> None:
    assert migrate([], _record(1, "x"), 2) == Failure()
    assert telemetry.snapshot().failures == {"configuration": 1}


def test_invalid_definitions_fail() -> None:
    assert migrate({}, _record(1, "string"), 3) == Failure()


@pytest.mark.parametrize(
    "migrations",
    [
        None,
        "migrations",
        {"version": 1},
        [{"version": "1", "up": _append("x")}],
        [],
    ],
)
def test_gating_never_invokes_callables(migrations) -> None:
    """Malformed input fails before any step runs."""
    tracker = Tracker()
    if isinstance(migrations, list) and migrations:
        migrations[0]["up"] = tracker.up
        migrations[0]["validate"] = tracker.validate

    assert migrate(migrations, _record(1, "x"), 2) == Failure()
    assert tracker.calls == []


def test_missing_path_never_invokes_callables() -> None:
    tracker = Tracker()
    migrations = [
        Migration(7, tracker.up, tracker.validate),
        Migration(8, tracker.up, tracker.validate),
        Migration(9, tracker.up, tracker.validate),
    ]

    assert migrate(migrations, _record(6, "string"), 10) == Failure()
    assert migrate(migrations[::2], _record(7, "string"), 10) == Failure()
    assert tracker.calls == []


def test_only_resolved_steps_run() -> None:
    """Steps outside the resolved path are ignored."""
    migrations = [
        Migration(0, _append("[0]")),
        Migration(1, _append("[1]")),
        Migration(2, _append("[2]")),
        Migration(9, _append("[9]")),
    ]

    assert migrate(migrations, _record(1, ""), 3) == Success("[1][2]")


def test_unordered_definitions_run_in_version_order() -> None:
    migrations = [
        {"version": 13, "up": _append("b")},
        {"version": 12, "up": _append("a")},
    ]

    assert migrate(migrations, _record(12, ""), 14) == Success("ab")
    assert [item["version"] for item in migrations] == [13, 12]


def test_long_chain_with_validators() -> None:
    migrations = [
        {"version": 12, "validate": lambda v: v == "ping1...", "up": _append("pong2...")},
        {
            "version": 13,
            "validate": lambda v: v == "ping1...pong2...",
            "up": _append("ping3..."),
        },
        {
            "version": 14,
            "validate": lambda v: v == "ping1...pong2...ping3...",
            "up": _append("pong4..."),
        },
        {
            "version": 15,
            "validate": lambda v: v == "ping1...pong2...ping3...pong4...",
            "up": _append("ping5..."),
        },
        {
            "version": 16,
            "validate": lambda v: v == "ping1...pong2...ping3...pong4...ping5...",
            "up": _append("pong6"),
        },
    ]

    result = migrate(migrations, _record(12, "ping1..."), 17)

    assert result == Success("ping1...pong2...ping3...pong4...ping5...pong6")


def test_validator_failure_deep_in_chain_fails() -> None:
    migrations = [
        {"version": 12, "up": _append("pong2...")},
        {"version": 13, "up": _append("ping3...")},
        {
            "version": 14,
            "validate": lambda v: v == "ping1...pong2...ping3...ping4...",
            "up": _append("pong4..."),
        },
        {"version": 15, "up": _append("ping5...")},
        {"version": 16, "up": _append("pong6")},
    ]

    assert migrate(migrations, _record(12, "ping1..."), 17) == Failure()


def test_raising_callables_never_escape() -> None:
    def validate(value):
        return value.expected_property

    def up(value):
        return value["expected"] + 1

    migrations = [{"version": 12, "validate": validate, "up": up}]

    assert migrate(migrations, _record(12, "p"), 13) == Failure()
    assert migrate([{"version": 12, "up": up}], _record(12, {}), 13) == Failure()


def test_equal_versions_have_no_path() -> None:
    """The orchestrator is only meant for outdated records."""
    assert migrate([Migration(1, _append("A"))], _record(1, "v"), 1) == Failure()
