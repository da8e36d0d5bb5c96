# SPDX-License-Identifier: MIT
"""Tests for diagnostic-mode warnings."""

from pathlib import Path

from valistorage import diagnostics
from valistorage.runtime import RuntimeEnv, Settings


def test_warn_logs_when_enabled(monkeypatch, log_recorder) -> None:
    monkeypatch.setattr(diagnostics, "logfire", log_recorder)

    diagnostics.warn("Check your options", key="user")

    assert log_recorder.levels("warning") == [
        {"message": "Check your options", "key": "user"}
    ]


def test_warn_is_silent_when_disabled(monkeypatch, log_recorder, tmp_path: Path) -> None:
    monkeypatch.setattr(diagnostics, "logfire", log_recorder)
    RuntimeEnv.initialize(Settings(storage_path=tmp_path / "s.json", diagnostics=False))

    diagnostics.warn("Check your options")

    assert not diagnostics.diagnostics_enabled()
    assert log_recorder.records == []


def test_warn_is_silent_without_environment(monkeypatch, log_recorder) -> None:
    monkeypatch.setattr(diagnostics, "logfire", log_recorder)
    RuntimeEnv.reset()

    diagnostics.warn("Check your options")

    assert log_recorder.records == []
    assert RuntimeEnv.current() is None
