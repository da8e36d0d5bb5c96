# SPDX-License-Identifier: MIT
"""Tests for the command-line interface."""

import json
from pathlib import Path

import pytest

from valistorage import create
from valistorage.cli import main as cli


@pytest.fixture()
def store(monkeypatch, runtime_env, tmp_path: Path) -> Path:
    """Seed the file store and isolate the CLI from the host configuration."""
    monkeypatch.setattr(cli, "init_logfire", lambda *a, **k: None)
    monkeypatch.delenv("VALISTORAGE_DEFAULT_PREFIX", raising=False)
    monkeypatch.chdir(tmp_path)
    create("user", 2).set({"name": "max"})
    create("theme", 1).set("dark")
    runtime_env.storage("local").set_item("foreign", "1")
    return runtime_env.settings.storage_path


def _run(store: Path, *argv: str) -> None:
    cli.main([*argv[:1], "--storage-path", str(store), *argv[1:]])


def test_keys_lists_managed_keys(store: Path, capsys) -> None:
    _run(store, "keys")

    assert capsys.readouterr().out.splitlines() == ["user", "theme"]


def test_show_prints_envelope(store: Path, capsys) -> None:
    _run(store, "show", "user")

    assert json.loads(capsys.readouterr().out) == {
        "version": 2,
        "value": {"name": "max"},
    }


def test_show_missing_key_fails(store: Path, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _run(store, "show", "missing")

    assert excinfo.value.code == 1
    assert "No value stored" in capsys.readouterr().err


def test_show_foreign_value_fails(store: Path, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _run(store, "show", "foreign", "--prefix", "")

    assert excinfo.value.code == 1
    assert "envelope" in capsys.readouterr().err


def test_remove_deletes_one_key(store: Path) -> None:
    _run(store, "remove", "theme")

    assert create("theme", 1).get() is None
    assert create("user", 2).get() == {"name": "max"}


def test_remove_missing_key_fails(store: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _run(store, "remove", "missing")

    assert excinfo.value.code == 1


def test_remove_all_reports_count(store: Path, capsys) -> None:
    _run(store, "remove-all")

    assert capsys.readouterr().out.strip() == "Removed 2 key(s)"
    stored = json.loads(store.read_text(encoding="utf-8"))
    assert stored == {"foreign": "1"}


def test_version_flag(capsys) -> None:
    cli.main(["--version"])

    assert capsys.readouterr().out.startswith("valistorage ")


def test_no_command_prints_help(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])

    assert excinfo.value.code == 1
    assert "usage:" in capsys.readouterr().out


@pytest.mark.parametrize(
    ("configured", "flags", "expected"),
    [
        (None, [], "warn"),
        ("info", [], "info"),
        ("info", ["-q"], "notice"),
        ("error", ["-vv"], "notice"),
        ("trace", ["-v"], "trace"),
    ],
)
def test_log_level_starts_from_settings(
    store: Path, monkeypatch, configured, flags, expected
) -> None:
    levels: list[str] = []
    monkeypatch.setattr(cli, "init_logfire", lambda token, level: levels.append(level))
    if configured is None:
        monkeypatch.delenv("VALISTORAGE_LOG_LEVEL", raising=False)
    else:
        monkeypatch.setenv("VALISTORAGE_LOG_LEVEL", configured)

    _run(store, "keys", *flags)

    assert levels == [expected]
