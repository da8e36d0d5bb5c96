# SPDX-License-Identifier: MIT
"""Command-line interface for inspecting and cleaning file-backed storage."""

from __future__ import annotations

import argparse
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Callable

import logfire
from pydantic_core import to_json

from valistorage.observability.monitoring import LogLevel, init_logfire
from valistorage.runtime.environment import RuntimeEnv
from valistorage.runtime.settings import Settings, load_settings
from valistorage.storage import remove_all, unpack

LOG_LEVELS: list[LogLevel] = [
    "fatal",
    "error",
    "warn",
    "notice",
    "info",
    "debug",
    "trace",
]


def _print_version() -> None:
    """Print the installed package version."""
    try:
        pkg_version = version("valistorage")
    except PackageNotFoundError:  # pragma: no cover - fallback for source checkouts
        pkg_version = "unknown"
    print(f"valistorage {pkg_version}")


def _configure_logging(args: argparse.Namespace, settings: Settings) -> None:
    """Configure Logfire from the configured level and verbosity flags."""
    index = LOG_LEVELS.index(settings.log_level) + args.verbose - args.quiet
    index = max(0, min(len(LOG_LEVELS) - 1, index))
    init_logfire(settings.logfire_token, LOG_LEVELS[index])


def _prefix(args: argparse.Namespace) -> str:
    if args.prefix is not None:
        return args.prefix
    return RuntimeEnv.instance().settings.default_prefix


def _cmd_keys(args: argparse.Namespace) -> int:
    """List managed keys, without their prefix."""
    prefix = _prefix(args)
    backend = RuntimeEnv.instance().storage("local")
    for key in backend.keys():
        if key.startswith(prefix):
            print(key[len(prefix) :])
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    """Print the envelope stored under ``args.key``."""
    storage_key = f"{_prefix(args)}{args.key}"
    raw = RuntimeEnv.instance().storage("local").get_item(storage_key)
    if raw is None:
        print(f"No value stored under '{storage_key}'", file=sys.stderr)
        return 1
    record = unpack(raw)
    if record is None:
        print(f"'{storage_key}' does not hold a valistorage envelope", file=sys.stderr)
        return 1
    print(to_json(record.model_dump(), indent=2).decode("utf-8"))
    return 0


def _cmd_remove(args: argparse.Namespace) -> int:
    """Delete the value stored under ``args.key``."""
    storage_key = f"{_prefix(args)}{args.key}"
    backend = RuntimeEnv.instance().storage("local")
    if backend.get_item(storage_key) is None:
        print(f"No value stored under '{storage_key}'", file=sys.stderr)
        return 1
    backend.remove_item(storage_key)
    logfire.info("Removed key", key=storage_key)
    return 0


def _cmd_remove_all(args: argparse.Namespace) -> int:
    """Delete every managed key."""
    count = remove_all("local", prefix=_prefix(args))
    print(f"Removed {count} key(s)")
    return 0


def _add_common_args(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    """Add options shared across subcommands."""
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--storage-path",
        type=Path,
        default=None,
        help=(
            "JSON file backing local storage. Can also be set via the "
            "VALISTORAGE_STORAGE_PATH env variable."
        ),
    )
    parser.add_argument(
        "--prefix",
        type=str,
        default=None,
        help="Key prefix (defaults to the configured prefix)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (repeatable)",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="count",
        default=0,
        help="Decrease logging verbosity (repeatable)",
    )
    return parser


def _build_parser() -> argparse.ArgumentParser:
    """Return an argument parser configured with subcommands."""
    parser = argparse.ArgumentParser(
        description="Inspect and clean values persisted by valistorage.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print the valistorage version and exit.",
    )
    common = _add_common_args(
        argparse.ArgumentParser(
            add_help=False, formatter_class=argparse.ArgumentDefaultsHelpFormatter
        )
    )
    subparsers = parser.add_subparsers(dest="command")

    keys = subparsers.add_parser("keys", parents=[common], help="List managed keys")
    keys.set_defaults(func=_cmd_keys)

    show = subparsers.add_parser("show", parents=[common], help="Print one envelope")
    show.add_argument("key", help="Key without prefix")
    show.set_defaults(func=_cmd_show)

    remove = subparsers.add_parser("remove", parents=[common], help="Delete one key")
    remove.add_argument("key", help="Key without prefix")
    remove.set_defaults(func=_cmd_remove)

    remove_all_parser = subparsers.add_parser(
        "remove-all", parents=[common], help="Delete every managed key"
    )
    remove_all_parser.set_defaults(func=_cmd_remove_all)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and dispatch to the requested subcommand."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.version:
        _print_version()
        return
    if args.command is None:
        parser.print_help()
        raise SystemExit(1)

    settings = load_settings(args.config)
    if args.storage_path is not None:
        settings.storage_path = args.storage_path
    RuntimeEnv.initialize(settings)
    _configure_logging(args, settings)
    func: Callable[[argparse.Namespace], int] = args.func
    try:
        code = func(args)
    finally:
        logfire.force_flush()
    if code:
        raise SystemExit(code)


if __name__ == "__main__":
    main()
