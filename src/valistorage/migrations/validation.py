# SPDX-License-Identifier: MIT
"""Runtime shape checks for migration definitions.

Migration lists frequently come from loosely typed configuration, so they
are checked once at this boundary. A candidate may be a mapping
(``{"version": 1, "up": fn}``) or any object exposing the same attributes,
including :class:`~valistorage.migrations.types.Migration` itself.
:func:`parse_migrations` turns a valid list into typed ``Migration`` objects
for the rest of the engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from valistorage.diagnostics import warn

from .types import Migration

SHAPE_MESSAGE = """"migrations" should be a list of definitions shaped like:

    [
        {
            "version": int,
            "up": Callable[[Any], Any],
            "validate": Callable[[Any], bool],  # optional
        },
    ]
"""

_MISSING = object()
_SCALARS = (str, bytes, bytearray, int, float, complex)
_COLLECTIONS = (list, tuple, set, frozenset)


@dataclass(frozen=True)
class ConfigError:
    """Rejected migration configuration.

    Attributes:
        reason: Human readable description of the first problem found.
        index: Position of the offending definition, if any.
    """

    reason: str
    index: int | None = None


def _field(candidate: Any, name: str) -> Any:
    if isinstance(candidate, Mapping):
        return candidate.get(name, _MISSING)
    return getattr(candidate, name, _MISSING)


def _problem(candidate: Any) -> str | None:
    """Return why ``candidate`` is not a migration, or ``None`` if it is."""

    if candidate is None or isinstance(candidate, _SCALARS + _COLLECTIONS):
        return "definition must be a mapping or an object"
    version = _field(candidate, "version")
    if version is _MISSING:
        return "'version' is missing"
    if not isinstance(version, int) or isinstance(version, bool):
        return "'version' must be an int"
    up = _field(candidate, "up")
    if up is _MISSING or not callable(up):
        return "'up' must be callable"
    validate = _field(candidate, "validate")
    # ``None`` is the unset default of ``Migration.validate``.
    if validate is not _MISSING and validate is not None and not callable(validate):
        return "'validate' must be callable when given"
    return None


def is_valid_migration(candidate: Any) -> bool:
    """Return ``True`` when ``candidate`` is a well-formed migration.

    In diagnostic mode an invalid candidate logs the expected shape.
    """

    problem = _problem(candidate)
    if problem is None:
        return True
    warn(SHAPE_MESSAGE, problem=problem)
    return False


def is_valid_migrations(candidates: Any) -> bool:
    """Return ``True`` when ``candidates`` is a list or tuple of migrations.

    An empty list is valid.
    """

    if not isinstance(candidates, (list, tuple)):
        warn(SHAPE_MESSAGE, problem="migrations must be a list or tuple")
        return False
    return all(is_valid_migration(candidate) for candidate in candidates)


def parse_migrations(raw: Any) -> list[Migration] | ConfigError:
    """Convert untrusted ``raw`` definitions into :class:`Migration` objects.

    Args:
        raw: Value expected to be a list or tuple of migration definitions.

    Returns:
        A new list of migrations in input order, or :class:`ConfigError`
        describing the first invalid definition.
    """

    if not isinstance(raw, (list, tuple)):
        error = ConfigError("migrations must be a list or tuple")
        warn(SHAPE_MESSAGE, problem=error.reason)
        return error

    parsed: list[Migration] = []
    for index, candidate in enumerate(raw):
        problem = _problem(candidate)
        if problem is not None:
            warn(SHAPE_MESSAGE, problem=problem, index=index)
            return ConfigError(problem, index)
        if isinstance(candidate, Migration):
            parsed.append(candidate)
            continue
        validate = _field(candidate, "validate")
        parsed.append(
            Migration(
                version=_field(candidate, "version"),
                up=_field(candidate, "up"),
                validate=None if validate is _MISSING else validate,
            )
        )
    return parsed


__all__ = [
    "ConfigError",
    "SHAPE_MESSAGE",
    "is_valid_migration",
    "is_valid_migrations",
    "parse_migrations",
]
