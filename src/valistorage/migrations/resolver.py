# SPDX-License-Identifier: MIT
"""Ordering of migrations and resolution of contiguous version paths.

A path from ``from_version`` to ``to_version`` is the run of migrations with
versions ``from_version, from_version + 1, ..., to_version - 1`` once the list
is ordered by version. Any gap breaks the path; nothing is skipped.
"""

from __future__ import annotations

from operator import attrgetter
from typing import Sequence

import logfire

from .types import Migration


def normalize(migrations: Sequence[Migration]) -> list[Migration]:
    """Return a new list of ``migrations`` ordered by ascending version.

    The sort is stable, so duplicates keep their relative input order. The
    input sequence is never reordered.
    """

    return sorted(migrations, key=attrgetter("version"))


def _first_index(ordered: Sequence[Migration], version: int) -> int | None:
    return next(
        (index for index, item in enumerate(ordered) if item.version == version),
        None,
    )


def has_path(ordered: Sequence[Migration], from_version: int, to_version: int) -> bool:
    """Return ``True`` when ``ordered`` links ``from_version`` to ``to_version``.

    The walk starts at the first migration for ``from_version`` and must see
    each following version exactly once until ``to_version - 1``. Equal
    versions never have a path; callers only resolve when the versions
    differ.

    Args:
        ordered: Migrations already sorted by :func:`normalize`.
        from_version: Version of the stored value.
        to_version: Version the value should reach.
    """

    if not ordered:
        return False
    start = _first_index(ordered, from_version)
    if start is None:
        return False

    finish = to_version - 1
    expected = from_version - 1
    for migration in ordered[start:]:
        if migration.version != expected + 1:
            return False
        if migration.version == finish:
            return True
        expected = migration.version
    return False


def resolve_path(
    migrations: Sequence[Migration], from_version: int, to_version: int
) -> list[Migration] | None:
    """Return the ordered migrations leading from ``from_version`` to ``to_version``.

    Args:
        migrations: Migrations in any order.
        from_version: Version of the stored value.
        to_version: Version the value should reach.

    Returns:
        The inclusive slice of normalised migrations with versions
        ``from_version`` to ``to_version - 1``, or ``None`` when no unbroken
        path exists.
    """

    ordered = normalize(migrations)
    if not has_path(ordered, from_version, to_version):
        logfire.debug(
            "No migration path",
            from_version=from_version,
            to_version=to_version,
            available=[item.version for item in ordered],
        )
        return None

    start = _first_index(ordered, from_version)
    end = _first_index(ordered, to_version - 1)
    if start is None or end is None:  # pragma: no cover - guarded by has_path
        return None
    return ordered[start : end + 1]


__all__ = ["has_path", "normalize", "resolve_path"]
