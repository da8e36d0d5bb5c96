# SPDX-License-Identifier: MIT
"""Encoding of values into versioned JSON envelopes and back."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError
from pydantic_core import from_json, to_json

from valistorage.diagnostics import warn
from valistorage.models import VersionedRecord

FOREIGN_DATA_MESSAGE = (
    "The stored data does not look like a valistorage envelope. "
    "Please do not write library keys directly."
)


def pack(version: int, value: Any) -> str | None:
    """Return the compact JSON envelope for ``value`` at ``version``.

    Returns ``None`` when ``value`` cannot be serialised, for example because
    it contains a circular reference or an unsupported type.
    """

    try:
        return to_json({"version": version, "value": value}).decode("utf-8")
    except (ValueError, TypeError):
        return None


def unpack(raw: str, verbose: bool = True) -> VersionedRecord | None:
    """Decode ``raw`` into a :class:`VersionedRecord`.

    Args:
        raw: Text previously produced by :func:`pack`.
        verbose: Warn (in diagnostic mode) when ``raw`` is valid JSON but not
            an envelope.

    Returns:
        The decoded record, or ``None`` for invalid JSON or a payload without
        an integer ``version`` and a ``value`` key.
    """

    try:
        parsed = from_json(raw)
    except ValueError:
        return None
    try:
        return VersionedRecord.model_validate(parsed)
    except ValidationError:
        if verbose:
            warn(FOREIGN_DATA_MESSAGE)
        return None


__all__ = ["FOREIGN_DATA_MESSAGE", "pack", "unpack"]
