# SPDX-License-Identifier: MIT
"""Exception hierarchy raised by the public API."""

from __future__ import annotations


class ValistorageError(Exception):
    """Base class for library errors."""


class InvalidOptionsError(ValistorageError, ValueError):
    """Raised when :func:`valistorage.create` receives malformed options."""

    def __init__(self, details: str | None = None) -> None:
        message = "[valistorage.create] Invalid Options"
        if details:
            message = f"{message}: {details}"
        super().__init__(message)
        self.details = details


__all__ = ["InvalidOptionsError", "ValistorageError"]
