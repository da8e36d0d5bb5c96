# SPDX-License-Identifier: MIT
"""Versioned storage handles and envelope helpers.

Exports:
    create: Build a :class:`VersionedStorage` for one key.
    remove_all: Delete every managed key under a prefix.
    pack: Encode a value into a JSON envelope.
    unpack: Decode a JSON envelope into a :class:`VersionedRecord`.
"""

from .codec import pack, unpack
from .handle import VersionedStorage, create
from .bulk import remove_all

__all__ = ["VersionedStorage", "create", "pack", "remove_all", "unpack"]
