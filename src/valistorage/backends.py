# SPDX-License-Identifier: MIT
"""Key/value storage backends modelled on the Web Storage API.

Two implementations are provided:

* :class:`MemoryStorage` keeps items in a process-local dictionary and backs
  the ``"session"`` storage type.
* :class:`FileStorage` persists items as a JSON object in a single file and
  backs the ``"local"`` storage type. Every mutation rewrites the file
  atomically so readers never observe a half-written store.

Values are always strings; encoding structured data is the caller's concern.
"""

from __future__ import annotations

import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from threading import Lock, RLock
from typing import Iterator

import logfire
from pydantic_core import from_json, to_json

from valistorage.utils import ErrorHandler, LoggingErrorHandler


class Storage(ABC):
    """Interface for string key/value stores."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the value stored under ``key`` or ``None``."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete ``key``; missing keys are ignored."""

    @abstractmethod
    def keys(self) -> list[str]:
        """Return a snapshot of the stored keys in insertion order."""

    @abstractmethod
    def clear(self) -> None:
        """Delete every stored item."""

    def key(self, index: int) -> str | None:
        """Return the key at ``index`` or ``None`` when out of range."""
        keys = self.keys()
        if 0 <= index < len(keys):
            return keys[index]
        return None

    def __len__(self) -> int:
        return len(self.keys())

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())


class MemoryStorage(Storage):
    """Thread-safe in-memory storage that lives as long as the process."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}
        self._lock = RLock()

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._items)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()


_PATH_LOCKS: dict[Path, RLock] = {}
_PATH_LOCKS_GUARD = Lock()


def _path_lock(path: Path) -> RLock:
    """Return the lock shared by every :class:`FileStorage` on ``path``."""
    with _PATH_LOCKS_GUARD:
        return _PATH_LOCKS.setdefault(path.resolve(), RLock())


class FileStorage(Storage):
    """Storage persisted as a JSON object in ``path``.

    The file is re-read on every access, and instances pointing at the same
    path share one lock, so several handles in a process observe each
    other's writes without losing updates. Writers in other processes are not
    coordinated; the atomic replace only guarantees readers never see a
    half-written file. Unreadable or corrupt files are reported through the
    error handler and read as an empty store. Write failures raise
    :class:`OSError`.
    """

    def __init__(
        self, path: Path | str, error_handler: ErrorHandler | None = None
    ) -> None:
        self.path = Path(path)
        self._handler = error_handler or LoggingErrorHandler()
        self._lock = _path_lock(self.path)

    def _load(self) -> dict[str, str]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return {}
        except OSError as exc:
            self._handler.handle("Unreadable storage file", exc, path=str(self.path))
            return {}
        try:
            data = from_json(raw)
        except ValueError as exc:
            self._handler.handle("Corrupt storage file", exc, path=str(self.path))
            return {}
        if not isinstance(data, dict) or not all(
            isinstance(value, str) for value in data.values()
        ):
            self._handler.handle(
                "Storage file does not contain a string mapping", path=str(self.path)
            )
            return {}
        return data

    def _write(self, items: dict[str, str]) -> None:
        with logfire.span("fs.atomic_write", attributes={"path": str(self.path)}):
            # Ensure the destination directory exists before attempting the write.
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            tmp_path = Path(name)
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(to_json(items))
                    # Ensure data is on disk before the atomic replace
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_path, self.path)
            finally:
                if tmp_path.exists():
                    tmp_path.unlink()
            logfire.debug("Storage file written", path=str(self.path), keys=len(items))

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            items = self._load()
            items[key] = value
            self._write(items)

    def remove_item(self, key: str) -> None:
        with self._lock:
            items = self._load()
            if key not in items:
                return
            del items[key]
            self._write(items)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._load())

    def clear(self) -> None:
        with self._lock:
            self._write({})


__all__ = ["FileStorage", "MemoryStorage", "Storage"]
