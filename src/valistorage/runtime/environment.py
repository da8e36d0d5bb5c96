# SPDX-License-Identifier: MIT
"""Runtime environment singleton for shared settings and storage backends."""

from __future__ import annotations

from threading import Lock
from typing import TYPE_CHECKING

import logfire

from valistorage.backends import FileStorage, MemoryStorage, Storage

if TYPE_CHECKING:  # pragma: no cover - for type checkers only
    from valistorage.models import StorageType
    from valistorage.runtime.settings import Settings


class RuntimeEnv:
    """Thread-safe singleton storing settings and the per-type backends.

    The ``"local"`` backend is a :class:`FileStorage` at
    ``settings.storage_path``; the ``"session"`` backend is a
    :class:`MemoryStorage` that lives as long as the environment.
    """

    _instance: "RuntimeEnv" | None = None
    _lock = Lock()

    def __init__(self, settings: "Settings") -> None:
        """Initialise the runtime environment."""
        self.settings = settings
        self._state_lock = Lock()
        self._backends: dict[str, Storage] = {
            "local": FileStorage(settings.storage_path),
            "session": MemoryStorage(),
        }
        logfire.debug("RuntimeEnv created", settings=str(settings))

    def storage(self, storage_type: "StorageType") -> Storage:
        """Return the backend registered for ``storage_type``.

        Raises:
            KeyError: If ``storage_type`` is not ``"local"`` or ``"session"``.
        """
        with self._state_lock:
            return self._backends[storage_type]

    def set_storage(self, storage_type: "StorageType", backend: Storage) -> None:
        """Replace the backend used for ``storage_type``."""
        with self._state_lock:
            self._backends[storage_type] = backend

    @property
    def diagnostics(self) -> bool:
        """Return ``True`` when advisory diagnostics are enabled."""
        return self.settings.diagnostics

    @classmethod
    def initialize(cls, settings: "Settings") -> "RuntimeEnv":
        """Initialise and return the runtime environment.

        Args:
            settings: Validated library settings.

        Returns:
            The active :class:`RuntimeEnv` instance.
        """
        with logfire.span("runtime_env.initialize"):
            with cls._lock:
                logfire.info(
                    "Initialising runtime environment",
                    storage_path=str(settings.storage_path),
                )
                cls._instance = cls(settings)
                return cls._instance

    @classmethod
    def instance(cls) -> "RuntimeEnv":
        """Return the current runtime environment.

        Raises:
            RuntimeError: If :meth:`initialize` was not called.
        """
        inst = cls._instance
        if inst is None:
            logfire.error("RuntimeEnv accessed before initialisation")
            raise RuntimeError("RuntimeEnv has not been initialised")
        return inst

    @classmethod
    def current(cls) -> "RuntimeEnv" | None:
        """Return the active environment without initialising one."""
        return cls._instance

    @classmethod
    def ensure(cls) -> "RuntimeEnv":
        """Return the active environment, loading default settings if needed.

        Raises:
            RuntimeError: If the default settings are invalid.
        """
        inst = cls._instance
        if inst is not None:
            return inst
        from valistorage.runtime.settings import load_settings

        settings = load_settings()
        with cls._lock:
            if cls._instance is None:
                cls._instance = cls(settings)
            return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Clear the active runtime environment.

        In-memory session data is discarded; file-backed data stays on disk.
        """
        with logfire.span("runtime_env.reset"):
            with cls._lock:
                logfire.info("Resetting runtime environment")
                cls._instance = None


__all__ = ["RuntimeEnv"]
