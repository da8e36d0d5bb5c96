# SPDX-License-Identifier: MIT
"""Runtime package exposing the :class:`RuntimeEnv` singleton."""

from .environment import RuntimeEnv
from .settings import Settings, load_settings

__all__ = ["RuntimeEnv", "Settings", "load_settings"]
