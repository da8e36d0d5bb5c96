# SPDX-License-Identifier: MIT
"""Advisory warnings emitted in development/diagnostic mode.

Warnings only describe what went wrong and how to fix it; they never change
the outcome of the call that produced them.
"""

from __future__ import annotations

from typing import Any

import logfire


def diagnostics_enabled() -> bool:
    """Return ``True`` when the active runtime environment enables diagnostics.

    No environment is created as a side effect; without one, diagnostics are
    off.
    """
    from valistorage.runtime.environment import RuntimeEnv

    env = RuntimeEnv.current()
    return env is not None and env.diagnostics


def warn(message: str, **attributes: Any) -> None:
    """Log ``message`` as a warning when diagnostics are enabled."""
    if diagnostics_enabled():
        logfire.warning("[valistorage] {message}", message=message, **attributes)


__all__ = ["diagnostics_enabled", "warn"]
