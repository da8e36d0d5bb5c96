"""Telemetry and monitoring helpers.

Exports:
    init_logfire: Configure Pydantic Logfire instrumentation.
    snapshot: Return migration metrics collected so far.
    reset: Clear collected migration metrics.
"""

from .monitoring import init_logfire
from .telemetry import MigrationMetrics, reset, snapshot

__all__ = ["init_logfire", "MigrationMetrics", "snapshot", "reset"]
