# SPDX-License-Identifier: MIT
"""Error reporting hooks for recoverable storage faults."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import logfire


class ErrorHandler(ABC):
    """Interface for reporting recoverable errors.

    Storage backends call the handler when they can carry on with a safe
    fallback (for example treating a corrupt file as empty). Implementations
    must not raise.
    """

    @abstractmethod
    def handle(
        self, message: str, exc: Exception | None = None, **context: Any
    ) -> None:
        """Record ``message`` with optional ``exc`` and structured ``context``."""


class LoggingErrorHandler(ErrorHandler):
    """Error handler that logs via ``logfire``."""

    def handle(
        self, message: str, exc: Exception | None = None, **context: Any
    ) -> None:
        """Log ``message`` as an error.

        Args:
            message: Description of the error to record.
            exc: Exception instance providing additional context.
            **context: Extra attributes attached to the log record, such as
                the affected file path.
        """
        if exc is not None:
            logfire.error(
                "{message}: {error}",
                message=message,
                error=str(exc),
                error_type=type(exc).__name__,
                **context,
            )
        else:
            logfire.error("{message}", message=message, **context)


__all__ = ["ErrorHandler", "LoggingErrorHandler"]
