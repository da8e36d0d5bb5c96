# SPDX-License-Identifier: MIT
"""Typed building blocks of the migration engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, ClassVar, Union


@dataclass(frozen=True)
class Migration:
    """A single-version schema step.

    ``up`` transforms a value stored at ``version`` into the shape expected by
    ``version + 1``. When ``validate`` is set it must accept the value before
    ``up`` runs; a rejection aborts the whole migration.
    """

    version: int
    up: Callable[[Any], Any]
    validate: Callable[[Any], Any] | None = None


@dataclass(frozen=True)
class Success:
    """Migration outcome carrying the fully migrated ``value``."""

    value: Any
    success: ClassVar[bool] = True


@dataclass(frozen=True)
class Failure:
    """Migration outcome without a value. The cause is only logged."""

    success: ClassVar[bool] = False


MigrationResult = Union[Success, Failure]


class FailureReason(str, Enum):
    """Internal classification of failures used for logs and metrics."""

    CONFIGURATION = "configuration"
    PATH_NOT_FOUND = "path_not_found"
    STEP_VALIDATION = "step_validation"
    STEP_EXECUTION = "step_execution"


__all__ = ["Failure", "FailureReason", "Migration", "MigrationResult", "Success"]
