"""Project-wide constants and default paths.

This module centralises small constants that are imported across the
library. Keep this file minimal and free of side effects.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

DEFAULT_PREFIX = "valistorage:"

ENV_PREFIX = "VALISTORAGE_"

DEFAULT_STORAGE_DIR = (
    Path(os.path.expandvars(os.environ.get("XDG_DATA_HOME", tempfile.gettempdir())))
    / "valistorage"
)

DEFAULT_STORAGE_FILE = DEFAULT_STORAGE_DIR / "local.json"

__all__ = [
    "DEFAULT_PREFIX",
    "DEFAULT_STORAGE_DIR",
    "DEFAULT_STORAGE_FILE",
    "ENV_PREFIX",
]
