"""Environment utilities for gvt."""

from __future__ import annotations

import os
import sys
from pathlib import Path


def is_debug_mode() -> bool:
    """Check if debug mode is enabled.

    Returns:
        True if GVT_DEBUG is set to a truthy value
    """
    val = os.environ.get("GVT_DEBUG", "").lower()
    return val in ("1", "true", "yes", "on")


def log_debug(message: str) -> None:
    """Log debug message to stderr.

    Only outputs if GVT_DEBUG is set.
    """
    if is_debug_mode():
        print(f"[gvt] {message}", file=sys.stderr)


def get_home_dir() -> Path:
    """Get user home directory."""
    return Path.home()


def get_global_gvt_dir() -> Path:
    """Get global gvt config directory (~/.config/gvt).

    Returns:
        Path to the directory holding the user-wide config.json
    """
    return get_home_dir() / ".config" / "gvt"


def get_project_root_override() -> Path | None:
    """Project root from GVT_PROJECT_ROOT, if set."""
    val = os.environ.get("GVT_PROJECT_ROOT")
    if isinstance(val, str) and val.strip():
        return Path(val.strip()).expanduser()
    return None
