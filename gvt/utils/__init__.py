"""Utility modules for gvt."""

from .fs import atomic_write, is_regular_file, safe_json_load
from .env import (
    get_global_gvt_dir,
    get_home_dir,
    get_project_root_override,
    is_debug_mode,
    log_debug,
)

__all__ = [
    "atomic_write",
    "is_regular_file",
    "safe_json_load",
    "get_global_gvt_dir",
    "get_home_dir",
    "get_project_root_override",
    "is_debug_mode",
    "log_debug",
]
