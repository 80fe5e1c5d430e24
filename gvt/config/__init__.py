"""Configuration management for gvt."""

from .types import (
    DEFAULT_CONTROL_DIR,
    DEFAULT_INIT_MESSAGE,
    CopyConfig,
    GvtConfig,
    HistoryConfig,
)
from .loader import ConfigLoader

__all__ = [
    "DEFAULT_CONTROL_DIR",
    "DEFAULT_INIT_MESSAGE",
    "CopyConfig",
    "GvtConfig",
    "HistoryConfig",
    "ConfigLoader",
]
