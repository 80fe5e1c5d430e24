"""Configuration loader for gvt.

Handles loading and merging configuration from multiple sources.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ..utils.env import get_global_gvt_dir, log_debug
from ..utils.fs import safe_json_load
from .types import GvtConfig


PROJECT_CONFIG_NAME = ".gvt.json"


class ConfigLoader:
    """Loads and manages gvt configuration."""

    def __init__(self, project_root: Path | None = None):
        """Initialize config loader.

        Args:
            project_root: Working directory (for project-local config)
        """
        self.project_root = project_root
        self._config: GvtConfig | None = None

    @property
    def config(self) -> GvtConfig:
        """Get loaded configuration, loading if necessary."""
        if self._config is None:
            self._config = self.load()
        return self._config

    def global_config_path(self) -> Path:
        return get_global_gvt_dir() / "config.json"

    def project_config_path(self) -> Path | None:
        if not self.project_root:
            return None
        return Path(self.project_root) / PROJECT_CONFIG_NAME

    def load(self) -> GvtConfig:
        """Load configuration from all sources.

        Priority (highest to lowest):
        1. Project-local config (<root>/.gvt.json)
        2. Global config (~/.config/gvt/config.json)
        3. Default values

        Returns:
            Merged GvtConfig
        """
        merged: dict[str, Any] = {}

        global_path = self.global_config_path()
        if global_path.exists():
            global_data = safe_json_load(global_path, {})
            if isinstance(global_data, dict):
                merged = self._deep_merge(merged, global_data)
                log_debug(f"Loaded global config from {global_path}")

        project_path = self.project_config_path()
        if project_path is not None and project_path.exists():
            project_data = safe_json_load(project_path, {})
            if isinstance(project_data, dict):
                merged = self._deep_merge(merged, project_data)
                log_debug(f"Loaded project config from {project_path}")

        return GvtConfig.from_dict(merged)

    @staticmethod
    def _deep_merge(base: dict, override: dict) -> dict:
        """Deep merge two dictionaries.

        Args:
            base: Base dictionary
            override: Dictionary to merge (takes precedence)

        Returns:
            Merged dictionary
        """
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = ConfigLoader._deep_merge(result[key], value)
            else:
                result[key] = value
        return result
