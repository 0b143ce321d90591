"""
Configuration Loader for the Election Results Dashboard

This module provides a centralized way to load and access configuration
settings from the config.yaml file.

Usage:
    from ops import Config

    config = Config()
    results = config.get_input_location('results_json')
    output_dir = config.get_output_dir()
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml  # type: ignore[import-untyped]
from loguru import logger

from dashboard.colors import NO_DATA_COLOR, PARTY_COLORS, ColorResolver
from dashboard.errors import ConfigurationError
from dashboard.view_state import ViewState, Viewport


class Config:
    """Configuration manager for the election results dashboard."""

    # Default values that can be overridden in config
    DEFAULTS: Dict[str, Any] = {
        "columns": {
            "constituency_id": "ConstNo",
            "constituency_name": "ConstName",
            "district_name": "DistName",
            "province_name": "PovName",
            "ward_name": "wardName",
            "bounds": "bounds",
        },
        "viewport": {"longitude": 28.3, "latitude": -13.5, "zoom": 5.5},
        "map": {
            "fit_padding": 50,
            "fit_duration_ms": 1000,
            "tiles": "CartoDB Positron",
            "fill_opacity": 0.6,
            "hover_opacity": 0.8,
            "ward_fill_color": "#3498db",
            "ward_fill_opacity": 0.3,
            "ward_line_color": "#2c3e50",
        },
        "colors": {"no_data": NO_DATA_COLOR, "parties": PARTY_COLORS},
        "directories": {"output": "html"},
        "system": {"request_timeout": 30},
    }

    def __init__(
        self,
        config_file: Optional[str] = None,
        project_root_override: Optional[Union[str, Path]] = None,
    ):
        """
        Initialize configuration manager.

        Args:
            config_file: Path to config file. If None, looks for:
                        1. Environment variable DASHBOARD_CONFIG_PATH
                        2. config.yaml in current directory
                        3. ops/config.yaml next to this module
            project_root_override: Override project root detection (useful for temp configs)
        """
        if config_file is None:
            env_config = os.environ.get("DASHBOARD_CONFIG_PATH")
            packaged = Path(__file__).parent / "config.yaml"
            if env_config and Path(env_config).exists():
                config_file = env_config
                logger.debug(f"Using config from environment: {config_file}")
            elif Path("config.yaml").exists():
                config_file = "config.yaml"
            elif packaged.exists():
                config_file = str(packaged)
                logger.debug("Using packaged ops/config.yaml")
            else:
                raise FileNotFoundError(
                    "No config.yaml found. Check current directory or set DASHBOARD_CONFIG_PATH"
                )

        self.config_path = Path(config_file).resolve()
        self.config_dir = self.config_path.parent

        if project_root_override:
            self.project_root = Path(project_root_override).resolve()
            logger.debug(f"Using project root override: {self.project_root}")
        else:
            self.project_root = self._find_project_root()

        logger.debug(f"Loading config from: {self.config_path}")
        logger.debug(f"Project root: {self.project_root}")

        with open(self.config_path, "r") as f:
            self.data = yaml.safe_load(f) or {}

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation with intelligent defaults.

        Args:
            key_path: Dot-separated path to the configuration value
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key_path.split(".")

        value: Any = self.data
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                value = None
                break

        if value is None:
            value = self.DEFAULTS
            for key in keys:
                if isinstance(value, dict) and key in value:
                    value = value[key]
                else:
                    return default

        return value

    def get_input_location(self, key: str) -> str:
        """
        Get the location of an input dataset.

        URLs are returned unchanged; relative paths are joined with the
        project root.

        Args:
            key: Key under input_files

        Returns:
            URL or absolute path string
        """
        location = self.data.get("input_files", {}).get(key)
        if not location:
            raise ConfigurationError(f"Input file key '{key}' not found in config: input_files")

        location = str(location)
        if location.startswith(("http://", "https://")):
            return location
        path = Path(location)
        if not path.is_absolute():
            path = self.project_root / path
        return str(path)

    def get_output_dir(self) -> Path:
        """Output directory for generated artefacts, created if missing."""
        output_dir = Path(self.get("directories.output"))
        if not output_dir.is_absolute():
            output_dir = self.project_root / output_dir
        output_dir.mkdir(parents=True, exist_ok=True)
        return output_dir

    def get_column_name(self, column_key: str) -> str:
        """Get feature property name with intelligent defaults."""
        result = self.get(f"columns.{column_key}")
        if isinstance(result, str):
            return result
        raise ConfigurationError(f"Column name not found or not a string: {column_key}")

    def get_map_setting(self, setting_key: str) -> Any:
        """Get map setting with intelligent defaults."""
        return self.get(f"map.{setting_key}")

    def get_system_setting(self, setting_key: str) -> Any:
        """Get system setting with intelligent defaults."""
        return self.get(f"system.{setting_key}")

    def get_default_viewport(self) -> Viewport:
        return Viewport(
            longitude=float(self.get("viewport.longitude")),
            latitude=float(self.get("viewport.latitude")),
            zoom=float(self.get("viewport.zoom")),
        )

    def get_color_resolver(self) -> ColorResolver:
        """Color resolver built from the configured party palette."""
        palette = self.get("colors.parties")
        if not isinstance(palette, dict):
            raise ConfigurationError("colors.parties must be a mapping of party to color")
        return ColorResolver(palette=palette, no_data_color=self.get("colors.no_data"))

    def initial_view_state(self) -> ViewState:
        """ViewState for a freshly mounted map."""
        viewport = self.get_default_viewport()
        return ViewState(
            viewport=viewport,
            default_viewport=viewport,
            name_property=self.get_column_name("constituency_name"),
            bounds_property=self.get_column_name("bounds"),
            fit_padding=int(self.get_map_setting("fit_padding")),
            fit_duration_ms=int(self.get_map_setting("fit_duration_ms")),
        )

    def get_metadata(self, key: str) -> str:
        """Get metadata value."""
        result = self.get(key, "")
        return result if isinstance(result, str) else str(result)

    def print_config_summary(self) -> None:
        """Log a summary of the current configuration."""
        logger.debug("📋 Configuration Summary")
        logger.debug("=" * 50)
        logger.debug(f"Project: {self.get('project_name', 'Unknown')}")
        logger.debug(f"Description: {self.get('description', 'No description')}")
        logger.debug(f"Config file: {self.config_path}")

        logger.debug("📊 Input Files:")
        for key in self.data.get("input_files", {}):
            location = self.get_input_location(key)
            if location.startswith(("http://", "https://")):
                status = "🌐"
            else:
                status = "✅" if Path(location).exists() else "❌"
            logger.debug(f"  {status} {key}: {location}")

    def _find_project_root(self) -> Path:
        """Find the project root directory by looking for characteristic files/directories."""
        current = self.config_path.parent
        project_markers = ["config.yaml", "dashboard", "data", "ops", "pyproject.toml", ".git"]

        for _ in range(5):  # Limit to 5 levels up
            markers_found = sum(1 for marker in project_markers if (current / marker).exists())
            if markers_found >= 2:
                return current

            parent = current.parent
            if parent == current:
                break
            current = parent

        # Fallback: if config is in ops/, project root is parent
        if self.config_path.parent.name == "ops":
            return self.config_path.parent.parent

        logger.warning(
            f"Could not reliably detect project root, using config directory: {self.config_path.parent}"
        )
        return self.config_path.parent


def load_config(config_file: Optional[str] = None) -> Config:
    """
    Load configuration from file.

    Args:
        config_file: Path to configuration file

    Returns:
        Config instance
    """
    return Config(config_file)
