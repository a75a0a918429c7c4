"""
BigRedact - Configuration Manager

This module provides centralized JSON-based configuration management.
It handles loading, saving, and upgrading settings with new defaults.
"""

import copy
import json
import os
from typing import Any, Final

from bigredact import constants
from bigredact.config import CONFIG_FILE_PATH
from bigredact.utils.logger import logger

# Default configuration values
DEFAULT_CONFIG: Final[dict[str, Any]] = {
    "version": 1,
    "page": {
        "default_width": constants.DEFAULT_PAGE_WIDTH,
        "default_height": constants.DEFAULT_PAGE_HEIGHT,
    },
    "viewport": {
        "zoom_step": constants.ZOOM_STEP,
    },
    "export": {
        "long_edge": constants.DEFAULT_LONG_EDGE_PX,
        "prefix": constants.DEFAULT_EXPORT_PREFIX,
    },
    "render": {
        "background": list(constants.PAGE_BACKGROUND),
        "redaction_fill": list(constants.REDACTION_FILL),
        "redaction_stroke": list(constants.REDACTION_STROKE),
        "selection_stroke": list(constants.SELECTION_STROKE),
    },
    "ingest": {
        "pdf_scale": constants.DEFAULT_PDF_SCALE,
    },
}


class ConfigManager:
    """Manages application configuration in JSON format.

    This class provides a centralized way to load, save, and access
    configuration settings. Missing keys are filled in from
    DEFAULT_CONFIG when an older file is loaded.
    """

    def __init__(self, config_path: str | None = None) -> None:
        """Initialize the configuration manager.

        Args:
            config_path: Optional path to the configuration file.
                        Defaults to CONFIG_FILE_PATH.
        """
        self.config_path = config_path or CONFIG_FILE_PATH
        self._config: dict[str, Any] = {}

        # Ensure config directory exists
        os.makedirs(os.path.dirname(self.config_path), exist_ok=True)

        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file or create default."""
        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, encoding="utf-8") as f:
                    self._config = json.load(f)
                logger.info("Configuration loaded from JSON")

                self._upgrade_config()

            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Error loading config: {e}")
                self._config = self._get_default_config()
        else:
            self._config = self._get_default_config()
            self.save()

    def _get_default_config(self) -> dict[str, Any]:
        """Get a copy of the default configuration.

        Returns:
            Deep copy of default configuration dictionary.
        """
        return copy.deepcopy(DEFAULT_CONFIG)

    def _upgrade_config(self) -> None:
        """Upgrade configuration to latest version if needed."""
        current_version = self._config.get("version", 0)

        if current_version < DEFAULT_CONFIG["version"]:
            self._merge_defaults(self._config, DEFAULT_CONFIG)
            self._config["version"] = DEFAULT_CONFIG["version"]
            logger.info(f"Configuration upgraded to version {DEFAULT_CONFIG['version']}")

    def _merge_defaults(self, config: dict, defaults: dict) -> None:
        """Merge default values into config for missing keys.

        Args:
            config: Current configuration dictionary.
            defaults: Default configuration dictionary.
        """
        for key, value in defaults.items():
            if key not in config:
                config[key] = copy.deepcopy(value)
            elif isinstance(value, dict) and isinstance(config.get(key), dict):
                self._merge_defaults(config[key], value)

    def save(self) -> bool:
        """Save configuration to file.

        Returns:
            True if save was successful, False otherwise.
        """
        try:
            with open(self.config_path, "w", encoding="utf-8") as f:
                json.dump(self._config, f, indent=2, ensure_ascii=False)
            logger.debug("Configuration saved to JSON")
            return True
        except OSError as e:
            logger.error(f"Error saving config: {e}")
            return False

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get a configuration value by dot-separated path.

        Args:
            key_path: Dot-separated path to the config value (e.g., "export.long_edge")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split(".")
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def get_color(self, key_path: str, default: tuple[int, int, int, int]) -> tuple[int, ...]:
        """Get an RGBA colour stored as a JSON list."""
        value = self.get(key_path)
        if isinstance(value, (list, tuple)) and len(value) in (3, 4):
            return tuple(int(c) for c in value)
        return default

    def set(self, key_path: str, value: Any, save_immediately: bool = True) -> None:
        """Set a configuration value by dot-separated path.

        Args:
            key_path: Dot-separated path to the config value
            value: Value to set
            save_immediately: Whether to save to file immediately
        """
        keys = key_path.split(".")
        config = self._config

        for key in keys[:-1]:
            if key not in config:
                config[key] = {}
            config = config[key]

        config[keys[-1]] = value

        if save_immediately:
            self.save()


# Singleton instance for global access
_config_manager: ConfigManager | None = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance.

    Returns:
        The singleton ConfigManager instance
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
