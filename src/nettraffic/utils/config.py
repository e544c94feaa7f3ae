"""
Configuration management for NetTraffic.

This module provides a ConfigManager for loading, validating, and saving the
indicator settings to a JSON file. Invalid values are reset to their defaults,
corrupt files are backed up, and writes are atomic. `to_display_config`
turns a validated dictionary into the immutable snapshot the engine consumes.
"""

import json
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .helpers import get_app_data_path
from nettraffic import constants
from nettraffic.constants import TrafficMode, SpeedUnit, Placement
from nettraffic.core.models import DisplayConfig


class ConfigError(Exception):
    """Custom exception for configuration-related errors, such as I/O or permission issues."""


def to_display_config(config: Dict[str, Any]) -> DisplayConfig:
    """Builds a DisplayConfig snapshot from a validated configuration dictionary."""
    return DisplayConfig(
        mode=TrafficMode(config["mode"]),
        auto_hide=config["auto_hide"],
        auto_hide_threshold=config["auto_hide_threshold"],
        units=SpeedUnit(config["units"]),
        show_units=config["show_units"],
        refresh_interval=config["refresh_interval"],
        hide_arrows=config["hide_arrows"],
        location=Placement(config["location"]),
    )


class ConfigManager:
    """
    Manages loading, saving, and validation of NetTraffic's configuration.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None) -> None:
        self.config_path = Path(config_path or get_app_data_path() / constants.config.defaults.CONFIG_FILENAME)
        self.logger = logging.getLogger("NetTraffic.Config")
        self._last_config: Optional[Dict[str, Any]] = None


    def _validate_numeric(self, key: str, value: Any, default: Any, min_v: float, max_v: float) -> Union[int, float]:
        """Validates a numeric value is within a given range."""
        try:
            if isinstance(value, bool):
                raise TypeError("Booleans are not numeric settings")
            num_value = float(value)
            if not (min_v <= num_value <= max_v):
                raise ValueError("Value out of range")
            return int(num_value) if isinstance(default, int) else num_value
        except (TypeError, ValueError):
            self.logger.warning(constants.config.messages.INVALID_NUMERIC.format(key=key, value=value, default=default))
            return default


    def _validate_boolean(self, key: str, value: Any, default: bool) -> bool:
        """Validates a value is a boolean."""
        if isinstance(value, bool):
            return value
        self.logger.warning(constants.config.messages.INVALID_BOOLEAN.format(key=key, value=value, default=default))
        return default


    def _validate_choice(self, key: str, value: Any, default: str, choices: List[str]) -> str:
        """Validates a value is one of the allowed choices (case-insensitive)."""
        if isinstance(value, str):
            for choice in choices:
                if choice.lower() == value.lower():
                    return choice
        self.logger.warning(constants.config.messages.INVALID_CHOICE.format(key=key, value=value, default=default, choices=choices))
        return default


    def _validate_config(self, loaded_config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validates the configuration, merges it with defaults for missing keys,
        and sanitizes all values.
        """
        defaults = constants.config.defaults
        default_ref = defaults.DEFAULT_CONFIG
        validated = default_ref.copy()
        validated.update(loaded_config)

        unknown_keys = set(loaded_config.keys()) - set(default_ref.keys())
        if unknown_keys:
            self.logger.warning("Ignoring unknown config fields: %s", ", ".join(sorted(unknown_keys)))

        for key in ["auto_hide", "show_units", "hide_arrows"]:
            validated[key] = self._validate_boolean(key, validated.get(key), default_ref[key])

        validated["auto_hide_threshold"] = self._validate_numeric(
            "auto_hide_threshold", validated.get("auto_hide_threshold"), default_ref["auto_hide_threshold"],
            defaults.MINIMUM_AUTO_HIDE_THRESHOLD, defaults.MAXIMUM_AUTO_HIDE_THRESHOLD)
        validated["refresh_interval"] = self._validate_numeric(
            "refresh_interval", validated.get("refresh_interval"), default_ref["refresh_interval"],
            defaults.MINIMUM_REFRESH_INTERVAL, defaults.MAXIMUM_REFRESH_INTERVAL)

        validated["mode"] = self._validate_choice("mode", validated.get("mode"), default_ref["mode"], defaults.VALID_MODES)
        validated["units"] = self._validate_choice("units", validated.get("units"), default_ref["units"], defaults.VALID_UNITS)
        validated["location"] = self._validate_choice("location", validated.get("location"), default_ref["location"], defaults.VALID_LOCATIONS)

        return {key: validated[key] for key in default_ref}


    def validate(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Returns a validated copy of `config` merged over the defaults."""
        return self._validate_config(config)


    def load(self) -> Dict[str, Any]:
        """Loads and validates the configuration from the file."""
        if not self.config_path.exists():
            self.logger.info("Configuration file not found. Creating with default settings.")
            return self.reset_to_defaults()
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError:
            self.logger.error("Configuration file is corrupt. Backing it up and using defaults.")
            try:
                corrupt_path = self.config_path.with_name(f"{self.config_path.name}.corrupt")
                shutil.move(self.config_path, corrupt_path)
            except OSError:
                self.logger.exception("Failed to back up corrupt config file.")
            return self.reset_to_defaults()
        except OSError as e:
            msg = f"OS error reading config file {self.config_path}: {e}"
            self.logger.critical(msg)
            raise ConfigError(msg) from e

        if not isinstance(config, dict):
            self.logger.error("Configuration file does not hold an object. Using defaults.")
            return self.reset_to_defaults()

        validated_config = self._validate_config(config)
        self._last_config = validated_config.copy()
        return validated_config


    def load_display_config(self) -> DisplayConfig:
        """Loads the configuration file and returns it as an immutable snapshot."""
        return to_display_config(self.load())


    def save(self, config: Dict[str, Any]) -> None:
        """Atomically saves the provided configuration to the file."""
        validated_config = self._validate_config(config)

        if self._last_config == validated_config:
            self.logger.debug("Skipping save, configuration is unchanged.")
            return

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", delete=False, dir=self.config_path.parent, encoding="utf-8"
            ) as temp_f:
                json.dump(validated_config, temp_f, indent=4)
                temp_path = temp_f.name
            shutil.move(temp_path, self.config_path)
            self._last_config = validated_config.copy()
            self.logger.debug("Configuration saved successfully to %s", self.config_path)
        except OSError as e:
            msg = f"Failed to save configuration to {self.config_path}: {e}"
            self.logger.error(msg)
            raise ConfigError(msg) from e


    def reset_to_defaults(self) -> Dict[str, Any]:
        """Resets the configuration to factory defaults and saves it."""
        self.logger.info("Resetting configuration to default values.")
        defaults = constants.config.defaults.DEFAULT_CONFIG.copy()
        self.save(defaults)
        return defaults
