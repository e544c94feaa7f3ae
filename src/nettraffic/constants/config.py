"""
Constants for application configuration defaults and constraints.
"""
from typing import Final, Dict, Any, List

from .timers import timers
from .display import TrafficMode, SpeedUnit, Placement


class ConfigMessages:
    """Log message templates for configuration validation."""
    INVALID_NUMERIC: Final[str] = "Invalid {key} '{value}', resetting to default '{default}'"
    INVALID_BOOLEAN: Final[str] = "Invalid {key} '{value}', resetting to boolean default '{default}'"
    INVALID_CHOICE: Final[str] = "Invalid {key} '{value}', resetting to default '{default}'. Valid choices: {choices}"

    def __init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        for attr_name in dir(self):
            if not attr_name.startswith('_') and attr_name.isupper():
                value = getattr(self, attr_name)
                if not isinstance(value, str) or not value:
                    raise ValueError(f"ConfigMessages.{attr_name} must be a non-empty string.")


class ConfigConstants:
    """Defines default values and constraints for all indicator settings."""
    DEFAULT_LOCATION: Final[str] = Placement.STATUS_BAR.value
    DEFAULT_MODE: Final[str] = TrafficMode.BOTH.value
    DEFAULT_AUTO_HIDE: Final[bool] = True
    DEFAULT_AUTO_HIDE_THRESHOLD: Final[int] = 0
    DEFAULT_UNITS: Final[str] = SpeedUnit.MEGABITS.value
    DEFAULT_SHOW_UNITS: Final[bool] = True
    DEFAULT_REFRESH_INTERVAL: Final[int] = 2
    DEFAULT_HIDE_ARROWS: Final[bool] = False

    MINIMUM_AUTO_HIDE_THRESHOLD: Final[int] = 0
    MAXIMUM_AUTO_HIDE_THRESHOLD: Final[int] = 100_000
    MINIMUM_REFRESH_INTERVAL: Final[int] = timers.MINIMUM_REFRESH_INTERVAL_SECONDS
    MAXIMUM_REFRESH_INTERVAL: Final[int] = timers.MAXIMUM_REFRESH_INTERVAL_SECONDS

    VALID_LOCATIONS: Final[List[str]] = [p.value for p in Placement]
    VALID_MODES: Final[List[str]] = [m.value for m in TrafficMode]
    VALID_UNITS: Final[List[str]] = [u.value for u in SpeedUnit]

    CONFIG_FILENAME: Final[str] = "NetTraffic_Config.json"

    DEFAULT_CONFIG: Final[Dict[str, Any]] = {
        "location": DEFAULT_LOCATION,
        "mode": DEFAULT_MODE,
        "auto_hide": DEFAULT_AUTO_HIDE,
        "auto_hide_threshold": DEFAULT_AUTO_HIDE_THRESHOLD,
        "units": DEFAULT_UNITS,
        "show_units": DEFAULT_SHOW_UNITS,
        "refresh_interval": DEFAULT_REFRESH_INTERVAL,
        "hide_arrows": DEFAULT_HIDE_ARROWS,
    }

    def __init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not (self.MINIMUM_REFRESH_INTERVAL <= self.DEFAULT_REFRESH_INTERVAL <= self.MAXIMUM_REFRESH_INTERVAL):
            raise ValueError("DEFAULT_REFRESH_INTERVAL must lie within the refresh interval bounds")
        if not (self.MINIMUM_AUTO_HIDE_THRESHOLD <= self.DEFAULT_AUTO_HIDE_THRESHOLD <= self.MAXIMUM_AUTO_HIDE_THRESHOLD):
            raise ValueError("DEFAULT_AUTO_HIDE_THRESHOLD must lie within the threshold bounds")
        if not self.CONFIG_FILENAME:
            raise ValueError("CONFIG_FILENAME must not be empty")
        if self.DEFAULT_MODE not in self.VALID_MODES:
            raise ValueError(f"DEFAULT_MODE '{self.DEFAULT_MODE}' must be in VALID_MODES")
        if self.DEFAULT_UNITS not in self.VALID_UNITS:
            raise ValueError(f"DEFAULT_UNITS '{self.DEFAULT_UNITS}' must be in VALID_UNITS")
        if self.DEFAULT_LOCATION not in self.VALID_LOCATIONS:
            raise ValueError(f"DEFAULT_LOCATION '{self.DEFAULT_LOCATION}' must be in VALID_LOCATIONS")

        actual_keys = set(self.DEFAULT_CONFIG.keys())
        expected_keys = {
            "location", "mode", "auto_hide", "auto_hide_threshold",
            "units", "show_units", "refresh_interval", "hide_arrows",
        }
        if actual_keys != expected_keys:
            missing = expected_keys - actual_keys
            extra = actual_keys - expected_keys
            raise ValueError(f"DEFAULT_CONFIG key mismatch. Missing: {missing or 'None'}. Extra: {extra or 'None'}.")


class ConfigurationConstants:
    """Container for configuration-related constant groups."""
    def __init__(self) -> None:
        self.defaults = ConfigConstants()
        self.messages = ConfigMessages()

# Singleton instance for easy access
config = ConfigurationConstants()
