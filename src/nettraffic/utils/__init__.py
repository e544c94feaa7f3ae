"""
Utilities submodule for NetTraffic.

Provides helper functions, timer utilities and configuration management.
"""

from .config import ConfigManager, ConfigError, to_display_config
from .helpers import setup_logging, get_app_data_path

__all__ = ["ConfigManager", "ConfigError", "to_display_config", "setup_logging", "get_app_data_path"]
