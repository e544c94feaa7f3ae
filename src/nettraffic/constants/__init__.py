"""
Provides centralized, validated constants for the NetTraffic application.

This package exposes singleton instances of constant groups, ensuring they
are validated on import and easily accessible from a single namespace.

Usage:
    from nettraffic import constants

    # Access a default configuration value
    interval = constants.config.defaults.DEFAULT_REFRESH_INTERVAL

    # Access a display enumeration
    if mode is constants.TrafficMode.DISABLED:
        # ...
"""

from .app import app
from .config import config
from .display import display, TrafficMode, SpeedUnit, Placement, DrawableState, TextSizeClass
from .logs import logs
from .network import network
from .timeouts import timeouts
from .timers import timers

__all__ = [
    "app",
    "config",
    "display",
    "TrafficMode",
    "SpeedUnit",
    "Placement",
    "DrawableState",
    "TextSizeClass",
    "logs",
    "network",
    "timeouts",
    "timers",
]
