"""
Constants and enumerations for the traffic indicator display decision.
"""
from enum import Enum
from typing import Final


class TrafficMode(Enum):
    """Which traffic directions the indicator reports."""
    BOTH = "both"
    UPSTREAM = "upstream"
    DOWNSTREAM = "downstream"
    DISABLED = "disabled"


class SpeedUnit(Enum):
    """Unit used to format a kbps rate."""
    KILOBITS = "kilobits"
    MEGABITS = "megabits"
    KILOBYTES = "kilobytes"
    MEGABYTES = "megabytes"


class Placement(Enum):
    """Where the indicator is placed by the surrounding surface."""
    HIDDEN = "hidden"
    HEADER = "header"
    STATUS_BAR = "status_bar"


class DrawableState(Enum):
    """Arrow decoration shown next to the indicator text."""
    NONE = "none"
    UP_AND_DOWN = "up_and_down"
    UP_ONLY = "up_only"
    DOWN_ONLY = "down_only"


class TextSizeClass(Enum):
    """Text size used by the surface: one line or two stacked lines."""
    SINGLE = "single"
    MULTI = "multi"


class DisplayConstants:
    """Defines display-related constants."""
    LINE_SEPARATOR: Final[str] = "\n"
    UNIT_SEPARATOR: Final[str] = " "
    EMPTY_TEXT: Final[str] = ""
    VISIBLE_PLACEMENT: Final[Placement] = Placement.STATUS_BAR
    UPSTREAM_MODES: Final[frozenset] = frozenset({TrafficMode.UPSTREAM, TrafficMode.BOTH})
    DOWNSTREAM_MODES: Final[frozenset] = frozenset({TrafficMode.DOWNSTREAM, TrafficMode.BOTH})

    def __init__(self) -> None:
        self.validate()
        self.mode = TrafficMode
        self.unit = SpeedUnit
        self.placement = Placement
        self.drawable = DrawableState
        self.text_size = TextSizeClass

    def validate(self) -> None:
        if TrafficMode.DISABLED in self.UPSTREAM_MODES | self.DOWNSTREAM_MODES:
            raise ValueError("DISABLED must not show any traffic direction")
        if TrafficMode.BOTH not in self.UPSTREAM_MODES & self.DOWNSTREAM_MODES:
            raise ValueError("BOTH must show both traffic directions")
        if len(self.UNIT_SEPARATOR) != 1:
            raise ValueError("UNIT_SEPARATOR must be a single character")

# Singleton instance for easy access
display = DisplayConstants()
