"""
Constants related to throughput units, conversions and interfaces.
"""
from typing import Final, Dict, List, Tuple

class UnitConstants:
    """Constants for unit conversions and display labels."""
    BITS_PER_BYTE: Final[int] = 8
    BITS_PER_KILOBIT: Final[int] = 1000
    MS_PER_SECOND: Final[int] = 1000
    KILOBITS_PER_MEGABIT: Final[int] = 1000
    KILOBITS_PER_MEGABYTE: Final[int] = 8000

    KILOBITS_LABEL: Final[str] = "kb/s"
    MEGABITS_LABEL: Final[str] = "Mb/s"
    KILOBYTES_LABEL: Final[str] = "kB/s"
    MEGABYTES_LABEL: Final[str] = "MB/s"
    UNKNOWN_LABEL: Final[str] = "unknown"

    def __init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.BITS_PER_BYTE != 8:
            raise ValueError("BITS_PER_BYTE must be 8")
        if self.KILOBITS_PER_MEGABYTE != self.KILOBITS_PER_MEGABIT * self.BITS_PER_BYTE:
            raise ValueError("KILOBITS_PER_MEGABYTE must equal KILOBITS_PER_MEGABIT * BITS_PER_BYTE")

class RateConstants:
    """Constants for rate estimation."""
    DEFAULT_KBPS: Final[int] = 0
    # Ticks arriving earlier than this fraction of the refresh interval are dropped
    DEBOUNCE_FACTOR: Final[float] = 0.95

    def __init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.DEFAULT_KBPS < 0:
            raise ValueError("DEFAULT_KBPS must be non-negative")
        if not (0.0 < self.DEBOUNCE_FACTOR <= 1.0):
            raise ValueError("DEBOUNCE_FACTOR must be in (0, 1]")

class InterfaceConstants:
    """Constants related to network interface discovery."""
    # Interfaces whose lowercased name equals one of these are never tracked
    EXCLUDED_NAMES: Final[Tuple[str, ...]] = ("lo", "lo0")
    # Interfaces whose lowercased name contains one of these are never tracked
    EXCLUDED_KEYWORDS: Final[List[str]] = ["loopback", "teredo", "isatap", "pseudo-interface"]
    # Address prefixes that do not indicate a reachable network
    NON_ROUTABLE_PREFIXES: Final[Tuple[str, ...]] = ("127.", "169.254.", "::1", "fe80:")
    NO_OFFLOAD_COUNTERS: Final[Tuple[int, int]] = (0, 0)

    def __init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if any(kw != kw.lower() for kw in self.EXCLUDED_KEYWORDS):
            raise ValueError("EXCLUDED_KEYWORDS must be lowercase")
        if any(name != name.lower() for name in self.EXCLUDED_NAMES):
            raise ValueError("EXCLUDED_NAMES must be lowercase")

class NetworkConstants:
    """Container for network-related constant groups."""
    def __init__(self) -> None:
        self.units = UnitConstants()
        self.rates = RateConstants()
        self.interface = InterfaceConstants()

# Singleton instance for easy access
network = NetworkConstants()
