"""
Data models for the NetTraffic engine.

Plain dataclasses shared by the link registry, the rate sampler and the
display policy. `DisplayConfig` is frozen: configuration changes replace the
whole snapshot instead of mutating fields in place.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Hashable, Optional

from nettraffic import constants
from nettraffic.constants import TrafficMode, SpeedUnit, Placement, DrawableState, TextSizeClass


@dataclass(frozen=True)
class Link:
    """
    A live network attachment.

    Attributes:
        handle: Opaque identifier, unique per attachment.
        interface_name: Kernel interface name, or None when the link has none yet.
    """
    handle: Hashable
    interface_name: Optional[str] = None


@dataclass(frozen=True)
class RateEstimate:
    """
    Throughput estimate for the current display tick.

    Attributes:
        tx_kbps: Transmit rate in kilobits per second.
        rx_kbps: Receive rate in kilobits per second.
    """
    tx_kbps: int = constants.network.rates.DEFAULT_KBPS
    rx_kbps: int = constants.network.rates.DEFAULT_KBPS


@dataclass
class SampleState:
    """
    Baseline of the previous counter sample.

    Attributes:
        last_tx_bytes: Aggregate transmitted bytes at the last sample.
        last_rx_bytes: Aggregate received bytes at the last sample.
        last_sample_time: Clock reading of the last sample, in milliseconds.
    """
    last_tx_bytes: int = 0
    last_rx_bytes: int = 0
    last_sample_time: float = 0.0


@dataclass(frozen=True)
class DisplayConfig:
    """
    Immutable snapshot of the indicator settings.

    `units` is typed as SpeedUnit but any value is tolerated; unrecognised
    units format as "unknown".
    """
    mode: TrafficMode = TrafficMode(constants.config.defaults.DEFAULT_MODE)
    auto_hide: bool = constants.config.defaults.DEFAULT_AUTO_HIDE
    auto_hide_threshold: int = constants.config.defaults.DEFAULT_AUTO_HIDE_THRESHOLD
    units: SpeedUnit = SpeedUnit(constants.config.defaults.DEFAULT_UNITS)
    show_units: bool = constants.config.defaults.DEFAULT_SHOW_UNITS
    refresh_interval: int = constants.config.defaults.DEFAULT_REFRESH_INTERVAL
    hide_arrows: bool = constants.config.defaults.DEFAULT_HIDE_ARROWS
    location: Placement = Placement(constants.config.defaults.DEFAULT_LOCATION)

    def __post_init__(self) -> None:
        """Rejects refresh intervals the tick scheduler cannot run."""
        low = constants.timers.MINIMUM_REFRESH_INTERVAL_SECONDS
        high = constants.timers.MAXIMUM_REFRESH_INTERVAL_SECONDS
        interval = self.refresh_interval
        if isinstance(interval, bool) or not isinstance(interval, (int, float)) or not (low <= interval <= high):
            raise ValueError(f"refresh_interval must be between {low} and {high} seconds, got {interval!r}")

    @property
    def refresh_interval_ms(self) -> int:
        return int(self.refresh_interval * constants.network.units.MS_PER_SECOND)


@dataclass(frozen=True)
class DisplayDecision:
    """
    Everything the render surface needs to reflect the latest processed event.

    Attributes:
        enabled: Traffic reporting is on and a network is reachable.
        is_active: The indicator should be shown, before placement and text checks.
        visible: Final visibility on the status bar slot.
        text: Formatted rate text; empty when nothing is shown.
        drawable_state: Arrow decoration to draw.
        text_size_class: One-line or two-line text size.
        next_delay_ms: Delay before the next tick, or None for no reschedule.
    """
    enabled: bool
    is_active: bool
    visible: bool
    text: str
    drawable_state: DrawableState
    text_size_class: TextSizeClass
    next_delay_ms: Optional[int]
