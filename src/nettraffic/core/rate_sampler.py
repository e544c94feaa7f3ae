"""
Rate sampler for NetTraffic.

This module defines the RateSampler, which sums cumulative byte counters across
all registered links plus the offload counters and turns consecutive samples
into a kbps estimate for transmit and receive.
"""

import logging
from typing import Optional, Protocol, Tuple

from nettraffic import constants
from nettraffic.core.link_registry import LinkRegistry
from nettraffic.core.models import RateEstimate, SampleState

logger = logging.getLogger("NetTraffic.RateSampler")


class CounterSource(Protocol):
    """Cumulative byte counters, per interface and for offloaded traffic."""

    def refresh(self) -> None: ...

    def tx_bytes(self, interface_name: str) -> int: ...

    def rx_bytes(self, interface_name: str) -> int: ...

    def offload_counters(self) -> Tuple[int, int]: ...


class RateSampler:
    """
    Computes throughput from cumulative counters on a fixed cadence.

    Attributes:
        registry: Source of the interface names to sample.
        counters: Byte counter reader.
        refresh_interval_ms: Expected distance between ticks.
        state: Baseline of the previous sample.
        estimate: Most recent valid rate estimate.
    """

    def __init__(self, registry: LinkRegistry, counters: CounterSource,
                 refresh_interval_ms: Optional[int] = None) -> None:
        self.registry = registry
        self.counters = counters
        if refresh_interval_ms is None:
            refresh_interval_ms = (constants.config.defaults.DEFAULT_REFRESH_INTERVAL
                                   * constants.network.units.MS_PER_SECOND)
        self.refresh_interval_ms: int = refresh_interval_ms
        self.state = SampleState()
        self.estimate = RateEstimate()
        self._tick_counter: int = 0

    def set_refresh_interval(self, refresh_interval_ms: int) -> None:
        if refresh_interval_ms != self.refresh_interval_ms:
            logger.debug("Refresh interval changed from %dms to %dms", self.refresh_interval_ms, refresh_interval_ms)
            self.refresh_interval_ms = refresh_interval_ms

    def tick(self, now: float) -> RateEstimate:
        """
        Takes a sample at `now` (milliseconds) and returns the current estimate.

        A tick arriving too soon after the previous sample is dropped. A tick
        following a change of the link set reports zero, since the summed
        counters jumped with the set. A negative delta (counter reset) keeps the
        previous estimate. Whenever the tick is not dropped the baseline moves
        to the new sample.
        """
        time_delta = now - self.state.last_sample_time
        if time_delta < self.refresh_interval_ms * constants.network.rates.DEBOUNCE_FACTOR:
            logger.debug("Tick %.1fms after the previous sample is too early, ignoring", time_delta)
            return self.estimate

        tx_bytes, rx_bytes = self._read_totals()
        tx_delta = tx_bytes - self.state.last_tx_bytes
        rx_delta = rx_bytes - self.state.last_rx_bytes
        links_changed = self.registry.consume_changed_flag()

        if not links_changed and time_delta > 0 and tx_delta >= 0 and rx_delta >= 0:
            self.estimate = RateEstimate(
                tx_kbps=self._to_kbps(tx_delta, time_delta),
                rx_kbps=self._to_kbps(rx_delta, time_delta),
            )
        elif links_changed:
            logger.debug("Link set changed since the last sample, reporting zero rates")
            self.estimate = RateEstimate(tx_kbps=0, rx_kbps=0)
        else:
            logger.info("Counter reset detected (tx delta=%d, rx delta=%d), keeping previous estimate",
                        tx_delta, rx_delta)

        self.state.last_tx_bytes = tx_bytes
        self.state.last_rx_bytes = rx_bytes
        self.state.last_sample_time = now

        self._tick_counter += 1
        if self._tick_counter % constants.logs.RATE_LOGGING_FREQUENCY == 0:
            logger.debug("Rates: tx=%d kbps, rx=%d kbps", self.estimate.tx_kbps, self.estimate.rx_kbps)
        return self.estimate

    def _read_totals(self) -> Tuple[int, int]:
        """Sums tx/rx bytes over every registered interface plus the offload counters."""
        self.counters.refresh()
        tx_total = 0
        rx_total = 0
        for name in self.registry.snapshot_interface_names():
            tx_total += self.counters.tx_bytes(name)
            rx_total += self.counters.rx_bytes(name)
        offload_tx, offload_rx = self.counters.offload_counters()
        return tx_total + offload_tx, rx_total + offload_rx

    @staticmethod
    def _to_kbps(byte_delta: int, time_delta_ms: float) -> int:
        """Bytes over `time_delta_ms` to kilobits per second, truncated."""
        seconds = time_delta_ms / constants.network.units.MS_PER_SECOND
        units = constants.network.units
        return int(byte_delta * units.BITS_PER_BYTE / units.BITS_PER_KILOBIT / seconds)
