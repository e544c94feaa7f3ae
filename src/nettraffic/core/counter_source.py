"""
psutil-backed byte counters for NetTraffic.
"""

import logging
from typing import Dict, Optional, Tuple

import psutil

from nettraffic import constants

logger = logging.getLogger("NetTraffic.PsutilCounterSource")


class PsutilCounterSource:
    """
    Reads cumulative per-interface byte counters from psutil.

    One per-interface snapshot is taken per `refresh()`, so every read within a
    sample sees the same counters. Reads are best-effort: a missing interface
    or a failed snapshot counts as zero. Desktop hosts have no hardware
    forwarding path whose traffic bypasses the interface counters, so the
    offload counters are always zero.
    """

    def __init__(self) -> None:
        self._snapshot: Optional[Dict[str, "psutil._common.snetio"]] = None

    def refresh(self) -> None:
        """Takes a fresh snapshot of all interface counters."""
        try:
            self._snapshot = psutil.net_io_counters(pernic=True)
        except (psutil.AccessDenied, OSError) as e:
            logger.error("Failed to read network I/O counters: %s", e)
            self._snapshot = {}

    def tx_bytes(self, interface_name: str) -> int:
        counters = self._fetch(interface_name)
        return counters.bytes_sent if counters is not None else 0

    def rx_bytes(self, interface_name: str) -> int:
        counters = self._fetch(interface_name)
        return counters.bytes_recv if counters is not None else 0

    def offload_counters(self) -> Tuple[int, int]:
        return constants.network.interface.NO_OFFLOAD_COUNTERS

    def _fetch(self, interface_name: str) -> Optional["psutil._common.snetio"]:
        if self._snapshot is None:
            self.refresh()
        counters = self._snapshot.get(interface_name)
        if counters is None:
            logger.debug("No counters reported for interface '%s'", interface_name)
        return counters
