"""
Background link watcher for NetTraffic.

This module provides a QThread that polls the host's network interfaces via
psutil and reports links coming up, changing addresses and going away. It is
the desktop implementation of the link-change notifier: it only emits signals,
and the engine funnels them into its serialized event queue.
"""

import logging
import socket
import time
from typing import Dict, FrozenSet, Optional

import psutil
from PyQt6.QtCore import QThread, pyqtSignal

from nettraffic import constants

logger = logging.getLogger("NetTraffic.InterfaceWatcher")

_IP_FAMILIES = (socket.AF_INET, socket.AF_INET6)


def is_excluded_interface(name: str) -> bool:
    """True for loopback and pseudo interfaces that never carry user traffic."""
    lowered = name.lower()
    if lowered in constants.network.interface.EXCLUDED_NAMES:
        return True
    return any(kw in lowered for kw in constants.network.interface.EXCLUDED_KEYWORDS)


def _is_routable(address: str) -> bool:
    return not address.lower().startswith(constants.network.interface.NON_ROUTABLE_PREFIXES)


def is_connection_available() -> bool:
    """
    Reports whether any tracked interface is up and holds a routable address.

    Failures to query the OS degrade to False.
    """
    try:
        stats = psutil.net_if_stats()
        addrs = psutil.net_if_addrs()
    except (psutil.Error, OSError) as e:
        logger.warning("Connectivity query failed, assuming no connection: %s", e)
        return False

    for name, stat in stats.items():
        if not stat.isup or is_excluded_interface(name):
            continue
        if any(addr.family in _IP_FAMILIES and _is_routable(addr.address) for addr in addrs.get(name, [])):
            return True
    return False


class InterfaceWatcher(QThread):
    """
    Polls interface state and emits link events on changes.

    The interface name doubles as the link handle: an interface that goes
    down and comes back up is reported as a lost link followed by a new one.

    Signals:
        link_updated (object, object): Handle and interface name of a link that
            appeared or whose addresses changed.
        link_lost (object): Handle of a link that went down or disappeared.
        error_occurred (str): Emitted once when the circuit breaker trips.
    """
    link_updated = pyqtSignal(object, object)
    link_lost = pyqtSignal(object)
    error_occurred = pyqtSignal(str)

    def __init__(self, interval_ms: int = constants.timers.LINK_POLL_INTERVAL_MS) -> None:
        super().__init__()
        self.interval = max(constants.timers.MINIMUM_POLL_INTERVAL_MS, int(interval_ms)) / 1000.0
        self._is_running = True
        self.consecutive_errors = 0
        self._known: Dict[str, FrozenSet[str]] = {}
        logger.debug("InterfaceWatcher initialized with interval %.2fs", self.interval)

    def poll_once(self) -> None:
        """Compares the current interface state with the last poll and emits the differences."""
        current = self._read_links()

        for name in sorted(set(self._known) - set(current)):
            logger.info("Link '%s' lost", name)
            self.link_lost.emit(name)

        for name, addresses in sorted(current.items()):
            previous: Optional[FrozenSet[str]] = self._known.get(name)
            if previous is None:
                logger.info("Link '%s' available", name)
                self.link_updated.emit(name, name)
            elif previous != addresses:
                logger.debug("Link '%s' addresses changed", name)
                self.link_updated.emit(name, name)

        self._known = current

    def _read_links(self) -> Dict[str, FrozenSet[str]]:
        stats = psutil.net_if_stats()
        addrs = psutil.net_if_addrs()
        return {
            name: frozenset(addr.address for addr in addrs.get(name, []) if addr.address)
            for name, stat in stats.items()
            if stat.isup and not is_excluded_interface(name)
        }

    def run(self) -> None:
        """Main polling loop."""
        logger.debug("InterfaceWatcher starting loop...")
        max_errors = constants.timeouts.MAX_CONSECUTIVE_ERRORS

        while self._is_running:
            try:
                self.poll_once()
                if self.consecutive_errors > 0:
                    self.consecutive_errors = 0
            except (psutil.Error, OSError) as e:
                self.consecutive_errors += 1
                logger.error("Error polling interfaces (Attempt %d/%d): %s", self.consecutive_errors, max_errors, e)

                if self.consecutive_errors > max_errors:
                    logger.critical("Circuit breaker tripped. Stopping interface watcher.")
                    self.error_occurred.emit(f"Interface watcher failure: {e}")
                    self._is_running = False
                    break

            # Responsive sleep
            sleep_remaining = self.interval
            while sleep_remaining > 0 and self._is_running:
                sleep_slice = min(0.1, sleep_remaining)
                time.sleep(sleep_slice)
                sleep_remaining -= sleep_slice

    def stop(self) -> None:
        """Gracefully stops the polling loop."""
        self._is_running = False
        self.wait(constants.timeouts.WATCHER_THREAD_STOP_WAIT_MS)
        logger.info("InterfaceWatcher stopped.")
