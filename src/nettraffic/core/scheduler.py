"""
Tick scheduling for NetTraffic.

The engine schedules its own ticks through a "schedule after delay" primitive.
`QtTickScheduler` is the default one: a single-shot QTimer owned by the
engine's thread, so its callback runs on the engine's event loop.
"""

import logging
from typing import Callable, Optional, Protocol

from PyQt6.QtCore import QObject, QTimer

logger = logging.getLogger("NetTraffic.QtTickScheduler")


class TickScheduler(Protocol):
    """Runs one callback after a delay; scheduling again replaces the pending one."""

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> None: ...

    def cancel(self) -> None: ...

    def is_pending(self) -> bool: ...


class QtTickScheduler(QObject):
    """
    Single-shot QTimer scheduler.

    At most one callback is pending at any time: `schedule()` stops the timer
    before re-arming it.
    """

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._callback: Optional[Callable[[], None]] = None
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> None:
        if delay_ms < 0:
            raise ValueError(f"Delay cannot be negative: {delay_ms}")
        self._timer.stop()
        self._callback = callback
        self._timer.start(delay_ms)
        logger.debug("Tick scheduled in %dms", delay_ms)

    def cancel(self) -> None:
        if self._timer.isActive():
            self._timer.stop()
            logger.debug("Pending tick cancelled")
        self._callback = None

    def is_pending(self) -> bool:
        return self._timer.isActive()

    def cleanup(self) -> None:
        """Stops the timer and schedules it for deletion."""
        self._callback = None
        self._timer.stop()
        try:
            self._timer.timeout.disconnect(self._fire)
        except TypeError:
            logger.debug("Tick timer already disconnected")
        self._timer.deleteLater()
        logger.debug("Tick timer scheduled for deletion")

    def _fire(self) -> None:
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()
