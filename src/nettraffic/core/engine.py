"""
Traffic engine for NetTraffic.

This module defines the TrafficEngine, the single serialized event loop that
owns the link registry, the rate sampler and the display policy. Every input
(periodic ticks, link events, configuration snapshots, connectivity and screen
changes, attach/detach) is posted as an `EngineMessage` through one queued Qt
signal and processed one at a time, in arrival order, on the engine's thread.
Notifier threads never touch engine state directly.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Hashable, Optional

from PyQt6.QtCore import QObject, Qt, pyqtSignal, pyqtSlot

from nettraffic.core.display_policy import DisplayPolicy
from nettraffic.core.link_registry import LinkRegistry
from nettraffic.core.link_watcher import is_connection_available
from nettraffic.core.models import DisplayConfig, DisplayDecision
from nettraffic.core.rate_sampler import CounterSource, RateSampler
from nettraffic.core.scheduler import QtTickScheduler, TickScheduler

logger = logging.getLogger("NetTraffic.TrafficEngine")


def monotonic_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.monotonic() * 1000.0


class MessageKind(Enum):
    """Kinds of events processed by the engine."""
    TICK = auto()
    UPDATE_VIEW = auto()
    LINK_UPDATED = auto()
    LINK_LOST = auto()
    CONFIG_CHANGED = auto()
    CONNECTIVITY_CHANGED = auto()
    SCREEN_CHANGED = auto()
    ATTACH = auto()
    DETACH = auto()


@dataclass(frozen=True)
class EngineMessage:
    kind: MessageKind
    payload: Any = None


class TrafficEngine(QObject):
    """
    Serialized sampling and display loop.

    Signals:
        display_updated (DisplayDecision): Emitted after every processed
            message that recomputes the display.
    """
    display_updated = pyqtSignal(object)
    _message_posted = pyqtSignal(object)

    def __init__(self, counters: CounterSource, config: Optional[DisplayConfig] = None, *,
                 scheduler: Optional[TickScheduler] = None,
                 connectivity: Optional[Callable[[], bool]] = None,
                 clock: Optional[Callable[[], float]] = None,
                 parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.logger = logger
        self.config: DisplayConfig = config or DisplayConfig()
        self.registry = LinkRegistry()
        self.sampler = RateSampler(self.registry, counters, self.config.refresh_interval_ms)
        self.policy = DisplayPolicy()
        self.scheduler: TickScheduler = scheduler if scheduler is not None else QtTickScheduler(self)
        self._connectivity = connectivity or is_connection_available
        self._clock = clock or monotonic_ms

        self.attached: bool = False
        self.screen_on: bool = True
        self.connection_available: bool = False
        self.last_decision: Optional[DisplayDecision] = None

        self._handlers = {
            MessageKind.TICK: self._handle_tick,
            MessageKind.UPDATE_VIEW: self._handle_update_view,
            MessageKind.LINK_UPDATED: self._handle_link_updated,
            MessageKind.LINK_LOST: self._handle_link_lost,
            MessageKind.CONFIG_CHANGED: self._handle_config_changed,
            MessageKind.CONNECTIVITY_CHANGED: self._handle_connectivity_changed,
            MessageKind.SCREEN_CHANGED: self._handle_screen_changed,
            MessageKind.ATTACH: self._handle_attach,
            MessageKind.DETACH: self._handle_detach,
        }
        self._message_posted.connect(self.process_message, Qt.ConnectionType.QueuedConnection)
        self.logger.info("TrafficEngine initialized.")

    # --- Posting API (safe from any thread) ---

    def post(self, message: EngineMessage) -> None:
        """Queues a message for processing on the engine's thread."""
        self._message_posted.emit(message)

    def link_updated(self, handle: Hashable, interface_name: Optional[str]) -> None:
        self.post(EngineMessage(MessageKind.LINK_UPDATED, (handle, interface_name)))

    def link_lost(self, handle: Hashable) -> None:
        self.post(EngineMessage(MessageKind.LINK_LOST, handle))

    def apply_config(self, config: DisplayConfig) -> None:
        """Replaces the configuration snapshot wholesale and recomputes."""
        self.post(EngineMessage(MessageKind.CONFIG_CHANGED, config))

    def connectivity_changed(self, available: Optional[bool] = None) -> None:
        """Recomputes with a new connectivity state; None re-queries the probe."""
        self.post(EngineMessage(MessageKind.CONNECTIVITY_CHANGED, available))

    def set_screen_state(self, screen_on: bool, dozing: bool = False) -> None:
        self.post(EngineMessage(MessageKind.SCREEN_CHANGED, (screen_on, dozing)))

    def request_update(self) -> None:
        self.post(EngineMessage(MessageKind.UPDATE_VIEW))

    def attach(self) -> None:
        self.post(EngineMessage(MessageKind.ATTACH))

    def detach(self) -> None:
        self.post(EngineMessage(MessageKind.DETACH))

    @property
    def is_scheduled(self) -> bool:
        return self.scheduler.is_pending()

    # --- Event loop ---

    @pyqtSlot(object)
    def process_message(self, message: EngineMessage) -> None:
        """Processes one message. Only ever runs on the engine's thread."""
        self.logger.debug("Processing %s", message.kind.name)
        self._handlers[message.kind](message.payload)

    def _handle_tick(self, _payload: Any) -> None:
        if not (self.attached and self.screen_on):
            self.logger.debug("Dropping tick while detached or asleep")
            return
        self.sampler.tick(self._clock())
        self._display_and_reschedule()

    def _handle_update_view(self, _payload: Any) -> None:
        self._display_and_reschedule()

    def _handle_link_updated(self, payload: Any) -> None:
        handle, interface_name = payload
        self.registry.add_or_update(handle, interface_name)

    def _handle_link_lost(self, handle: Any) -> None:
        self.registry.remove(handle)

    def _handle_config_changed(self, config: DisplayConfig) -> None:
        self.config = config
        self.sampler.set_refresh_interval(config.refresh_interval_ms)
        self.connection_available = self._query_connectivity()
        self.logger.debug("Configuration snapshot applied: %s", config)
        self._display_and_reschedule()

    def _handle_connectivity_changed(self, available: Optional[bool]) -> None:
        self.connection_available = self._query_connectivity() if available is None else available
        self.logger.debug("Connectivity changed: available=%s", self.connection_available)
        self._display_and_reschedule()

    def _handle_screen_changed(self, payload: Any) -> None:
        screen_on, dozing = payload
        self.screen_on = screen_on and not dozing
        if self.screen_on:
            self.logger.debug("Display awake, resuming updates")
            self.connection_available = self._query_connectivity()
            self._display_and_reschedule()
        else:
            self.logger.debug("Display off or dozing, suspending updates")
            self.scheduler.cancel()

    def _handle_attach(self, _payload: Any) -> None:
        self.attached = True
        self.connection_available = self._query_connectivity()
        self.logger.info("Display surface attached")
        self._display_and_reschedule()

    def _handle_detach(self, _payload: Any) -> None:
        self.attached = False
        self.scheduler.cancel()
        self.logger.info("Display surface detached")
        self._display_and_reschedule()

    def _display_and_reschedule(self) -> None:
        decision = self.policy.decide(self.sampler.estimate, self.config,
                                      self.connection_available, self.attached)
        self.last_decision = decision
        self.display_updated.emit(decision)

        self.scheduler.cancel()
        if decision.next_delay_ms is not None and self.attached and self.screen_on:
            self.scheduler.schedule(decision.next_delay_ms, self._on_tick_due)

    def _on_tick_due(self) -> None:
        self.post(EngineMessage(MessageKind.TICK))

    def _query_connectivity(self) -> bool:
        try:
            return bool(self._connectivity())
        except Exception as e:
            self.logger.error("Connectivity query failed, treating as unavailable: %s", e, exc_info=True)
            return False

    def cleanup(self) -> None:
        """Cancels the pending tick and stops scheduling."""
        self.attached = False
        self.scheduler.cancel()
        if isinstance(self.scheduler, QtTickScheduler):
            self.scheduler.cleanup()
        self.logger.debug("Engine cleanup completed.")
