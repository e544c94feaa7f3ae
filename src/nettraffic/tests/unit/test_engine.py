"""
Unit tests for the TrafficEngine class.

Messages are mostly fed straight into `process_message` so each test controls
the exact event order; the queued path is covered by posting and pumping the
Qt event loop.
"""

from dataclasses import replace
from typing import Callable, Optional, Tuple
from unittest.mock import MagicMock

import pytest

from nettraffic.constants import TrafficMode, SpeedUnit, Placement
from nettraffic.core.engine import TrafficEngine, EngineMessage, MessageKind
from nettraffic.core.models import DisplayConfig, RateEstimate


class FakeScheduler:
    """Records the pending tick instead of arming a timer."""
    def __init__(self) -> None:
        self.pending: Optional[Tuple[int, Callable[[], None]]] = None
        self.cancel_count = 0

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> None:
        self.pending = (delay_ms, callback)

    def cancel(self) -> None:
        self.cancel_count += 1
        self.pending = None

    def is_pending(self) -> bool:
        return self.pending is not None


class FakeClock:
    def __init__(self, now: float = 10_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def counters() -> MagicMock:
    source = MagicMock()
    source.tx_bytes.return_value = 0
    source.rx_bytes.return_value = 0
    source.offload_counters.return_value = (0, 0)
    return source


@pytest.fixture
def config() -> DisplayConfig:
    return DisplayConfig(mode=TrafficMode.BOTH, auto_hide=False, units=SpeedUnit.KILOBITS,
                         show_units=False, refresh_interval=1, location=Placement.STATUS_BAR)


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def connectivity() -> MagicMock:
    return MagicMock(return_value=True)


@pytest.fixture
def engine(q_app, counters, config, scheduler, clock, connectivity) -> TrafficEngine:
    eng = TrafficEngine(counters, config, scheduler=scheduler, connectivity=connectivity, clock=clock)
    eng.decisions = MagicMock()
    eng.display_updated.connect(eng.decisions)
    yield eng
    eng.cleanup()


def send(engine: TrafficEngine, kind: MessageKind, payload=None) -> None:
    engine.process_message(EngineMessage(kind, payload))


def test_attach_emits_decision_and_schedules_tick(engine, scheduler):
    send(engine, MessageKind.ATTACH)

    engine.decisions.assert_called_once()
    decision = engine.decisions.call_args[0][0]
    assert decision.enabled and decision.is_active
    assert scheduler.pending[0] == 1000
    assert engine.is_scheduled


def test_no_connection_stays_idle(engine, scheduler, connectivity):
    connectivity.return_value = False

    send(engine, MessageKind.ATTACH)

    assert not engine.last_decision.enabled
    assert not engine.is_scheduled


def test_connectivity_failure_degrades_to_unavailable(engine, connectivity):
    connectivity.side_effect = OSError("probe failed")

    send(engine, MessageKind.ATTACH)

    assert engine.connection_available is False
    assert not engine.is_scheduled


def test_tick_computes_rates_and_reschedules(engine, counters, clock, scheduler):
    counters.tx_bytes.return_value = 1_000
    counters.rx_bytes.return_value = 1_000
    send(engine, MessageKind.LINK_UPDATED, ("net-1", "wlan0"))
    send(engine, MessageKind.ATTACH)

    send(engine, MessageKind.TICK)
    assert engine.sampler.estimate == RateEstimate(0, 0)

    clock.now += 1000
    counters.tx_bytes.return_value = 1_000 + 125_000
    counters.rx_bytes.return_value = 1_000 + 12_500
    send(engine, MessageKind.TICK)

    assert engine.sampler.estimate == RateEstimate(tx_kbps=1000, rx_kbps=100)
    assert engine.last_decision.text == "1000\n100"
    assert scheduler.pending[0] == 1000


def test_link_event_zeroes_next_tick(engine, counters, clock):
    send(engine, MessageKind.LINK_UPDATED, ("net-1", "wlan0"))
    send(engine, MessageKind.ATTACH)
    send(engine, MessageKind.TICK)

    clock.now += 1000
    counters.tx_bytes.return_value = 125_000
    send(engine, MessageKind.TICK)
    assert engine.sampler.estimate.tx_kbps == 1000

    send(engine, MessageKind.LINK_LOST, "unknown-handle")
    clock.now += 1000
    counters.tx_bytes.return_value = 250_000
    send(engine, MessageKind.TICK)

    assert engine.sampler.estimate == RateEstimate(0, 0)


def test_link_events_do_not_emit(engine):
    send(engine, MessageKind.LINK_UPDATED, ("net-1", "wlan0"))
    send(engine, MessageKind.LINK_LOST, "net-1")

    engine.decisions.assert_not_called()
    assert len(engine.registry) == 0


def test_detach_cancels_tick_and_drops_stale_ticks(engine, scheduler, counters):
    send(engine, MessageKind.ATTACH)
    assert engine.is_scheduled

    send(engine, MessageKind.DETACH)

    assert not engine.is_scheduled
    assert not engine.last_decision.is_active
    assert not engine.last_decision.visible

    counters.offload_counters.reset_mock()
    send(engine, MessageKind.TICK)
    counters.offload_counters.assert_not_called()
    assert not engine.is_scheduled


def test_screen_off_cancels_and_suppresses_scheduling(engine, scheduler):
    send(engine, MessageKind.ATTACH)

    send(engine, MessageKind.SCREEN_CHANGED, (False, False))
    assert not engine.is_scheduled

    send(engine, MessageKind.UPDATE_VIEW)
    assert not engine.is_scheduled

    send(engine, MessageKind.SCREEN_CHANGED, (True, False))
    assert engine.is_scheduled


def test_dozing_counts_as_screen_off(engine):
    send(engine, MessageKind.ATTACH)

    send(engine, MessageKind.SCREEN_CHANGED, (True, True))

    assert engine.screen_on is False
    assert not engine.is_scheduled


def test_config_change_to_disabled_goes_idle(engine, config):
    send(engine, MessageKind.ATTACH)

    send(engine, MessageKind.CONFIG_CHANGED, replace(config, mode=TrafficMode.DISABLED))

    assert not engine.last_decision.visible
    assert not engine.is_scheduled


def test_config_change_updates_refresh_interval(engine, config, scheduler):
    send(engine, MessageKind.ATTACH)

    send(engine, MessageKind.CONFIG_CHANGED, replace(config, refresh_interval=5))

    assert engine.sampler.refresh_interval_ms == 5000
    assert scheduler.pending[0] == 5000


def test_connectivity_change_with_explicit_state(engine, connectivity):
    send(engine, MessageKind.ATTACH)
    connectivity.reset_mock()

    send(engine, MessageKind.CONNECTIVITY_CHANGED, False)

    connectivity.assert_not_called()
    assert not engine.last_decision.enabled
    assert not engine.is_scheduled


def test_reschedule_cancels_previous_tick(engine, scheduler):
    send(engine, MessageKind.ATTACH)
    cancels = scheduler.cancel_count

    send(engine, MessageKind.UPDATE_VIEW)

    assert scheduler.cancel_count == cancels + 1
    assert engine.is_scheduled


def test_posted_messages_are_processed_in_order(engine, q_app):
    engine.link_updated("net-1", "wlan0")
    engine.link_lost("net-1")
    engine.link_updated("net-2", "eth0")

    assert len(engine.registry) == 0  # nothing happens before the loop runs
    q_app.processEvents()

    assert "net-1" not in engine.registry
    assert engine.registry.get("net-2").interface_name == "eth0"


def test_scheduled_tick_is_posted_through_queue(engine, scheduler, q_app, counters):
    engine.attach()
    q_app.processEvents()
    _delay, callback = scheduler.pending
    counters.offload_counters.reset_mock()

    callback()
    counters.offload_counters.assert_not_called()
    q_app.processEvents()

    counters.offload_counters.assert_called_once()
