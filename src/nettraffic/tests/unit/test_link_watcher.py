"""
Unit tests for the InterfaceWatcher thread and the connectivity probe.
"""

import socket
import time
from unittest.mock import MagicMock, patch

import pytest

from nettraffic.core.link_watcher import InterfaceWatcher, is_connection_available, is_excluded_interface


def stat(isup: bool = True) -> MagicMock:
    return MagicMock(isup=isup)


def addr(address: str, family=socket.AF_INET) -> MagicMock:
    return MagicMock(family=family, address=address)


def patch_interfaces(stats, addrs):
    return (
        patch('nettraffic.core.link_watcher.psutil.net_if_stats', return_value=stats),
        patch('nettraffic.core.link_watcher.psutil.net_if_addrs', return_value=addrs),
    )


@pytest.mark.parametrize("name, excluded", [
    ("lo", True),
    ("Loopback Pseudo-Interface 1", True),
    ("Teredo Tunneling Pseudo-Interface", True),
    ("wlo1", False),
    ("eth0", False),
])
def test_is_excluded_interface(name, excluded):
    assert is_excluded_interface(name) is excluded


def test_connection_available_with_routable_address():
    stats_patch, addrs_patch = patch_interfaces(
        {"lo": stat(), "wlan0": stat()},
        {"lo": [addr("127.0.0.1")], "wlan0": [addr("192.168.1.20")]},
    )
    with stats_patch, addrs_patch:
        assert is_connection_available() is True


def test_connection_unavailable_with_only_link_local_or_mac():
    stats_patch, addrs_patch = patch_interfaces(
        {"eth0": stat()},
        {"eth0": [addr("169.254.3.4"), addr("fe80::1%eth0", socket.AF_INET6), addr("aa:bb:cc:dd:ee:ff", family=-1)]},
    )
    with stats_patch, addrs_patch:
        assert is_connection_available() is False


def test_connection_unavailable_when_interface_down():
    stats_patch, addrs_patch = patch_interfaces({"eth0": stat(isup=False)}, {"eth0": [addr("10.0.0.2")]})
    with stats_patch, addrs_patch:
        assert is_connection_available() is False


def test_connection_query_failure_degrades_to_false():
    with patch('nettraffic.core.link_watcher.psutil.net_if_stats', side_effect=OSError("boom")):
        assert is_connection_available() is False


class TestInterfaceWatcher:

    @pytest.fixture
    def watcher(self, q_app):
        """Creates a watcher with a very short interval and mock slots attached."""
        thread = InterfaceWatcher(interval_ms=10)
        thread.updated = MagicMock()
        thread.lost = MagicMock()
        thread.link_updated.connect(thread.updated)
        thread.link_lost.connect(thread.lost)
        yield thread
        if thread.isRunning():
            thread.stop()

    def test_new_interface_reported_as_updated(self, watcher):
        stats_patch, addrs_patch = patch_interfaces(
            {"lo": stat(), "wlan0": stat()}, {"wlan0": [addr("192.168.1.20")]})
        with stats_patch, addrs_patch:
            watcher.poll_once()

        watcher.updated.assert_called_once_with("wlan0", "wlan0")
        watcher.lost.assert_not_called()

    def test_unchanged_interface_not_reported_again(self, watcher):
        stats_patch, addrs_patch = patch_interfaces({"wlan0": stat()}, {"wlan0": [addr("192.168.1.20")]})
        with stats_patch, addrs_patch:
            watcher.poll_once()
            watcher.poll_once()

        watcher.updated.assert_called_once()

    def test_address_change_reported_as_updated(self, watcher):
        stats_patch, addrs_patch = patch_interfaces({"wlan0": stat()}, {"wlan0": [addr("192.168.1.20")]})
        with stats_patch, addrs_patch:
            watcher.poll_once()
        stats_patch, addrs_patch = patch_interfaces({"wlan0": stat()}, {"wlan0": [addr("10.0.0.7")]})
        with stats_patch, addrs_patch:
            watcher.poll_once()

        assert watcher.updated.call_count == 2

    def test_interface_down_reported_as_lost(self, watcher):
        stats_patch, addrs_patch = patch_interfaces({"wlan0": stat()}, {"wlan0": [addr("192.168.1.20")]})
        with stats_patch, addrs_patch:
            watcher.poll_once()
        stats_patch, addrs_patch = patch_interfaces({"wlan0": stat(isup=False)}, {"wlan0": []})
        with stats_patch, addrs_patch:
            watcher.poll_once()

        watcher.lost.assert_called_once_with("wlan0")

    def test_circuit_breaker_trips(self, watcher):
        """More than MAX_CONSECUTIVE_ERRORS failures stop the thread."""
        with patch('nettraffic.core.link_watcher.psutil.net_if_stats', side_effect=OSError("Persistent Error")):
            watcher.start()
            watcher.wait(3000)
            if watcher.isRunning():
                watcher.stop()

            assert watcher.consecutive_errors > 10
            assert not watcher._is_running

    def test_successful_poll_resets_error_count(self, watcher):
        stats_patch, addrs_patch = patch_interfaces({}, {})
        with stats_patch, addrs_patch:
            watcher.consecutive_errors = 5
            watcher.start()
            time.sleep(0.05)
            watcher.stop()

        assert watcher.consecutive_errors == 0
