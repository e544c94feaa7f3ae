"""Unit tests for NetTraffic constants.

Validates constant values across all constant groups for type correctness,
range validity, and consistency.
"""

import unittest

from nettraffic import constants
from nettraffic.constants import TrafficMode, SpeedUnit, Placement
from nettraffic.constants.network import RateConstants


class TestConstants(unittest.TestCase):
    """Tests for validating NetTraffic constants."""

    def test_config_defaults_are_valid_choices(self):
        """DEFAULT_CONFIG values must parse into the display enums."""
        defaults = constants.config.defaults.DEFAULT_CONFIG
        self.assertIsInstance(TrafficMode(defaults["mode"]), TrafficMode)
        self.assertIsInstance(SpeedUnit(defaults["units"]), SpeedUnit)
        self.assertIsInstance(Placement(defaults["location"]), Placement)
        self.assertGreaterEqual(defaults["refresh_interval"], constants.timers.MINIMUM_REFRESH_INTERVAL_SECONDS)

    def test_unit_constants(self):
        """Validate unit conversion factors and labels."""
        units = constants.network.units
        self.assertEqual(units.BITS_PER_BYTE, 8)
        self.assertEqual(units.KILOBITS_PER_MEGABYTE, units.KILOBITS_PER_MEGABIT * units.BITS_PER_BYTE)
        self.assertTrue(all(isinstance(label, str) and label for label in [
            units.KILOBITS_LABEL, units.MEGABITS_LABEL, units.KILOBYTES_LABEL, units.MEGABYTES_LABEL]))

    def test_debounce_factor(self):
        """The early-tick guard drops ticks closer than 95% of the interval."""
        self.assertEqual(constants.network.rates.DEBOUNCE_FACTOR, 0.95)

    def test_invalid_debounce_factor_is_rejected(self):
        """A constant group validates itself on instantiation."""
        class BrokenRates(RateConstants):
            DEBOUNCE_FACTOR = 1.5

        with self.assertRaises(ValueError):
            BrokenRates()

    def test_display_modes(self):
        """BOTH shows both directions, DISABLED shows none."""
        self.assertIn(TrafficMode.BOTH, constants.display.UPSTREAM_MODES)
        self.assertIn(TrafficMode.BOTH, constants.display.DOWNSTREAM_MODES)
        self.assertNotIn(TrafficMode.DISABLED, constants.display.UPSTREAM_MODES | constants.display.DOWNSTREAM_MODES)

    def test_log_constants(self):
        """Validate logging constants."""
        self.assertTrue(constants.logs.LOG_FILENAME)
        self.assertGreater(constants.logs.MAX_LOG_SIZE, 0)


if __name__ == "__main__":
    unittest.main()
