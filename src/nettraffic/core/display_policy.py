"""
Display policy for NetTraffic.

Turns the current rate estimate, the configuration snapshot and the
connectivity/attachment state into a `DisplayDecision`: whether the indicator
is shown, the text to render, the arrow decoration and when to sample next.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Tuple

from nettraffic import constants
from nettraffic.constants import TrafficMode, SpeedUnit, DrawableState, TextSizeClass
from nettraffic.core.models import DisplayConfig, DisplayDecision, RateEstimate

logger = logging.getLogger("NetTraffic.DisplayPolicy")

_UNIT_LABELS: Dict[SpeedUnit, str] = {
    SpeedUnit.KILOBITS: constants.network.units.KILOBITS_LABEL,
    SpeedUnit.MEGABITS: constants.network.units.MEGABITS_LABEL,
    SpeedUnit.KILOBYTES: constants.network.units.KILOBYTES_LABEL,
    SpeedUnit.MEGABYTES: constants.network.units.MEGABYTES_LABEL,
}

_ARROWS: Dict[TrafficMode, DrawableState] = {
    TrafficMode.BOTH: DrawableState.UP_AND_DOWN,
    TrafficMode.UPSTREAM: DrawableState.UP_ONLY,
    TrafficMode.DOWNSTREAM: DrawableState.DOWN_ONLY,
}

_ONE_DECIMAL = Decimal("0.1")
_TWO_DECIMALS = Decimal("0.01")


def _round_half_up(kbps: int, divisor: int, places: Decimal) -> str:
    """Divides exactly and rounds halves away from zero, e.g. 1250 / 1000 -> "1.3"."""
    return f"{(Decimal(kbps) / Decimal(divisor)).quantize(places, rounding=ROUND_HALF_UP):f}"


def format_value(kbps: int, units: SpeedUnit) -> Tuple[str, str]:
    """
    Formats a kbps rate in the given unit.

    Returns:
        Tuple[str, str]: The formatted value and its unit label. Unknown units
        yield ("unknown", "unknown").

    Examples:
        >>> format_value(1500, SpeedUnit.MEGABITS)
        ('1.5', 'Mb/s')
        >>> format_value(4000, SpeedUnit.KILOBYTES)
        ('500', 'kB/s')
    """
    u = constants.network.units
    if units is SpeedUnit.KILOBITS:
        value = f"{kbps:d}"
    elif units is SpeedUnit.MEGABITS:
        value = _round_half_up(kbps, u.KILOBITS_PER_MEGABIT, _ONE_DECIMAL)
    elif units is SpeedUnit.KILOBYTES:
        value = f"{kbps // u.BITS_PER_BYTE:d}"
    elif units is SpeedUnit.MEGABYTES:
        value = _round_half_up(kbps, u.KILOBITS_PER_MEGABYTE, _TWO_DECIMALS)
    else:
        logger.warning("Unrecognised unit %r", units)
        return u.UNKNOWN_LABEL, u.UNKNOWN_LABEL
    return value, _UNIT_LABELS[units]


def format_output(kbps: int, units: SpeedUnit, show_units: bool) -> str:
    """Formats a kbps rate, appending the unit label after a space when `show_units` is set."""
    value, label = format_value(kbps, units)
    if show_units:
        return f"{value}{constants.display.UNIT_SEPARATOR}{label}"
    return value


class DisplayPolicy:
    """
    Stateless decision function for the indicator.

    The placement rule (visible only on the status bar slot) is applied here
    as well, but `is_active` and `text` are exposed so a surface with its own
    placement logic can ignore `visible`.
    """

    def decide(self, rates: RateEstimate, config: DisplayConfig,
               connection_available: bool, attached: bool) -> DisplayDecision:
        mode = config.mode
        enabled = mode is not TrafficMode.DISABLED and connection_available

        show_upstream = mode in constants.display.UPSTREAM_MODES
        show_downstream = mode in constants.display.DOWNSTREAM_MODES
        threshold = config.auto_hide_threshold
        above_threshold = ((show_upstream and rates.tx_kbps > threshold)
                           or (show_downstream and rates.rx_kbps > threshold))
        is_active = attached and (not config.auto_hide or (connection_available and above_threshold))

        text = constants.display.EMPTY_TEXT
        text_size_class = TextSizeClass.SINGLE
        if enabled and is_active:
            parts = []
            if show_upstream:
                parts.append(format_output(rates.tx_kbps, config.units, config.show_units))
            if show_downstream:
                parts.append(format_output(rates.rx_kbps, config.units, config.show_units))
            if show_upstream and show_downstream:
                text_size_class = TextSizeClass.MULTI
            text = constants.display.LINE_SEPARATOR.join(parts)

        visible = (is_active and text != constants.display.EMPTY_TEXT
                   and config.location is constants.display.VISIBLE_PLACEMENT)

        drawable_state = DrawableState.NONE
        if visible and not config.hide_arrows:
            drawable_state = _ARROWS.get(mode, DrawableState.NONE)

        next_delay_ms = config.refresh_interval_ms if enabled else None

        return DisplayDecision(
            enabled=enabled,
            is_active=is_active,
            visible=visible,
            text=text,
            drawable_state=drawable_state,
            text_size_class=text_size_class,
            next_delay_ms=next_delay_ms,
        )
