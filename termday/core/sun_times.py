"""Sunrise/sunset countdown logic.

Today's sunrise and sunset are computed in the location's fixed-offset
timezone. Whichever has already passed is replaced by tomorrow's, and the
closer of the two is shown as a countdown.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from termday.ports.sun_port import AstroError

if TYPE_CHECKING:
    from termday.data.models import Location
    from termday.ports.sun_port import SunCalculator

logger = logging.getLogger(__name__)

_OBSERVER_ELEVATION = 0.0


@dataclass
class NextSunTime:
    instant: datetime
    is_next_day: bool


@dataclass
class SunCountdown:
    """The sun event to count down to."""

    is_sunrise: bool
    instant: datetime
    remaining: timedelta
    is_next_day: bool             # "next" rather than "this" sunrise/sunset

    @property
    def hours(self) -> int:
        return int(self.remaining.total_seconds() // 3600)

    @property
    def minutes(self) -> int:
        return int(self.remaining.total_seconds() // 60) % 60


def calculate_sun_times(
    location: Location, when: datetime, calculator: SunCalculator,
) -> tuple[datetime, datetime]:
    """Return (sunrise, sunset) for the local day of *when* at *location*.

    Raises AstroError from the calculator.
    """
    tz = location.tzinfo()
    day = when.astimezone(tz).date()
    sunrise = calculator.rise_time(
        day, location.longitude, location.latitude, _OBSERVER_ELEVATION, True, tz,
    )
    sunset = calculator.set_time(
        day, location.longitude, location.latitude, _OBSERVER_ELEVATION, True, tz,
    )
    return sunrise.astimezone(tz), sunset.astimezone(tz)


def pick_next(
    instant_today: datetime,
    now: datetime,
    location: Location,
    is_sunrise: bool,
    calculator: SunCalculator,
) -> NextSunTime:
    """Keep today's instant if still ahead of *now*, else use tomorrow's."""
    if instant_today > now:
        return NextSunTime(instant_today, is_next_day=False)

    sunrise, sunset = calculate_sun_times(location, now + timedelta(hours=24), calculator)
    return NextSunTime(sunrise if is_sunrise else sunset, is_next_day=True)


def sun_countdown(
    location: Location, now: datetime, calculator: SunCalculator,
) -> SunCountdown | None:
    """Pick the closer of the next sunrise and next sunset.

    Returns None when the sun times cannot be computed (polar day/night,
    invalid coordinates).
    """
    try:
        sunrise, sunset = calculate_sun_times(location, now, calculator)
        next_rise = pick_next(sunrise, now, location, True, calculator)
        next_set = pick_next(sunset, now, location, False, calculator)
    except AstroError as exc:
        logger.info("Sun times unavailable for %s: %s", location, exc)
        return None

    rise_delta = next_rise.instant - now
    set_delta = next_set.instant - now
    if rise_delta < set_delta:
        return SunCountdown(True, next_rise.instant, rise_delta, next_rise.is_next_day)
    return SunCountdown(False, next_set.instant, set_delta, next_set.is_next_day)
