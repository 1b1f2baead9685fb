"""Sunrise/sunset adapter — implements SunCalculator via astral."""

from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo

from astral import Observer
from astral.sun import SunDirection, sunrise, sunset, time_at_elevation

from termday.ports.sun_port import AstroError

logger = logging.getLogger(__name__)


def _observer(longitude: float, latitude: float, elevation: float) -> Observer:
    if not -90.0 <= latitude <= 90.0:
        raise AstroError(f"Latitude out of range: {latitude}")
    if not -180.0 <= longitude <= 180.0:
        raise AstroError(f"Longitude out of range: {longitude}")
    return Observer(latitude=latitude, longitude=longitude, elevation=elevation)


class AstralSunCalculator:
    """astral implementation of SunCalculator.

    With refraction on, the standard apparent horizon (-0.833°) is used;
    with it off, the instant the sun's centre crosses the geometric horizon.
    """

    def _crossing(
        self,
        direction: SunDirection,
        day: date,
        longitude: float,
        latitude: float,
        elevation: float,
        refraction: bool,
        tz: tzinfo,
    ) -> datetime:
        observer = _observer(longitude, latitude, elevation)
        try:
            if not refraction:
                return time_at_elevation(observer, 0.0, day, direction, tz)
            if direction == SunDirection.RISING:
                return sunrise(observer, date=day, tzinfo=tz)
            return sunset(observer, date=day, tzinfo=tz)
        except ValueError as exc:
            # astral raises ValueError when the sun never reaches the horizon
            logger.debug("astral failed for %s at (%s, %s): %s", day, latitude, longitude, exc)
            raise AstroError(str(exc)) from exc

    def rise_time(
        self,
        day: date,
        longitude: float,
        latitude: float,
        elevation: float,
        refraction: bool,
        tz: tzinfo,
    ) -> datetime:
        return self._crossing(
            SunDirection.RISING, day, longitude, latitude, elevation, refraction, tz,
        )

    def set_time(
        self,
        day: date,
        longitude: float,
        latitude: float,
        elevation: float,
        refraction: bool,
        tz: tzinfo,
    ) -> datetime:
        return self._crossing(
            SunDirection.SETTING, day, longitude, latitude, elevation, refraction, tz,
        )
