"""Sun calculator port — abstract sunrise/sunset computation.

Core modules depend on this protocol, never on a specific astronomy library.
"""

from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Protocol


class AstroError(Exception):
    """Raised for invalid geographic input or when the sun never crosses the horizon."""


class SunCalculator(Protocol):
    """Computes rise/set instants for a local calendar day.

    Returned datetimes are timezone-aware, expressed in *tz*.
    """

    def rise_time(
        self,
        day: date,
        longitude: float,
        latitude: float,
        elevation: float,
        refraction: bool,
        tz: tzinfo,
    ) -> datetime: ...

    def set_time(
        self,
        day: date,
        longitude: float,
        latitude: float,
        elevation: float,
        refraction: bool,
        tz: tzinfo,
    ) -> datetime: ...
