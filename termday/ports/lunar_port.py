"""Lunar calendar port — abstract lunar→solar date conversion.

Core modules depend on this protocol, never on a specific calendar library.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol


class LunarConversionError(Exception):
    """Raised when a lunar date does not exist or is out of range."""


class LunarConverter(Protocol):
    """Converts a lunar (year, month, day) to the matching solar date."""

    def to_solar(self, lunar_year: int, lunar_month: int, lunar_day: int) -> date: ...
