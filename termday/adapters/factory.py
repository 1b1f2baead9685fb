"""Adapter factory — creates the lunar/sun adapters selected by Settings."""

from __future__ import annotations

from termday.config import Settings
from termday.ports.lunar_port import LunarConverter
from termday.ports.sun_port import SunCalculator


def create_lunar_converter(settings: Settings) -> LunarConverter:
    """Return the lunar converter matching the lunarCalendar setting."""
    calendar = settings.lunar_calendar

    if calendar == "chinese":
        from termday.adapters.zhdate_lunar import ZhDateLunarConverter

        return ZhDateLunarConverter()

    if calendar == "korean":
        from termday.adapters.korean_lunar import KoreanLunarConverter

        return KoreanLunarConverter()

    raise ValueError(f"Unknown lunarCalendar: {calendar!r}")


def create_sun_calculator() -> SunCalculator:
    from termday.adapters.astral_sun import AstralSunCalculator

    return AstralSunCalculator()
