"""Korean lunar calendar adapter — implements LunarConverter via korean-lunar-calendar."""

from __future__ import annotations

from datetime import date

from korean_lunar_calendar import KoreanLunarCalendar

from termday.ports.lunar_port import LunarConversionError


class KoreanLunarConverter:
    """korean-lunar-calendar implementation of LunarConverter."""

    def to_solar(self, lunar_year: int, lunar_month: int, lunar_day: int) -> date:
        calendar = KoreanLunarCalendar()
        if not calendar.setLunarDate(lunar_year, lunar_month, lunar_day, False):
            raise LunarConversionError(
                f"Invalid lunar date {lunar_year}-{lunar_month:02d}-{lunar_day:02d}"
            )
        return date(calendar.solarYear, calendar.solarMonth, calendar.solarDay)
