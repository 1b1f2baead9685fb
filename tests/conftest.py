"""Shared test fixtures.

Provides a temporary configuration directory populated with config.json,
dates.json and sentences.json, plus fake lunar/sun adapters so core tests
never depend on calendar or astronomy libraries.
"""

import json
from datetime import date, datetime, timedelta, timezone

import pytest

from termday.data.models import Event, EventKind
from termday.ports.lunar_port import LunarConversionError
from termday.ports.sun_port import AstroError

CST = timezone(timedelta(hours=8))


class FakeLunarConverter:
    """Maps a lunar date to the solar date 30 days later; month 13 is rejected."""

    def __init__(self) -> None:
        self.calls: list[tuple[int, int, int]] = []

    def to_solar(self, lunar_year: int, lunar_month: int, lunar_day: int) -> date:
        self.calls.append((lunar_year, lunar_month, lunar_day))
        if not 1 <= lunar_month <= 12:
            raise LunarConversionError(f"bad lunar month {lunar_month}")
        return date(lunar_year, lunar_month, lunar_day) + timedelta(days=30)


class FakeSunCalculator:
    """Sunrise at 06:00 and sunset at 18:00 local time, every day."""

    def __init__(self, rise_hour: int = 6, set_hour: int = 18) -> None:
        self.rise_hour = rise_hour
        self.set_hour = set_hour
        self.days: list[date] = []

    def rise_time(self, day, longitude, latitude, elevation, refraction, tz):
        self.days.append(day)
        return datetime(day.year, day.month, day.day, self.rise_hour, tzinfo=tz)

    def set_time(self, day, longitude, latitude, elevation, refraction, tz):
        return datetime(day.year, day.month, day.day, self.set_hour, tzinfo=tz)


class FailingSunCalculator:
    def rise_time(self, *args, **kwargs):
        raise AstroError("Sun is always above the horizon")

    def set_time(self, *args, **kwargs):
        raise AstroError("Sun is always above the horizon")


@pytest.fixture
def now():
    """2026-10-18 15:00 in UTC+8."""
    return datetime(2026, 10, 18, 15, 0, tzinfo=CST)


@pytest.fixture
def lunar():
    return FakeLunarConverter()


@pytest.fixture
def sun_calculator():
    return FakeSunCalculator()


@pytest.fixture
def make_event():
    def _make(
        name: str = "Event",
        month: int = 1,
        day: int = 1,
        year: int | None = None,
        repeat_yearly: bool = True,
        always_show: bool = False,
        is_lunar: bool = False,
        kind: EventKind = EventKind.FESTIVAL,
    ) -> Event:
        return Event(
            name=name,
            month=month,
            day=day,
            kind=kind,
            year=year,
            repeat_yearly=repeat_yearly,
            always_show=always_show,
            is_lunar=is_lunar,
        )

    return _make


@pytest.fixture
def config_dir(tmp_path):
    """A configuration directory with a minimal, valid set of files."""
    (tmp_path / "config.json").write_text(json.dumps({
        "datesFile": "dates.json",
        "sentencesFile": "sentences.json",
        "showDateAmount": 5,
        "dateFormat": "2006/01/02",
        "location": {"latitude": 31.23, "longitude": 121.47, "timezone": 8},
        "showSunTimes": False,
        "showDailySentence": True,
        "cacheDir": "cache",
        "sentenceUpdateMode": "time",
        "sentenceUpdateInterval": 24,
    }), encoding="utf-8")
    (tmp_path / "dates.json").write_text(json.dumps({
        "events": [
            {"name": "Mom", "type": "birthday", "month": 10, "day": 25,
             "repeatYearly": True, "alwaysShow": False, "isLunar": False},
            {"name": "New Year", "type": "festival", "month": 1, "day": 1,
             "repeatYearly": True, "alwaysShow": True, "isLunar": False},
            {"name": "Graduation", "type": "festival", "year": 2020, "month": 6, "day": 30,
             "repeatYearly": False, "alwaysShow": False, "isLunar": False},
        ]
    }), encoding="utf-8")
    (tmp_path / "sentences.json").write_text(json.dumps({
        "sentences": ["Stay curious."]
    }), encoding="utf-8")
    return tmp_path


@pytest.fixture
def failing_sun_calculator():
    return FailingSunCalculator()
