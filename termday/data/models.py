"""
termday — Data Models.

Events are loaded from the events file on every run; resolved occurrences are
recomputed relative to "now" and never persisted. The sentence cache holds a
single entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum


class EventKind(str, Enum):
    BIRTHDAY = "birthday"
    FESTIVAL = "festival"


@dataclass
class Event:
    """A birthday or festival shown on the terminal.

    Non-recurring events carry a full date; recurring ones only need
    month/day and are rolled forward every year.
    """

    name: str
    month: int
    day: int
    kind: EventKind = EventKind.FESTIVAL
    year: int | None = None           # required iff repeat_yearly is False
    repeat_yearly: bool = False
    always_show: bool = False         # shown regardless of showDateAmount
    is_lunar: bool = False            # month/day are lunar calendar values


@dataclass(frozen=True)
class Location:
    """Observer position for sunrise/sunset, with a fixed UTC offset."""

    latitude: float = 0.0
    longitude: float = 0.0
    timezone: int = 0                 # offset from UTC in whole hours

    def tzinfo(self) -> timezone:
        return timezone(timedelta(hours=self.timezone))


@dataclass
class ResolvedOccurrence:
    """An event paired with its concrete target date relative to now."""

    event: Event
    days_until: int                   # negative once the date has passed
    target_date: datetime


@dataclass
class SentenceCacheEntry:
    """The single record stored in the sentence cache file."""

    sentence: str
    last_update: datetime
    update_count: int = 0
