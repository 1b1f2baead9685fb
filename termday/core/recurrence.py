"""Date recurrence resolver — pure date logic.

Turns an event definition into the concrete date to display relative to
"now": yearly events roll over to next year once this year's date has
passed, lunar events go through the LunarConverter port, one-off solar
events keep their fixed date.

No I/O: this module only transforms data.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import TYPE_CHECKING

from termday.ports.lunar_port import LunarConversionError

if TYPE_CHECKING:
    from termday.data.models import Event
    from termday.ports.lunar_port import LunarConverter

logger = logging.getLogger(__name__)

_SECONDS_PER_HOUR = 3600


class InvalidEventDateError(ValueError):
    """Raised when an event's month/day cannot be placed on a real date."""


def _midnight(year: int, month: int, day: int, now: datetime) -> datetime:
    """Local midnight of year-month-day; days past month end spill into the next month.

    Built in now.tzinfo, so a zone with DST rules yields that date's own offset.
    """
    try:
        first = datetime(year, month, 1, tzinfo=now.tzinfo)
    except ValueError as exc:
        raise InvalidEventDateError(f"{year}-{month:02d}-{day:02d}: {exc}") from exc
    return first + timedelta(days=day - 1)


def _lunar_midnight(
    lunar: LunarConverter, lunar_year: int, month: int, day: int, now: datetime,
) -> datetime:
    try:
        solar: date = lunar.to_solar(lunar_year, month, day)
    except LunarConversionError as exc:
        raise InvalidEventDateError(str(exc)) from exc
    return _midnight(solar.year, solar.month, solar.day, now)


def resolve_target_date(
    event: Event, now: datetime, lunar: LunarConverter | None = None,
) -> datetime:
    """Return the local-midnight date at which *event* should be displayed.

    The "already passed" check compares calendar dates only, so an event
    falling today is not rolled over.

    Non-recurring lunar events are converted using now.year rather than
    event.year.

    A day beyond the end of its month spills over, so Feb 29 shows as
    Mar 1 in common years.

    Raises:
        InvalidEventDateError: the month is out of range, a non-recurring
            solar event has no year, or the lunar converter rejects the date.
    """
    today = now.date()

    if event.is_lunar:
        if lunar is None:
            raise InvalidEventDateError(f"No lunar converter for lunar event {event.name!r}")
        target = _lunar_midnight(lunar, now.year, event.month, event.day, now)
        if event.repeat_yearly and target.date() < today:
            target = _lunar_midnight(lunar, now.year + 1, event.month, event.day, now)
        return target

    if not event.repeat_yearly:
        if event.year is None:
            raise InvalidEventDateError(f"Non-recurring event {event.name!r} has no year")
        return _midnight(event.year, event.month, event.day, now)

    target = _midnight(now.year, event.month, event.day, now)
    if target.date() < today:
        target = _midnight(now.year + 1, event.month, event.day, now)
    return target


def days_until(target: datetime, now: datetime) -> int:
    """Whole days from *now* to *target*, truncated toward zero.

    Truncation happens on whole hours first, then on days, so an event
    at midnight today reads 0 for the rest of the day. Elapsed time is
    measured between absolute instants, across DST changes.
    """
    elapsed = target.astimezone(timezone.utc) - now.astimezone(timezone.utc)
    hours = int(elapsed.total_seconds() / _SECONDS_PER_HOUR)
    return int(hours / 24)
