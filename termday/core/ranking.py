"""Event ranking and filtering for the terminal display.

Resolves every event against "now", orders them by proximity and keeps the
always-show events plus the nearest others up to the configured amount.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Iterable

from termday.core.recurrence import InvalidEventDateError, days_until, resolve_target_date
from termday.data.models import ResolvedOccurrence

if TYPE_CHECKING:
    from termday.data.models import Event
    from termday.ports.lunar_port import LunarConverter

logger = logging.getLogger(__name__)


def _by_days(occurrence: ResolvedOccurrence) -> int:
    return occurrence.days_until


def collect_occurrences(
    events: Iterable[Event],
    now: datetime,
    lunar: LunarConverter | None = None,
) -> list[ResolvedOccurrence]:
    """Resolve each event and sort ascending by days until (most overdue first).

    Events whose date cannot be resolved are logged and left out.
    """
    result: list[ResolvedOccurrence] = []
    for event in events:
        try:
            target = resolve_target_date(event, now, lunar)
        except InvalidEventDateError as exc:
            logger.warning("Skipping event %r: %s", event.name, exc)
            continue
        result.append(ResolvedOccurrence(event, days_until(target, now), target))

    result.sort(key=_by_days)
    return result


def filter_occurrences(
    occurrences: list[ResolvedOccurrence], max_count: int,
) -> list[ResolvedOccurrence]:
    """Keep all always-show occurrences, then fill up to *max_count*.

    The output may exceed *max_count* when there are more always-show
    events than that; no regular events are added in that case.
    """
    filtered = [o for o in occurrences if o.event.always_show]

    for occurrence in occurrences:
        if len(filtered) >= max_count:
            break
        if not occurrence.event.always_show:
            filtered.append(occurrence)

    filtered.sort(key=_by_days)
    return filtered


def rank_and_filter(
    events: Iterable[Event],
    now: datetime,
    max_count: int,
    lunar: LunarConverter | None = None,
) -> list[ResolvedOccurrence]:
    """Resolve, sort and filter *events* for display."""
    occurrences = collect_occurrences(events, now, lunar)
    filtered = filter_occurrences(occurrences, max_count)
    logger.debug(
        "Showing %d of %d events (max %d)", len(filtered), len(occurrences), max_count,
    )
    return filtered
