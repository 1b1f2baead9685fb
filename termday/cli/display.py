"""Terminal rendering with rich.

Everything printed by a normal run goes through here: greeting, daily
sentence, sun countdown and the event list.
"""

from __future__ import annotations

import re
from datetime import datetime

from rich.console import Console

from termday.core.sun_times import SunCountdown
from termday.data.models import EventKind, ResolvedOccurrence

GREETING = "Hello World!"

# Go reference-time layout tokens, longest first so "January" wins over "Jan"
_GO_LAYOUT_TOKENS = [
    ("January", "%B"),
    ("Monday", "%A"),
    ("2006", "%Y"),
    ("Jan", "%b"),
    ("Mon", "%a"),
    ("MST", "%Z"),
    ("-0700", "%z"),
    ("06", "%y"),
    ("01", "%m"),
    ("02", "%d"),
    ("15", "%H"),
    ("03", "%I"),
    ("04", "%M"),
    ("05", "%S"),
    ("PM", "%p"),
]
_GO_LAYOUT_RE = re.compile("|".join(re.escape(tok) for tok, _ in _GO_LAYOUT_TOKENS))
_GO_LAYOUT_MAP = dict(_GO_LAYOUT_TOKENS)


def to_strftime(date_format: str) -> str:
    """Accept either a strftime pattern or a Go layout such as "2006/01/02"."""
    if "%" in date_format:
        return date_format
    return _GO_LAYOUT_RE.sub(lambda m: _GO_LAYOUT_MAP[m.group(0)], date_format)


def format_date(value: datetime, date_format: str) -> str:
    return value.strftime(to_strftime(date_format))


def format_occurrence(occurrence: ResolvedOccurrence, date_format: str) -> str:
    event = occurrence.event
    emoji = "🎂" if event.kind is EventKind.BIRTHDAY else "🎉"
    when = format_date(occurrence.target_date, date_format)
    if occurrence.days_until >= 0:
        return f"  {emoji} {event.name} in {occurrence.days_until} days ({when})"
    return f"  {emoji} {event.name} passed {-occurrence.days_until} days ago ({when})"


def format_sun_countdown(countdown: SunCountdown) -> str:
    label = "next" if countdown.is_next_day else "this"
    if countdown.is_sunrise:
        return f"  ☀️ {countdown.hours}h {countdown.minutes}m until {label} sunrise"
    return f"  🌙 {countdown.hours}h {countdown.minutes}m until {label} sunset"


class Display:
    """Prints the dashboard sections to a rich Console."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(highlight=False)

    @property
    def console(self) -> Console:
        return self._console

    def greeting(self) -> None:
        self._console.print(GREETING, style="bold cyan", markup=False)
        self._console.print()

    def sentence(self, sentence: str) -> None:
        self._console.print(f"  📜 {sentence}", style="magenta", markup=False)
        self._console.print()

    def sun(self, countdown: SunCountdown) -> None:
        self._console.print(format_sun_countdown(countdown), style="yellow", markup=False)

    def events(self, occurrences: list[ResolvedOccurrence], date_format: str) -> None:
        for occurrence in occurrences:
            style = "green" if occurrence.event.kind is EventKind.BIRTHDAY else "blue"
            self._console.print(
                format_occurrence(occurrence, date_format), style=style, markup=False,
            )

    def blank(self) -> None:
        self._console.print()
