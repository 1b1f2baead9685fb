"""Interactive add-event flow (rich.prompt)."""

from __future__ import annotations

import logging
from typing import TextIO

from rich.console import Console
from rich.prompt import Confirm, Prompt

from termday.data.models import Event, EventKind
from termday.data.store import validate_event

logger = logging.getLogger(__name__)


class InvalidInputError(ValueError):
    """Raised when the user enters something that cannot become an event."""


def _parse_ints(raw: str, expected: int) -> list[int]:
    parts = raw.replace(",", " ").split()
    if len(parts) != expected:
        raise InvalidInputError(f"Expected {expected} numbers, got {raw!r}")
    try:
        return [int(p) for p in parts]
    except ValueError as exc:
        raise InvalidInputError(f"Not a number in {raw!r}") from exc


def describe_event(event: Event) -> list[str]:
    calendar = "lunar" if event.is_lunar else "solar"
    if event.repeat_yearly:
        when = f"every year on {event.month}/{event.day}"
    else:
        when = f"{event.year}/{event.month}/{event.day}"
    return [
        f"  Name: {event.name}",
        f"  Type: {event.kind.value}",
        f"  Calendar: {calendar}",
        f"  Date: {when}",
        f"  Always show: {'yes' if event.always_show else 'no'}",
    ]


def prompt_new_event(
    console: Console,
    name: str | None = None,
    stream: TextIO | None = None,
) -> Event | None:
    """Ask for the fields of a new event.

    Returns None if the user declines the final confirmation.

    Raises:
        InvalidInputError: empty name or an implausible date.
    """
    console.print("\n=== Add a new event ===\n", style="bold")

    if name:
        console.print(f"Event name: {name}")
    else:
        name = Prompt.ask("Event name", console=console, stream=stream).strip()
    if not name:
        raise InvalidInputError("Event name cannot be empty")

    kind = Prompt.ask(
        "Event type",
        console=console,
        choices=[k.value for k in EventKind],
        default=EventKind.FESTIVAL.value,
        stream=stream,
    )
    is_lunar = Confirm.ask("Use the lunar calendar?", console=console, default=False, stream=stream)
    repeat_yearly = Confirm.ask("Repeat every year?", console=console, default=True, stream=stream)

    year: int | None = None
    if repeat_yearly:
        raw = Prompt.ask("Date (month day, e.g. 1 1)", console=console, stream=stream)
        month, day = _parse_ints(raw, 2)
    else:
        raw = Prompt.ask("Full date (year month day, e.g. 2025 1 1)", console=console, stream=stream)
        year, month, day = _parse_ints(raw, 3)

    event = Event(
        name=name,
        month=month,
        day=day,
        kind=EventKind(kind),
        year=year,
        repeat_yearly=repeat_yearly,
        is_lunar=is_lunar,
    )
    if not validate_event(event):
        raise InvalidInputError("Invalid date")

    event.always_show = Confirm.ask("Always show?", console=console, default=False, stream=stream)

    console.print("\nEvent details:")
    for line in describe_event(event):
        console.print(line, markup=False)

    if not Confirm.ask("\nAdd this event?", console=console, default=True, stream=stream):
        logger.info("Add event cancelled by user")
        return None
    return event
