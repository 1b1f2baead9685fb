"""
termday — JSON File Storage.

Events, the sentence pool and the sentence cache all live in small JSON files
inside the configuration directory. Writes go to a temp file in the same
directory which is then renamed over the target, so a failed write never
leaves a half-written file behind.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from termday.data.models import Event, EventKind, SentenceCacheEntry

logger = logging.getLogger(__name__)

MIN_EVENT_YEAR = 1900


class DataError(Exception):
    """Raised when an events or sentences file cannot be used."""


class DataFormatError(DataError):
    """The file is not valid JSON or does not match the expected shape."""


class DataEmptyError(DataError):
    """The sentence pool has no entries."""


def validate_event(event: Event) -> bool:
    """Check the plausibility rules for a user-entered event.

    Month/day are range-checked only; actual month lengths are not.
    """
    if not 1 <= event.month <= 12:
        return False
    if not 1 <= event.day <= 31:
        return False
    if not event.repeat_yearly and (event.year is None or event.year < MIN_EVENT_YEAR):
        return False
    return True


def _read_json_object(path: Path) -> dict:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise DataFormatError(f"Failed to parse {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise DataFormatError(f"{path} must contain a JSON object")
    return raw


def atomic_write_json(path: Path, payload: Any, indent: int | None = None) -> None:
    """Write *payload* as JSON to a sibling temp file, then replace *path*.

    Raises OSError (or TypeError for unserializable payloads) and removes the
    temp file on failure.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    data = json.dumps(payload, indent=indent, ensure_ascii=False)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(data)
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class EventStore:
    """Reads and appends events in a `{"events": [...]}` JSON file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    @staticmethod
    def _record_to_event(record: dict) -> Event:
        kind_raw = record.get("type") or EventKind.FESTIVAL.value
        try:
            kind = EventKind(kind_raw)
        except ValueError:
            logger.warning(
                "Unknown event type %r for %r, treating as festival",
                kind_raw, record.get("name"),
            )
            kind = EventKind.FESTIVAL

        year = record.get("year")
        return Event(
            name=str(record["name"]),
            month=int(record["month"]),
            day=int(record["day"]),
            kind=kind,
            year=int(year) if year else None,
            repeat_yearly=bool(record.get("repeatYearly", False)),
            always_show=bool(record.get("alwaysShow", False)),
            is_lunar=bool(record.get("isLunar", False)),
        )

    @staticmethod
    def _event_to_record(event: Event) -> dict:
        record: dict[str, Any] = {
            "name": event.name,
            "type": event.kind.value,
        }
        if event.year is not None:
            record["year"] = event.year
        record.update(
            month=event.month,
            day=event.day,
            repeatYearly=event.repeat_yearly,
            alwaysShow=event.always_show,
            isLunar=event.is_lunar,
        )
        return record

    def _load_raw(self) -> dict:
        raw = _read_json_object(self._path)
        if not isinstance(raw.get("events", []), list):
            raise DataFormatError(f"'events' in {self._path} must be a list")
        return raw

    def load(self) -> list[Event]:
        """Return all events in file order.

        Raises:
            OSError: the file cannot be read.
            DataFormatError: the file or one of its records is malformed.
        """
        raw = self._load_raw()
        events: list[Event] = []
        for index, record in enumerate(raw.get("events", [])):
            if not isinstance(record, dict):
                raise DataFormatError(f"Event #{index} in {self._path} is not an object")
            try:
                events.append(self._record_to_event(record))
            except (KeyError, TypeError, ValueError) as exc:
                raise DataFormatError(
                    f"Event #{index} in {self._path} is invalid: {exc!r}"
                ) from exc

        logger.debug("Loaded %d events from %s", len(events), self._path)
        return events

    def add(self, event: Event) -> None:
        """Append *event* and persist the file, keeping any other keys."""
        if not validate_event(event):
            raise DataFormatError(f"Invalid date for event {event.name!r}")

        raw = self._load_raw()
        raw.setdefault("events", []).append(self._event_to_record(event))
        atomic_write_json(self._path, raw, indent=2)
        logger.info("Added event %r to %s", event.name, self._path)


# ---------------------------------------------------------------------------
# Sentences
# ---------------------------------------------------------------------------


class SentenceStore:
    """Reads and appends the `{"sentences": [...]}` pool."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _load_raw(self) -> dict:
        raw = _read_json_object(self._path)
        sentences = raw.get("sentences", [])
        if not isinstance(sentences, list) or not all(isinstance(s, str) for s in sentences):
            raise DataFormatError(f"'sentences' in {self._path} must be a list of strings")
        return raw

    def load(self) -> list[str]:
        """Return the sentence pool.

        Raises:
            OSError: the file cannot be read.
            DataFormatError: the file is malformed.
            DataEmptyError: the pool is empty.
        """
        sentences = self._load_raw().get("sentences", [])
        if not sentences:
            raise DataEmptyError(f"No sentences in {self._path}")
        return list(sentences)

    def add(self, sentence: str) -> None:
        raw = self._load_raw()
        raw.setdefault("sentences", []).append(sentence)
        atomic_write_json(self._path, raw, indent=2)
        logger.info("Added sentence to %s", self._path)


# ---------------------------------------------------------------------------
# Sentence cache
# ---------------------------------------------------------------------------


class CacheStatus(str, Enum):
    HIT = "hit"
    MISSING = "missing"
    CORRUPT = "corrupt"


@dataclass
class CacheRead:
    """Outcome of reading the cache file; entry is set only on HIT."""

    status: CacheStatus
    entry: SentenceCacheEntry | None = None


class SentenceCacheStore:
    """Single-entry cache file: `{sentence, lastUpdate, updateCount}`."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> CacheRead:
        """Read the cache entry. Never raises."""
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return CacheRead(CacheStatus.MISSING)
        except OSError as exc:
            logger.debug("Sentence cache unreadable at %s: %s", self._path, exc)
            return CacheRead(CacheStatus.MISSING)

        try:
            raw = json.loads(text)
            last_update = datetime.fromisoformat(raw["lastUpdate"])
            if last_update.tzinfo is None:
                # naive timestamps are taken as local time
                last_update = last_update.astimezone()
            entry = SentenceCacheEntry(
                sentence=str(raw["sentence"]),
                last_update=last_update,
                update_count=int(raw.get("updateCount", 0)),
            )
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            logger.debug("Sentence cache corrupt at %s: %r", self._path, exc)
            return CacheRead(CacheStatus.CORRUPT)

        return CacheRead(CacheStatus.HIT, entry)

    def save(self, entry: SentenceCacheEntry) -> bool:
        """Persist *entry*; returns False on failure, leaving the old file."""
        payload = {
            "sentence": entry.sentence,
            "lastUpdate": entry.last_update.isoformat(),
            "updateCount": entry.update_count,
        }
        try:
            atomic_write_json(self._path, payload)
        except (OSError, TypeError) as exc:
            logger.warning("Failed to save sentence cache to %s: %s", self._path, exc)
            return False
        return True
