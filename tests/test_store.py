"""Tests for termday.data.store — JSON events, sentences and sentence cache."""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from termday.data.models import Event, EventKind, SentenceCacheEntry
from termday.data.store import (
    CacheStatus,
    DataEmptyError,
    DataFormatError,
    EventStore,
    SentenceCacheStore,
    SentenceStore,
    atomic_write_json,
    validate_event,
)

CST = timezone(timedelta(hours=8))


# ---------------------------------------------------------------------------
# validate_event
# ---------------------------------------------------------------------------


class TestValidateEvent:
    def test_recurring_month_day(self, make_event):
        assert validate_event(make_event(month=2, day=29)) is True

    @pytest.mark.parametrize("month,day", [(0, 1), (13, 1), (1, 0), (1, 32)])
    def test_out_of_range(self, make_event, month, day):
        assert validate_event(make_event(month=month, day=day)) is False

    def test_day_31_in_short_month_accepted(self, make_event):
        assert validate_event(make_event(month=2, day=31)) is True

    def test_one_off_requires_plausible_year(self, make_event):
        assert validate_event(make_event(year=2020, repeat_yearly=False)) is True
        assert validate_event(make_event(year=1899, repeat_yearly=False)) is False
        assert validate_event(make_event(year=None, repeat_yearly=False)) is False


# ---------------------------------------------------------------------------
# EventStore
# ---------------------------------------------------------------------------


class TestEventStoreLoad:
    def test_loads_in_file_order(self, config_dir):
        events = EventStore(config_dir / "dates.json").load()
        assert [e.name for e in events] == ["Mom", "New Year", "Graduation"]
        mom, new_year, graduation = events
        assert mom.kind is EventKind.BIRTHDAY
        assert mom.repeat_yearly is True
        assert new_year.always_show is True
        assert graduation.year == 2020
        assert graduation.repeat_yearly is False

    def test_missing_optional_keys(self, tmp_path):
        path = tmp_path / "dates.json"
        path.write_text(json.dumps({"events": [{"name": "A", "month": 3, "day": 8}]}))
        (event,) = EventStore(path).load()
        assert event == Event(name="A", month=3, day=8)

    def test_unknown_type_is_festival(self, tmp_path):
        path = tmp_path / "dates.json"
        path.write_text(json.dumps({"events": [
            {"name": "A", "type": "anniversary", "month": 3, "day": 8},
        ]}))
        (event,) = EventStore(path).load()
        assert event.kind is EventKind.FESTIVAL

    def test_empty_events(self, tmp_path):
        path = tmp_path / "dates.json"
        path.write_text("{}")
        assert EventStore(path).load() == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            EventStore(tmp_path / "nope.json").load()

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "dates.json"
        path.write_text("{not json")
        with pytest.raises(DataFormatError):
            EventStore(path).load()

    def test_events_not_a_list(self, tmp_path):
        path = tmp_path / "dates.json"
        path.write_text(json.dumps({"events": {"name": "A"}}))
        with pytest.raises(DataFormatError):
            EventStore(path).load()

    def test_record_missing_month(self, tmp_path):
        path = tmp_path / "dates.json"
        path.write_text(json.dumps({"events": [{"name": "A", "day": 1}]}))
        with pytest.raises(DataFormatError, match="#0"):
            EventStore(path).load()


class TestEventStoreAdd:
    def test_appends_and_keeps_existing(self, config_dir):
        store = EventStore(config_dir / "dates.json")
        store.add(Event(name="Mid-Autumn", month=8, day=15, repeat_yearly=True, is_lunar=True))

        events = store.load()
        assert len(events) == 4
        assert events[-1].name == "Mid-Autumn"
        assert events[-1].is_lunar is True

    def test_record_omits_missing_year(self, config_dir):
        store = EventStore(config_dir / "dates.json")
        store.add(Event(name="Mid-Autumn", month=8, day=15, repeat_yearly=True))

        raw = json.loads((config_dir / "dates.json").read_text(encoding="utf-8"))
        record = raw["events"][-1]
        assert "year" not in record
        assert record["type"] == "festival"
        assert record["repeatYearly"] is True

    def test_keeps_other_top_level_keys(self, tmp_path):
        path = tmp_path / "dates.json"
        path.write_text(json.dumps({"version": 2, "events": []}))
        EventStore(path).add(Event(name="A", month=1, day=1, repeat_yearly=True))
        raw = json.loads(path.read_text(encoding="utf-8"))
        assert raw["version"] == 2

    def test_rejects_invalid_event(self, config_dir):
        path = config_dir / "dates.json"
        before = path.read_text(encoding="utf-8")
        with pytest.raises(DataFormatError):
            EventStore(path).add(Event(name="Bad", month=13, day=1, repeat_yearly=True))
        assert path.read_text(encoding="utf-8") == before


# ---------------------------------------------------------------------------
# SentenceStore
# ---------------------------------------------------------------------------


class TestSentenceStore:
    def test_load(self, config_dir):
        assert SentenceStore(config_dir / "sentences.json").load() == ["Stay curious."]

    def test_empty_pool(self, tmp_path):
        path = tmp_path / "sentences.json"
        path.write_text(json.dumps({"sentences": []}))
        with pytest.raises(DataEmptyError):
            SentenceStore(path).load()

    def test_not_strings(self, tmp_path):
        path = tmp_path / "sentences.json"
        path.write_text(json.dumps({"sentences": [1, 2]}))
        with pytest.raises(DataFormatError):
            SentenceStore(path).load()

    def test_add(self, config_dir):
        store = SentenceStore(config_dir / "sentences.json")
        store.add("Keep going.")
        assert store.load() == ["Stay curious.", "Keep going."]

    def test_add_preserves_unicode(self, config_dir):
        store = SentenceStore(config_dir / "sentences.json")
        store.add("千里之行，始于足下")
        assert "千里之行" in (config_dir / "sentences.json").read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# SentenceCacheStore
# ---------------------------------------------------------------------------


class TestSentenceCacheStore:
    def test_missing(self, tmp_path):
        assert SentenceCacheStore(tmp_path / "cache" / "sentence.cache").read().status is CacheStatus.MISSING

    def test_save_creates_directory_and_reads_back(self, tmp_path):
        path = tmp_path / "cache" / "sentence.cache"
        entry = SentenceCacheEntry("Stay curious.", datetime(2026, 10, 18, 9, 30, tzinfo=CST), 2)

        assert SentenceCacheStore(path).save(entry) is True
        read = SentenceCacheStore(path).read()

        assert read.status is CacheStatus.HIT
        assert read.entry == entry

    def test_file_format(self, tmp_path):
        path = tmp_path / "sentence.cache"
        SentenceCacheStore(path).save(
            SentenceCacheEntry("S", datetime(2026, 10, 18, 9, 30, tzinfo=CST), 1)
        )
        raw = json.loads(path.read_text(encoding="utf-8"))
        assert raw == {
            "sentence": "S",
            "lastUpdate": "2026-10-18T09:30:00+08:00",
            "updateCount": 1,
        }

    def test_corrupt_json(self, tmp_path):
        path = tmp_path / "sentence.cache"
        path.write_text("{")
        assert SentenceCacheStore(path).read().status is CacheStatus.CORRUPT

    def test_missing_keys(self, tmp_path):
        path = tmp_path / "sentence.cache"
        path.write_text(json.dumps({"sentence": "S"}))
        assert SentenceCacheStore(path).read().status is CacheStatus.CORRUPT

    def test_bad_timestamp(self, tmp_path):
        path = tmp_path / "sentence.cache"
        path.write_text(json.dumps({"sentence": "S", "lastUpdate": "yesterday"}))
        assert SentenceCacheStore(path).read().status is CacheStatus.CORRUPT

    def test_naive_timestamp_becomes_aware(self, tmp_path):
        path = tmp_path / "sentence.cache"
        path.write_text(json.dumps({"sentence": "S", "lastUpdate": "2026-10-18T09:30:00"}))
        read = SentenceCacheStore(path).read()
        assert read.status is CacheStatus.HIT
        assert read.entry.last_update.tzinfo is not None
        assert read.entry.update_count == 0

    def test_save_failure_returns_false(self, tmp_path):
        path = tmp_path / "sentence.cache"
        entry = SentenceCacheEntry("S", datetime(2026, 10, 18, tzinfo=CST))
        with patch("termday.data.store.os.replace", side_effect=OSError("disk full")):
            assert SentenceCacheStore(path).save(entry) is False
        assert not path.exists()


# ---------------------------------------------------------------------------
# atomic_write_json
# ---------------------------------------------------------------------------


class TestAtomicWriteJson:
    def test_replaces_existing_file(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text('{"old": true}')
        atomic_write_json(path, {"new": True})
        assert json.loads(path.read_text(encoding="utf-8")) == {"new": True}

    def test_failure_keeps_old_file_and_no_temp(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text('{"old": true}')
        with patch("termday.data.store.os.replace", side_effect=OSError("boom")):
            with pytest.raises(OSError):
                atomic_write_json(path, {"new": True})
        assert json.loads(path.read_text(encoding="utf-8")) == {"old": True}
        assert sorted(p.name for p in tmp_path.iterdir()) == ["data.json"]

    def test_unserializable_payload(self, tmp_path):
        path = tmp_path / "data.json"
        with pytest.raises(TypeError):
            atomic_write_json(path, {"when": object()})
        assert not path.exists()
