"""
termday — Daily Sentence Cache Policy.

A single sentence is cached and shown until it goes stale, then a new one is
drawn at random from the sentence pool. Staleness is decided by one of two
policies sharing the same integer setting (sentenceUpdateInterval):

    time  → stale once more than N hours passed since the last update
    count → stale once the cached sentence has been shown N times

Any other mode never goes stale on its own; only a forced refresh replaces
the sentence.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from pathlib import Path
from typing import Union

from termday.data.models import SentenceCacheEntry
from termday.data.store import CacheRead, CacheStatus, SentenceCacheStore, SentenceStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Refresh policies
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TimeRefresh:
    hours: int


@dataclass(frozen=True)
class CountRefresh:
    limit: int


@dataclass(frozen=True)
class ManualRefresh:
    """Only an explicit --refresh-sentence replaces the cached sentence."""


RefreshPolicy = Union[TimeRefresh, CountRefresh, ManualRefresh]


def refresh_policy(mode: str, interval: int) -> RefreshPolicy:
    """Map sentenceUpdateMode/sentenceUpdateInterval onto a policy."""
    if mode == "time":
        return TimeRefresh(hours=interval)
    if mode == "count":
        return CountRefresh(limit=interval)
    return ManualRefresh()


def is_stale(entry: SentenceCacheEntry, policy: RefreshPolicy, now: datetime) -> bool:
    if isinstance(policy, TimeRefresh):
        return now - entry.last_update > timedelta(hours=policy.hours)
    if isinstance(policy, CountRefresh):
        return entry.update_count >= policy.limit
    return False


# ---------------------------------------------------------------------------
# Cache lookup
# ---------------------------------------------------------------------------


class LookupStatus(str, Enum):
    FRESH = "fresh"
    STALE = "stale"
    MISS = "miss"


@dataclass
class CacheLookup:
    """Policy verdict on a cache read.

    entry is set for FRESH and STALE; for MISS there was nothing usable.
    """

    status: LookupStatus
    entry: SentenceCacheEntry | None = None


def lookup_cached_sentence(
    read: CacheRead, policy: RefreshPolicy, now: datetime,
) -> CacheLookup:
    if read.status is not CacheStatus.HIT or read.entry is None:
        return CacheLookup(LookupStatus.MISS)
    if is_stale(read.entry, policy, now):
        return CacheLookup(LookupStatus.STALE, read.entry)
    return CacheLookup(LookupStatus.FRESH, read.entry)


def select_random_sentence(sentences: list[str], rng: random.Random | None = None) -> str:
    if rng is None:
        rng = random.Random(time.time_ns())
    return rng.choice(sentences)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def get_daily_sentence(
    cache_path: str | Path,
    sentences_path: str | Path,
    policy: RefreshPolicy,
    force_refresh: bool = False,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> str:
    """Return the sentence to show on this run, updating the cache.

    Raises:
        OSError: the sentence pool cannot be read.
        DataFormatError: the sentence pool is malformed.
        DataEmptyError: the sentence pool is empty.

    Cache read/write failures never raise: a bad cache is a miss and a
    failed write keeps the previous cache file.
    """
    if now is None:
        now = datetime.now().astimezone()

    cache = SentenceCacheStore(cache_path)
    previous: SentenceCacheEntry | None = None

    if not force_refresh:
        lookup = lookup_cached_sentence(cache.read(), policy, now)
        if lookup.status is LookupStatus.FRESH and lookup.entry is not None:
            entry = lookup.entry
            if isinstance(policy, CountRefresh):
                entry = replace(entry, update_count=entry.update_count + 1)
                cache.save(entry)
            return entry.sentence
        previous = lookup.entry
        logger.debug("Sentence cache %s, selecting a new sentence", lookup.status.value)

    sentences = SentenceStore(sentences_path).load()
    sentence = select_random_sentence(sentences, rng)

    update_count = previous.update_count if previous is not None else 0
    if force_refresh or isinstance(policy, CountRefresh):
        update_count = 0

    cache.save(SentenceCacheEntry(sentence=sentence, last_update=now, update_count=update_count))
    logger.info("New daily sentence selected (force=%s)", force_refresh)
    return sentence
