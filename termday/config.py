"""
termday — Configuration.

Loads config.json from the configuration directory and validates it into a
Settings object. Settings are passed explicitly to every core function;
there is no module-level singleton.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from termday.data.models import Location
from termday.data.store import atomic_write_json

# .env in the working directory may set TERMDAY_CONFIG_DIR / TERMDAY_LOG_LEVEL
load_dotenv(find_dotenv(usecwd=True))

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_DIR = os.getenv("TERMDAY_CONFIG_DIR", ".")
DEFAULT_LOG_LEVEL = os.getenv("TERMDAY_LOG_LEVEL", "WARNING")

DEFAULT_SHOW_DATE_AMOUNT = 7
DEFAULT_DATE_FORMAT = "%Y/%m/%d"
DEFAULT_CACHE_DIR = "cache"
LUNAR_CALENDARS = {"chinese", "korean"}


class ConfigError(Exception):
    """Raised when config.json is missing, unreadable or invalid."""


class Settings(BaseModel):
    """Settings read from config.json (camelCase keys on disk)."""

    model_config = ConfigDict(populate_by_name=True)

    dates_file: str = Field("dates.json", alias="datesFile")
    sentences_file: str = Field("sentences.json", alias="sentencesFile")
    show_date_amount: int = Field(DEFAULT_SHOW_DATE_AMOUNT, alias="showDateAmount")
    date_format: str = Field(DEFAULT_DATE_FORMAT, alias="dateFormat")
    location: Location = Field(default_factory=Location)
    show_sun_times: bool = Field(False, alias="showSunTimes")
    show_daily_sentence: bool = Field(False, alias="showDailySentence")
    cache_dir: str = Field(DEFAULT_CACHE_DIR, alias="cacheDir")

    # "time" → interval is hours, "count" → interval is a usage count
    sentence_update_mode: str = Field("", alias="sentenceUpdateMode")
    sentence_update_interval: int = Field(0, alias="sentenceUpdateInterval")

    # "chinese" | "korean"
    lunar_calendar: str = Field("chinese", alias="lunarCalendar")

    @field_validator("show_date_amount", mode="before")
    @classmethod
    def default_date_amount(cls, v: int | None) -> int:
        if not v:
            return DEFAULT_SHOW_DATE_AMOUNT
        return int(v)

    @field_validator("date_format", mode="before")
    @classmethod
    def default_date_format(cls, v: str | None) -> str:
        return v or DEFAULT_DATE_FORMAT

    @field_validator("cache_dir", mode="before")
    @classmethod
    def default_cache_dir(cls, v: str | None) -> str:
        return v or DEFAULT_CACHE_DIR

    @field_validator("lunar_calendar", mode="before")
    @classmethod
    def parse_lunar_calendar(cls, v: str | None) -> str:
        calendar = (v or "chinese").lower()
        if calendar not in LUNAR_CALENDARS:
            raise ValueError(f"lunarCalendar must be one of {sorted(LUNAR_CALENDARS)}")
        return calendar

    @field_validator("location", mode="before")
    @classmethod
    def parse_location(cls, v: Any) -> Location:
        if v is None:
            return Location()
        if isinstance(v, dict):
            try:
                return Location(
                    latitude=float(v.get("latitude") or 0.0),
                    longitude=float(v.get("longitude") or 0.0),
                    timezone=int(v.get("timezone") or 0),
                )
            except TypeError as exc:
                # pydantic only wraps ValueError/AssertionError from validators
                raise ValueError(f"location values must be numbers: {exc}") from exc
        return v

    @property
    def has_location(self) -> bool:
        return self.location.latitude != 0 and self.location.longitude != 0

    def dates_path(self, config_dir: str | Path) -> Path:
        return Path(config_dir) / self.dates_file

    def sentences_path(self, config_dir: str | Path) -> Path:
        return Path(config_dir) / self.sentences_file

    def sentence_cache_path(self, config_dir: str | Path) -> Path:
        return Path(config_dir) / self.cache_dir / "sentence.cache"


def _read_raw_config(config_dir: str | Path) -> dict:
    path = Path(config_dir) / CONFIG_FILENAME
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a JSON object")
    return raw


def load_settings(config_dir: str | Path) -> Settings:
    """Load and validate <config_dir>/config.json.

    Raises:
        ConfigError: the file is missing, unreadable, not JSON, or fails
            validation.
    """
    raw = _read_raw_config(config_dir)
    try:
        settings = Settings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid {CONFIG_FILENAME}: {exc}") from exc

    logger.debug("Loaded settings from %s: %s", config_dir, settings)
    return settings


def update_settings_file(config_dir: str | Path, updates: dict[str, Any]) -> bool:
    """Overwrite the given camelCase keys in config.json, keeping all others.

    Returns False if the file could not be written; the old file is kept.

    Raises:
        ConfigError: config.json cannot be read.
    """
    if not updates:
        return True

    raw = _read_raw_config(config_dir)
    raw.update(updates)

    path = Path(config_dir) / CONFIG_FILENAME
    try:
        atomic_write_json(path, raw, indent=2)
    except OSError as exc:
        logger.warning("Failed to save %s: %s", path, exc)
        return False

    logger.info("Updated %s: %s", path, ", ".join(sorted(updates)))
    return True
