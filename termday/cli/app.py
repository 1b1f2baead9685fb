"""
termday — Command Line Entry Point.

Parses flags, dispatches to the add-sentence / add-event commands, applies
persistent display toggles to config.json, and renders the dashboard.

Exit codes: 0 on success (including a cancelled add-event), 1 for any fatal
setup error.
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Sequence

from dateutil import tz
from rich.console import Console

from termday.adapters.factory import create_lunar_converter, create_sun_calculator
from termday.cli.display import Display
from termday.cli.prompts import InvalidInputError, prompt_new_event
from termday.config import (
    DEFAULT_CONFIG_DIR,
    DEFAULT_LOG_LEVEL,
    ConfigError,
    Settings,
    load_settings,
    update_settings_file,
)
from termday.core.ranking import rank_and_filter
from termday.core.sentence_cache import get_daily_sentence, refresh_policy
from termday.core.sun_times import sun_countdown
from termday.data.store import DataError, EventStore, SentenceStore

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "t", "true", "y", "yes", "on"}
_FALSE_VALUES = {"0", "f", "false", "n", "no", "off"}

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

EPILOG = """\
examples:
  python main.py --add-event            add an event, asking for every field
  python main.py --add-event "Spring Festival"
                                        add an event with the given name
"""


class FatalError(Exception):
    """A user-facing error that ends the run with exit status 1."""


def parse_bool_flag(value: str) -> bool | None:
    """Parse true/false style flag values; None for anything else."""
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def local_now() -> datetime:
    """Current time in the system zone, keeping its DST rules for other dates."""
    return datetime.now(tz.tzlocal())


def log_level(verbose: bool, name: str = DEFAULT_LOG_LEVEL) -> int:
    """DEBUG for --verbose, else the named level; unknown names fall back to WARNING."""
    if verbose:
        return logging.DEBUG
    return logging.getLevelNamesMapping().get(name.strip().upper(), logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="termday",
        description="Terminal greeting with upcoming events, sun times and a daily sentence.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG_DIR, metavar="DIR",
                        help="configuration directory (default: %(default)s)")
    parser.add_argument("--add-sentence", metavar="TEXT",
                        help="append a sentence to the sentence pool")
    parser.add_argument("--show-sun-times", metavar="true|false",
                        help="persistently enable/disable the sunrise/sunset line")
    parser.add_argument("--show-daily-sentence", metavar="true|false",
                        help="persistently enable/disable the daily sentence")
    parser.add_argument("--show-date-amount", type=int, default=0, metavar="N",
                        help="persistently set how many events are shown")
    parser.add_argument("--add-event", nargs="?", const="", default=None, metavar="NAME",
                        help="add a new event interactively")
    parser.add_argument("--refresh-sentence", action="store_true",
                        help="pick a new daily sentence now")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log debug output to stderr")
    return parser


def _settings_updates(args: argparse.Namespace) -> dict:
    """Collect config.json changes requested on the command line.

    Unparseable true/false values are ignored.
    """
    updates: dict = {}
    if args.show_sun_times:
        value = parse_bool_flag(args.show_sun_times)
        if value is not None:
            updates["showSunTimes"] = value
        else:
            logger.warning("Ignoring --show-sun-times %r", args.show_sun_times)
    if args.show_daily_sentence:
        value = parse_bool_flag(args.show_daily_sentence)
        if value is not None:
            updates["showDailySentence"] = value
        else:
            logger.warning("Ignoring --show-daily-sentence %r", args.show_daily_sentence)
    if args.show_date_amount > 0:
        updates["showDateAmount"] = args.show_date_amount
    return updates


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def add_sentence(config_dir: Path, sentence: str, console: Console) -> None:
    settings = load_settings(config_dir)
    store = SentenceStore(settings.sentences_path(config_dir))
    try:
        store.add(sentence)
    except (OSError, DataError) as exc:
        raise FatalError(f"Failed to add sentence: {exc}") from exc
    console.print(f"Added sentence: {sentence}", markup=False)


def add_event(
    config_dir: Path, name: str | None, console: Console, stream=None,
) -> None:
    settings = load_settings(config_dir)
    try:
        event = prompt_new_event(console, name=name or None, stream=stream)
    except InvalidInputError as exc:
        raise FatalError(str(exc)) from exc

    if event is None:
        console.print("Cancelled")
        return

    store = EventStore(settings.dates_path(config_dir))
    try:
        store.add(event)
    except (OSError, DataError) as exc:
        raise FatalError(f"Failed to add event: {exc}") from exc
    console.print(f"\n✓ Added event: {event.name}", markup=False)


def show_dashboard(
    config_dir: Path,
    settings: Settings,
    display: Display,
    refresh_sentence: bool = False,
    now: datetime | None = None,
) -> None:
    """Render greeting, daily sentence, sun countdown and events."""
    if now is None:
        now = local_now()

    try:
        events = EventStore(settings.dates_path(config_dir)).load()
    except (OSError, DataError) as exc:
        raise FatalError(f"Failed to load events: {exc}") from exc

    display.greeting()

    if settings.show_daily_sentence:
        policy = refresh_policy(settings.sentence_update_mode, settings.sentence_update_interval)
        try:
            sentence = get_daily_sentence(
                settings.sentence_cache_path(config_dir),
                settings.sentences_path(config_dir),
                policy,
                force_refresh=refresh_sentence,
                now=now,
            )
        except (OSError, DataError) as exc:
            logger.warning("Daily sentence unavailable: %s", exc)
        else:
            display.sentence(sentence)

    if settings.show_sun_times and settings.has_location:
        countdown = sun_countdown(settings.location, now, create_sun_calculator())
        if countdown is not None:
            display.sun(countdown)

    lunar = create_lunar_converter(settings) if any(e.is_lunar for e in events) else None
    occurrences = rank_and_filter(events, now, settings.show_date_amount, lunar)
    display.events(occurrences, settings.date_format)
    display.blank()


def run(argv: Sequence[str] | None = None, console: Console | None = None) -> int:
    """Run the CLI and return the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=log_level(args.verbose, DEFAULT_LOG_LEVEL), format=LOG_FORMAT)
    if DEFAULT_LOG_LEVEL.strip().upper() not in logging.getLevelNamesMapping():
        logger.warning("Unknown TERMDAY_LOG_LEVEL %r, using WARNING", DEFAULT_LOG_LEVEL)

    console = console or Console(highlight=False)
    err_console = Console(stderr=True, highlight=False)
    config_dir = Path(args.config)

    try:
        if not config_dir.is_dir():
            raise FatalError(f"Directory does not exist: {config_dir}")

        if args.add_sentence:
            add_sentence(config_dir, args.add_sentence, console)
            return 0

        if args.add_event is not None:
            add_event(config_dir, args.add_event, console)
            return 0

        settings = load_settings(config_dir)
        updates = _settings_updates(args)
        if updates:
            if update_settings_file(config_dir, updates):
                settings = load_settings(config_dir)
            else:
                # not persisted, still honoured for this run
                settings = Settings.model_validate(
                    {**settings.model_dump(by_alias=True), **updates}
                )

        show_dashboard(config_dir, settings, Display(console), args.refresh_sentence)
    except (ConfigError, FatalError) as exc:
        err_console.print(f"Error: {exc}", style="red", markup=False)
        logger.debug("Fatal error", exc_info=True)
        return 1

    return 0


def main() -> None:
    sys.exit(run())
