"""Command line entry point that prints a one line agenda.

Usage:

  ical-agenda [--display-compact] <calendar.ics>

The display flag is only honored when exactly two arguments are given, and
the last argument is always the calendar file.
"""

from __future__ import annotations

import datetime
import enum
import logging
import os
import pathlib
import sys
from collections.abc import Iterable, Sequence

from dateutil import tz

from .calendar import CalendarDocument
from .entry import CalendarEntry
from .exceptions import CalendarParseError
from .formatter import format_agenda
from .model import DisplayMode
from .selector import select_agenda
from .settings import AgendaSettings

__all__ = ["ExitCode", "main", "parse_args", "render_agenda"]

_LOGGER = logging.getLogger(__name__)

COMPACT_FLAG = "--display-compact"
DEBUG_ENV = "ICAL_AGENDA_DEBUG"


class ExitCode(enum.IntEnum):
    """Exit codes of the command line tool."""

    SUCCESS = 0
    ERROR = 1
    USAGE = 2


class UsageError(Exception):
    """Raised when the command line arguments can't be used."""


def local_timezone() -> datetime.tzinfo:
    """Return the local display timezone, following daylight saving changes."""
    return tz.tzlocal()


def parse_args(args: Sequence[str]) -> tuple[DisplayMode, pathlib.Path]:
    """Return the display mode and calendar path from the arguments."""
    if not args:
        raise UsageError("Calendar file not provided")
    mode = DisplayMode.DEFAULT
    if len(args) == 2 and args[0] == COMPACT_FLAG:
        mode = DisplayMode.COMPACT
    return mode, pathlib.Path(args[-1])


def render_agenda(
    entries: Iterable[CalendarEntry],
    now: datetime.datetime,
    mode: DisplayMode,
    settings: AgendaSettings | None = None,
) -> str:
    """Select and format the agenda for the current time."""
    settings = settings or AgendaSettings()
    selected = select_agenda(entries, now, settings)
    return format_agenda(mode, selected, now.replace(tzinfo=None), settings.separator)


def _setup_logging() -> None:
    level = logging.DEBUG if os.environ.get(DEBUG_ENV) else logging.WARNING
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line tool and return the exit code."""
    _setup_logging()
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        mode, path = parse_args(args)
    except UsageError as err:
        print(f"Error: {err}", file=sys.stderr)
        print(f"Usage: ical-agenda [{COMPACT_FLAG}] <calendar.ics>", file=sys.stderr)
        return ExitCode.USAGE

    try:
        document = CalendarDocument.from_ics(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as err:
        print(f"Error: Unable to read calendar file {path}: {err}", file=sys.stderr)
        return ExitCode.ERROR
    except CalendarParseError as err:
        print(f"Error: Unable to parse calendar file {path}: {err}", file=sys.stderr)
        if err.detailed_error:
            _LOGGER.debug("Parse error details: %s", err.detailed_error)
        return ExitCode.ERROR

    # The current time is read once and passed along explicitly
    now = datetime.datetime.now(tz=local_timezone())
    _LOGGER.debug("Building agenda for %s (%s)", now, mode.value)
    print(render_agenda(document.entries, now, mode))
    return ExitCode.SUCCESS
