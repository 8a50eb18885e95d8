"""Render agenda occurrences as short human readable text.

All functions here are pure and only depend on their arguments, including
the current time.
"""

from __future__ import annotations

import datetime
from collections.abc import Iterable

from .model import AgendaEntry, DisplayMode

__all__ = [
    "DEFAULT_SEPARATOR",
    "format_agenda",
    "format_agenda_entry",
    "format_duration",
]

DEFAULT_SEPARATOR = " » "
ONE_MINUTE = datetime.timedelta(minutes=1)


def _format_hours(hours: int, minutes: int) -> str:
    if not minutes:
        return f"{hours}h"
    return f"{hours + minutes / 60:.2f}".rstrip("0").rstrip(".") + "h"


def format_duration(value: datetime.timedelta) -> str:
    """Format a duration using its largest non-zero unit.

    Hours are shown with minutes as a decimal fraction (e.g. `1.5h`), while
    minutes and seconds are whole numbers. The sign is dropped and so is any
    precision below a second.
    """
    seconds = abs(int(value.total_seconds()))
    hours, remainder = divmod(seconds, 3600)
    minutes = remainder // 60
    if hours:
        return _format_hours(hours, minutes)
    if minutes:
        return f"{minutes}min"
    return f"{seconds}s"


def _format_default(entry: AgendaEntry, now: datetime.datetime) -> str:
    start_time = entry.start.strftime("%H:%M")
    if entry.start <= now:
        return f"{entry.name} {start_time} ({format_duration(now - entry.start)} ago)"
    return f"{entry.name} {start_time} (in {format_duration(entry.start - now)})"


def _format_compact(entry: AgendaEntry, now: datetime.datetime) -> str:
    time_until = entry.start - now
    if time_until >= ONE_MINUTE:
        return f"{entry.name} · {format_duration(time_until)}"
    elapsed = format_duration(now - entry.start)
    remaining = format_duration(entry.end - now)
    return f"{entry.name} · {elapsed}/{remaining}"


def format_agenda_entry(
    mode: DisplayMode, entry: AgendaEntry, now: datetime.datetime
) -> str:
    """Format a single occurrence relative to the current local time."""
    if mode is DisplayMode.COMPACT:
        return _format_compact(entry, now)
    return _format_default(entry, now)


def format_agenda(
    mode: DisplayMode,
    entries: Iterable[AgendaEntry],
    now: datetime.datetime,
    separator: str = DEFAULT_SEPARATOR,
) -> str:
    """Format occurrences into a single line."""
    return separator.join(format_agenda_entry(mode, entry, now) for entry in entries)
