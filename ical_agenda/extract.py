"""Extract the concrete occurrences of a calendar entry within a window.

A non-recurring entry produces exactly one occurrence, wherever it is. A
recurring entry produces one occurrence per instance strictly inside the
window, bounded by a maximum count.
"""

from __future__ import annotations

import datetime
import logging

from .entry import CalendarEntry
from .exceptions import InvalidDurationError, MissingEndTimeError, MissingStartTimeError
from .model import AgendaEntry
from .normalize import end_of_day, normalize_date, normalize_datetime
from .recurrence import MAX_RECURRENCES, RecurrenceSet
from .types import CalendarDateTime

__all__ = ["extract_occurrences"]

_LOGGER = logging.getLogger(__name__)


def _resolve_start(entry: CalendarEntry, local_tz: datetime.tzinfo) -> datetime.datetime:
    if (start := entry.get_start()) is None:
        raise MissingStartTimeError("Calendar entry is missing a start time")
    if isinstance(start, CalendarDateTime):
        return normalize_datetime(start, local_tz)
    return normalize_date(start)


def _resolve_duration(
    entry: CalendarEntry, start: datetime.datetime, local_tz: datetime.tzinfo
) -> datetime.timedelta:
    """Return the duration of the entry.

    A date-only end is low precision: the entry is treated as lasting until
    the end of the day it starts on.
    """
    if (end := entry.get_end()) is None:
        raise MissingEndTimeError("Calendar entry is missing an end time")
    if isinstance(end, CalendarDateTime):
        duration = normalize_datetime(end, local_tz) - start
    else:
        duration = end_of_day(start) - start
    if duration < datetime.timedelta(0):
        raise InvalidDurationError(f"Calendar entry ends {-duration} before it starts")
    return duration


def extract_occurrences(
    entry: CalendarEntry,
    window_start: datetime.datetime,
    window_end: datetime.datetime,
    max_recurrences: int = MAX_RECURRENCES,
) -> list[AgendaEntry]:
    """Return the occurrences of a calendar entry.

    The window bounds must be timezone aware and in the local display
    timezone; all returned start times are local wall clock times in that
    timezone. Raises an `ExtractionError` when the entry can't be placed on
    the agenda.
    """
    local_tz = window_start.tzinfo
    if local_tz is None or window_end.tzinfo is None:
        raise ValueError("Expected timezone aware window bounds")

    start = _resolve_start(entry, local_tz)
    duration = _resolve_duration(entry, start, local_tz)
    name = entry.get_summary() or ""

    if entry.property_value("RRULE") is None:
        return [AgendaEntry(name=name, start=start, duration=duration)]

    recurrences = RecurrenceSet(entry)
    occurrences = [
        AgendaEntry(name=name, start=instance, duration=duration)
        for instance in recurrences.between(window_start, window_end, max_recurrences)
    ]
    _LOGGER.debug("Expanded '%s' into %d occurrences", name, len(occurrences))
    return occurrences
