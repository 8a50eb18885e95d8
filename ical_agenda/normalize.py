"""Convert calendar date and time values to local wall clock times.

Every occurrence on the agenda is expressed as a naive `datetime.datetime` in
the local display timezone. The local timezone is always passed in by the
caller rather than read from the process, so results only depend on the
arguments.
"""

from __future__ import annotations

import datetime
import logging
import zoneinfo
from functools import cache

from .exceptions import InvalidTimezoneError
from .types import CalendarDateTime

__all__ = [
    "end_of_day",
    "normalize_date",
    "normalize_datetime",
    "resolve_timezone",
]

_LOGGER = logging.getLogger(__name__)

MIDNIGHT = datetime.time()


@cache
def resolve_timezone(tzid: str) -> datetime.tzinfo:
    """Look up a timezone by its IANA identifier.

    This checks the system timezone database first, then falls back to the
    tzdata python package.
    """
    try:
        return zoneinfo.ZoneInfo(tzid)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError, OSError) as err:
        raise InvalidTimezoneError(tzid, "not found in timezone database") from err


def _localize(value: datetime.datetime, tzid: str) -> datetime.datetime:
    """Attach the named timezone to a wall clock time.

    A wall clock time inside a daylight saving transition either happens
    twice or not at all, which shows up as the two folds having different
    offsets.
    """
    timezone = resolve_timezone(tzid)
    earlier = value.replace(tzinfo=timezone, fold=0)
    later = value.replace(tzinfo=timezone, fold=1)
    if earlier.utcoffset() != later.utcoffset():
        raise InvalidTimezoneError(tzid, f"local time {value} is ambiguous or nonexistent")
    return earlier


def normalize_datetime(
    value: CalendarDateTime, local_tz: datetime.tzinfo
) -> datetime.datetime:
    """Return the local wall clock time of a DATE-TIME value."""
    if value.utc:
        aware = value.value.replace(tzinfo=datetime.timezone.utc)
    elif value.tzid is not None:
        aware = _localize(value.value, value.tzid)
    else:
        return value.value
    result = aware.astimezone(local_tz).replace(tzinfo=None)
    _LOGGER.debug("Normalized %s to local time %s", value, result)
    return result


def normalize_date(value: datetime.date) -> datetime.datetime:
    """Return local midnight at the start of the date."""
    return datetime.datetime.combine(value, MIDNIGHT)


def end_of_day(value: datetime.datetime) -> datetime.datetime:
    """Return the last representable instant of the day containing value."""
    return datetime.datetime.combine(value.date(), datetime.time.max)
