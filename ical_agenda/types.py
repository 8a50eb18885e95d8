"""Library for parsing DATE, DATE-TIME and DURATION property values.

A DATE-TIME value is kept the way it was written: as a wall clock time that
is either floating, in UTC, or qualified with a TZID. Resolving it to the
local display timezone is the job of `ical_agenda.normalize`, so that an
unknown timezone only affects the entry that uses it.
"""

from __future__ import annotations

import datetime
import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

from .parsing.const import ATTR_TZID, ATTR_VALUE
from .parsing.property import ParsedProperty

__all__ = [
    "CalendarDateTime",
    "DatePerhapsTime",
    "parse_date_perhaps_time",
    "parse_duration",
]

_LOGGER = logging.getLogger(__name__)

DATE_REGEX = re.compile(r"^([0-9]{4})([0-9]{2})([0-9]{2})$")
DATETIME_REGEX = re.compile(
    r"^([0-9]{4})([0-9]{2})([0-9]{2})T([0-9]{2})([0-9]{2})([0-9]{2})(Z)?$"
)
DATE_PART = r"(\d+)D"
TIME_PART = r"T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?"
DATETIME_PART = f"(?:{DATE_PART})?(?:{TIME_PART})?"
WEEKS_PART = r"(\d+)W"
DURATION_REGEX = re.compile(f"([-+]?)P(?:{WEEKS_PART}|{DATETIME_PART})$")


@dataclass(frozen=True)
class CalendarDateTime:
    """A DATE-TIME value as written in a calendar file."""

    value: datetime.datetime
    """The wall clock time, without any tzinfo attached."""

    utc: bool = False
    """True when the value had a trailing 'Z'."""

    tzid: Optional[str] = None
    """The TZID parameter of the property, if any."""

    def __post_init__(self) -> None:
        if self.value.tzinfo is not None:
            raise ValueError(f"Expected a wall clock time without tzinfo: {self.value}")
        if self.utc and self.tzid:
            raise ValueError("A DATE-TIME can't be both UTC and have a TZID")

    @property
    def floating(self) -> bool:
        """Return True if the value is not bound to any timezone."""
        return not self.utc and self.tzid is None

    @classmethod
    def floating_time(cls, value: datetime.datetime) -> CalendarDateTime:
        """Create a floating value."""
        return cls(value=value)

    @classmethod
    def utc_time(cls, value: datetime.datetime) -> CalendarDateTime:
        """Create a UTC value from a naive UTC wall time."""
        return cls(value=value, utc=True)

    @classmethod
    def with_timezone(cls, value: datetime.datetime, tzid: str) -> CalendarDateTime:
        """Create a value qualified by a timezone identifier."""
        return cls(value=value, tzid=tzid)


DatePerhapsTime = Union[CalendarDateTime, datetime.date]
"""A value of a property that may be either a DATE or a DATE-TIME."""


def _parse_date(prop: ParsedProperty) -> datetime.date:
    if not (match := DATE_REGEX.fullmatch(prop.value)):
        raise ValueError(f"Expected value to match DATE pattern: '{prop.value}'")
    year, month, day = (int(part) for part in match.groups())
    return datetime.date(year, month, day)


def _parse_date_time(prop: ParsedProperty) -> CalendarDateTime:
    if not (match := DATETIME_REGEX.fullmatch(prop.value)):
        raise ValueError(f"Expected value to match DATE-TIME pattern: '{prop.value}'")
    year, month, day, hour, minute, second = (int(part) for part in match.groups()[:6])
    value = datetime.datetime(year, month, day, hour, minute, second)
    # Example: TZID=America/New_York:19980119T020000
    if tzid := prop.get_parameter_value(ATTR_TZID):
        return CalendarDateTime.with_timezone(value, tzid)
    # Example: 19980119T070000Z
    if match.group(7):
        return CalendarDateTime.utc_time(value)
    # Example: 19980118T230000
    return CalendarDateTime.floating_time(value)


def parse_date_perhaps_time(prop: ParsedProperty) -> DatePerhapsTime:
    """Parse a property that holds either a DATE or a DATE-TIME value.

    The VALUE parameter is honored when present, otherwise the format of the
    value decides.
    """
    value_type = (prop.get_parameter_value(ATTR_VALUE) or "").upper()
    result: DatePerhapsTime
    if value_type == "DATE" or (not value_type and DATE_REGEX.fullmatch(prop.value)):
        result = _parse_date(prop)
    elif value_type in ("", "DATE-TIME"):
        result = _parse_date_time(prop)
    else:
        raise ValueError(f"Unsupported VALUE type '{value_type}' for {prop.name}")
    _LOGGER.debug("Parsed %s value %s", prop.name, result)
    return result


def parse_duration(prop: ParsedProperty) -> datetime.timedelta:
    """Parse a rfc5545 DURATION value into a datetime.timedelta."""
    if not (match := DURATION_REGEX.fullmatch(prop.value)):
        raise ValueError(f"Expected value to match DURATION pattern: {prop.value}")
    sign, weeks, days, hours, minutes, seconds = match.groups()
    result: datetime.timedelta
    if weeks:
        result = datetime.timedelta(weeks=int(weeks))
    else:
        result = datetime.timedelta(
            days=int(days or 0),
            hours=int(hours or 0),
            minutes=int(minutes or 0),
            seconds=int(seconds or 0),
        )
    if sign == "-":
        result = -result
    return result
