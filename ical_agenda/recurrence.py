"""Expand the recurrence properties of a calendar entry into start times.

The recurrence math is delegated to `dateutil.rrule`. The entry's DTSTART,
RRULE, EXRULE, RDATE and EXDATE properties are written back out as content
lines and parsed as a single recurrence set, which is then evaluated lazily
within a window.

`dateutil.rrule` walks every instance from DTSTART onwards, so a sub-daily
rule without a COUNT is restarted on the same grid just before the window.
Any other rule is bounded by a maximum number of visited instances.
"""

from __future__ import annotations

import datetime
import logging
import math

from dateutil import rrule

from .entry import CalendarEntry
from .exceptions import RecurrenceParseError
from .normalize import MIDNIGHT, resolve_timezone
from .parsing.const import ATTR_TZID
from .parsing.property import ParsedProperty
from .types import CalendarDateTime, DatePerhapsTime

__all__ = [
    "MAX_ITERATIONS",
    "MAX_RECURRENCES",
    "RRULE_PROPERTIES",
    "RecurrenceSet",
    "recurrence_spec",
]

_LOGGER = logging.getLogger(__name__)

RRULE_PROPERTIES = ("DTSTART", "RRULE", "EXRULE", "RDATE", "EXDATE")

MAX_RECURRENCES = 100
"""Upper bound on the instances of a single entry, e.g. for FREQ=SECONDLY."""

MAX_ITERATIONS = 50_000
"""Upper bound on the instances visited while looking for the window."""

_SUB_DAILY_SECONDS = {
    "HOURLY": 3600,
    "MINUTELY": 60,
    "SECONDLY": 1,
}

# Covers a daylight saving offset between the rule's wall clock and the window
_RESTART_MARGIN = datetime.timedelta(hours=2)

_DATE_TIME_FORMAT = "%Y%m%dT%H%M%S"


def recurrence_spec(entry: CalendarEntry, dtstart: str | None = None) -> str:
    """Return the recurrence properties of the entry as content lines.

    Properties are emitted in a fixed order and every instance of a property
    is included (e.g. multiple EXDATE lines). Only the TZID parameter is kept
    since that is the only parameter `dateutil.rrule` understands on all of
    these properties. A `dtstart` value replaces the value of DTSTART.
    """
    lines = []
    for name in RRULE_PROPERTIES:
        for prop in entry.get_properties(name):
            if dtstart is not None and name == "DTSTART":
                prop = ParsedProperty(name=prop.name, value=dtstart, params=prop.params)
            lines.append(prop.ics(param_names=(ATTR_TZID,)))
    return "\n".join(lines)


def _is_floating(entry: CalendarEntry) -> bool:
    start = entry.get_start()
    return not isinstance(start, CalendarDateTime) or start.floating


def _rule_period(value: str) -> int | None:
    """Return the seconds between instances of a sub-daily rule without a COUNT."""
    parts = dict(part.split("=", 1) for part in value.upper().split(";") if "=" in part)
    seconds = _SUB_DAILY_SECONDS.get(parts.get("FREQ", ""))
    if seconds is None or "COUNT" in parts:
        return None
    try:
        interval = int(parts.get("INTERVAL", "1"))
    except ValueError:
        return None
    return seconds * interval if interval > 0 else None


def _restart_period(entry: CalendarEntry) -> datetime.timedelta | None:
    """Return the period of the grid shared by all rules, if they can be restarted."""
    rules = [
        prop.value for name in ("RRULE", "EXRULE") for prop in entry.get_properties(name)
    ]
    periods: list[int] = []
    for value in rules:
        if (period := _rule_period(value)) is None:
            return None
        periods.append(period)
    return datetime.timedelta(seconds=math.lcm(*periods)) if periods else None


def _rule_timezone(dtstart: DatePerhapsTime) -> datetime.tzinfo | None:
    """Return the timezone whose wall clock the rule is stepped in."""
    if not isinstance(dtstart, CalendarDateTime) or dtstart.floating:
        return None
    if dtstart.tzid is not None:
        return resolve_timezone(dtstart.tzid)
    return datetime.timezone.utc


class RecurrenceSet:
    """A wrapper around `dateutil.rrule.rruleset` to workaround limitations.

    `dateutil.rrule` compares every date in the set with each other and raises
    a TypeError when a floating and a timezone-aware value are mixed. This
    wrapper reports those as a `RecurrenceParseError` and converts the
    resulting start times to local wall clock times.
    """

    def __init__(self, entry: CalendarEntry) -> None:
        """Parse the recurrence properties of a calendar entry."""
        self._entry = entry
        self._floating = _is_floating(entry)
        self._spec = recurrence_spec(entry)
        self._ruleset = self._parse(self._spec)
        self._period = _restart_period(entry)

    def _parse(self, spec: str) -> rrule.rruleset:
        try:
            # A floating rule ignores timezones on the other values, which
            # allows an UNTIL in UTC as written by many calendar servers.
            return rrule.rrulestr(
                spec,
                forceset=True,
                ignoretz=self._floating,
                tzids=resolve_timezone,
            )
        except (ValueError, TypeError, OverflowError) as err:
            raise RecurrenceParseError(str(err)) from err

    def _restarted(self, start: datetime.datetime) -> rrule.rruleset:
        """Return the ruleset with DTSTART moved on its grid to just before start.

        The grid is stepped in the wall clock of DTSTART, the same way
        `dateutil.rrule` steps through sub-daily rules.
        """
        if self._period is None or (dtstart := self._entry.get_start()) is None:
            return self._ruleset
        if isinstance(dtstart, CalendarDateTime):
            value = dtstart.value
        else:
            value = datetime.datetime.combine(dtstart, MIDNIGHT)
        if (timezone := _rule_timezone(dtstart)) is not None:
            start = start.astimezone(timezone)
        target = start.replace(tzinfo=None)

        if (steps := (target - _RESTART_MARGIN - value) // self._period) <= 0:
            return self._ruleset
        restarted = (value + steps * self._period).strftime(_DATE_TIME_FORMAT)
        if timezone is datetime.timezone.utc:
            restarted += "Z"
        _LOGGER.debug("Restarting recurrence %s at %s", self, restarted)
        return self._parse(recurrence_spec(self._entry, dtstart=restarted))

    def between(
        self,
        start: datetime.datetime,
        end: datetime.datetime,
        max_count: int = MAX_RECURRENCES,
    ) -> list[datetime.datetime]:
        """Return local wall clock times of instances strictly within the window.

        The window bounds are timezone aware datetimes in the local display
        timezone. At most `max_count` instances are returned, and a
        `RecurrenceParseError` is raised when more than `MAX_ITERATIONS`
        instances are visited before reaching the end of the window.
        """
        local_tz = start.tzinfo
        if local_tz is None or end.tzinfo is None:
            raise ValueError("Expected timezone aware window bounds")
        ruleset = self._restarted(start)
        if self._floating:
            start = start.replace(tzinfo=None)
            end = end.replace(tzinfo=None)

        instances: list[datetime.datetime] = []
        try:
            for count, value in enumerate(ruleset):
                if value >= end or len(instances) >= max_count:
                    break
                if count >= MAX_ITERATIONS:
                    raise RecurrenceParseError(
                        f"Recurrence {self} exceeded {MAX_ITERATIONS} instances"
                    )
                if value > start:
                    instances.append(value)
        except (TypeError, ValueError, OverflowError) as err:
            raise RecurrenceParseError(
                f"Error evaluating recurrence ({self}): {err}"
            ) from err

        _LOGGER.debug("Recurrence %s had %d instances in window", self, len(instances))
        return [
            value if value.tzinfo is None
            else value.astimezone(local_tz).replace(tzinfo=None)
            for value in instances
        ]

    def __repr__(self) -> str:
        return f"RecurrenceSet(spec={self._spec!r}, floating={self._floating})"
