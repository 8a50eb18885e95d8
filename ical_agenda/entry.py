"""Calendar entries that can be placed on an agenda.

An agenda is built from three kinds of calendar components: events, to-dos
and venues. Each is its own model, but they all expose the same small
surface described by `CalendarEntry` so the extractor can treat them alike.

Entries are created from a `ParsedComponent`:
```python
event = Event.model_validate(component)
```
"""

from __future__ import annotations

import dataclasses
import datetime
import logging
import re
from collections.abc import Callable
from typing import Any, Optional, Protocol, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .parsing.component import ParsedComponent
from .parsing.property import ParsedProperty
from .types import CalendarDateTime, DatePerhapsTime, parse_date_perhaps_time, parse_duration

__all__ = [
    "CalendarEntry",
    "Event",
    "Todo",
    "Venue",
]

_LOGGER = logging.getLogger(__name__)

_UNESCAPE_RE = re.compile(r"\\([\\;,Nn])")
_UNESCAPE_CHAR = {"\\": "\\", ";": ";", ",": ",", "N": "\n", "n": "\n"}


@runtime_checkable
class CalendarEntry(Protocol):
    """The surface of a calendar component used to build an agenda."""

    def get_start(self) -> DatePerhapsTime | None:
        """Return the start of the entry."""

    def get_end(self) -> DatePerhapsTime | None:
        """Return the end of the entry."""

    def get_summary(self) -> str | None:
        """Return the display name of the entry."""

    def property_value(self, name: str) -> str | None:
        """Return the raw value of the first property with the name."""

    def get_properties(self, name: str) -> list[ParsedProperty]:
        """Return all raw properties with the name."""


def _parse_text(prop: ParsedProperty) -> str:
    """Parse an rfc5545 TEXT value."""
    return _UNESCAPE_RE.sub(lambda match: _UNESCAPE_CHAR[match.group(1)], prop.value)


PropertyParser = Callable[[ParsedProperty], Any]


def _parse_component(
    data: Any, parsers: dict[str, PropertyParser]
) -> Any:
    """Convert a ParsedComponent into model field values.

    Only the first property of each name is parsed into a typed field; all
    raw properties are kept for building recurrence specifications.
    """
    if not isinstance(data, ParsedComponent):
        return data
    values: dict[str, Any] = {"properties": data.properties}
    for field_name, parser in parsers.items():
        if props := data.get_properties(field_name):
            values[field_name] = parser(props[0])
    return values


def _property_value(properties: list[ParsedProperty], name: str) -> str | None:
    for prop in properties:
        if prop.name == name.lower():
            return prop.value
    return None


def _end_from_duration(
    start: DatePerhapsTime | None, duration: datetime.timedelta | None
) -> DatePerhapsTime | None:
    """Compute an end value from a start and a DURATION property."""
    if start is None or duration is None:
        return None
    if isinstance(start, CalendarDateTime):
        return dataclasses.replace(start, value=start.value + duration)
    return start + datetime.timedelta(days=duration.days)


class Event(BaseModel):
    """A single event on a calendar."""

    model_config = ConfigDict(frozen=True)

    summary: Optional[str] = None
    dtstart: Optional[Union[CalendarDateTime, datetime.date]] = None
    dtend: Optional[Union[CalendarDateTime, datetime.date]] = None
    duration: Optional[datetime.timedelta] = None
    properties: list[ParsedProperty] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _parse_properties(cls, data: Any) -> Any:
        return _parse_component(
            data,
            {
                "summary": _parse_text,
                "dtstart": parse_date_perhaps_time,
                "dtend": parse_date_perhaps_time,
                "duration": parse_duration,
            },
        )

    def get_start(self) -> DatePerhapsTime | None:
        """Return the start of the event."""
        return self.dtstart

    def get_end(self) -> DatePerhapsTime | None:
        """Return the end of the event, from DTEND or DURATION."""
        if self.dtend is not None:
            return self.dtend
        return _end_from_duration(self.dtstart, self.duration)

    def get_summary(self) -> str | None:
        return self.summary

    def property_value(self, name: str) -> str | None:
        return _property_value(self.properties, name)

    def get_properties(self, name: str) -> list[ParsedProperty]:
        return [prop for prop in self.properties if prop.name == name.lower()]


class Todo(BaseModel):
    """A to-do on a calendar.

    A to-do has a due date instead of an end.
    """

    model_config = ConfigDict(frozen=True)

    summary: Optional[str] = None
    dtstart: Optional[Union[CalendarDateTime, datetime.date]] = None
    due: Optional[Union[CalendarDateTime, datetime.date]] = None
    duration: Optional[datetime.timedelta] = None
    properties: list[ParsedProperty] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _parse_properties(cls, data: Any) -> Any:
        return _parse_component(
            data,
            {
                "summary": _parse_text,
                "dtstart": parse_date_perhaps_time,
                "due": parse_date_perhaps_time,
                "duration": parse_duration,
            },
        )

    def get_start(self) -> DatePerhapsTime | None:
        """Return the start of the to-do."""
        return self.dtstart

    def get_end(self) -> DatePerhapsTime | None:
        """Return when the to-do is due, from DUE or DURATION."""
        if self.due is not None:
            return self.due
        return _end_from_duration(self.dtstart, self.duration)

    def get_summary(self) -> str | None:
        return self.summary

    def property_value(self, name: str) -> str | None:
        return _property_value(self.properties, name)

    def get_properties(self, name: str) -> list[ParsedProperty]:
        return [prop for prop in self.properties if prop.name == name.lower()]


class Venue(BaseModel):
    """A venue component (VVENUE), displayed by its name."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    summary: Optional[str] = None
    dtstart: Optional[Union[CalendarDateTime, datetime.date]] = None
    dtend: Optional[Union[CalendarDateTime, datetime.date]] = None
    properties: list[ParsedProperty] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _parse_properties(cls, data: Any) -> Any:
        return _parse_component(
            data,
            {
                "name": _parse_text,
                "summary": _parse_text,
                "dtstart": parse_date_perhaps_time,
                "dtend": parse_date_perhaps_time,
            },
        )

    def get_start(self) -> DatePerhapsTime | None:
        return self.dtstart

    def get_end(self) -> DatePerhapsTime | None:
        return self.dtend

    def get_summary(self) -> str | None:
        """Return the venue name, falling back to the summary."""
        return self.name if self.name is not None else self.summary

    def property_value(self, name: str) -> str | None:
        return _property_value(self.properties, name)

    def get_properties(self, name: str) -> list[ParsedProperty]:
        return [prop for prop in self.properties if prop.name == name.lower()]
