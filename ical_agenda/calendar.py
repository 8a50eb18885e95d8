"""A calendar document is the collection of entries in an ics file.

This is an example of reading the entries of an ics file:
```python
from pathlib import Path
from ical_agenda.calendar import CalendarDocument

filename = Path("example/calendar.ics")
document = CalendarDocument.from_ics(filename.read_text())
print("File contains %s entries", len(document.entries))
```
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Union

from pydantic import ValidationError

from .entry import Event, Todo, Venue
from .exceptions import CalendarParseError
from .parsing.component import parse_content

__all__ = ["CalendarDocument", "ENTRY_TYPES"]

_LOGGER = logging.getLogger(__name__)

ENTRY_TYPES: dict[str, type[Union[Event, Todo, Venue]]] = {
    "vevent": Event,
    "vtodo": Todo,
    "vvenue": Venue,
}

CALENDAR = "vcalendar"


@dataclass
class CalendarDocument:
    """The agenda relevant entries of one or more calendars, in document order."""

    entries: list[Union[Event, Todo, Venue]] = field(default_factory=list)

    @classmethod
    def from_ics(cls, content: str) -> CalendarDocument:
        """Factory method to create a new instance from rfc5545 iCalendar content.

        Components other than events, to-dos and venues (e.g. timezones or
        journals) are ignored, and so is an entry with a property value that
        can't be parsed. Only content that can't be read as a calendar raises
        a `CalendarParseError`.
        """
        components = parse_content(content)
        calendars = [component for component in components if component.name == CALENDAR]
        if not calendars:
            raise CalendarParseError("Calendar stream did not contain a VCALENDAR")

        entries: list[Union[Event, Todo, Venue]] = []
        for calendar in calendars:
            for component in calendar.components:
                if (entry_type := ENTRY_TYPES.get(component.name)) is None:
                    _LOGGER.debug("Ignoring component %s", component.name)
                    continue
                try:
                    entries.append(entry_type.model_validate(component))
                except ValidationError as err:
                    _LOGGER.debug(
                        "Skipping %s with invalid values: %s", component.name.upper(), err
                    )
        _LOGGER.debug("Parsed %d calendar entries", len(entries))
        return cls(entries=entries)
