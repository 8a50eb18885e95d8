"""Library for handling rfc5545 components.

An iCalendar object consists of one or more components, that may have
properties or sub-components, such as the calendar itself, an event or a
to-do. Components created here have no semantic meaning, but hold all the
data needed to interpret them based on their type.
"""

from __future__ import annotations

import re
from collections.abc import Generator
from dataclasses import dataclass, field

from ical_agenda.exceptions import CalendarParseError

from .const import ATTR_BEGIN, ATTR_END, FOLD
from .property import ParsedProperty, parse_contentlines

FOLD_RE = re.compile(FOLD, flags=re.MULTILINE)
LINES_RE = re.compile(r"\r?\n")


@dataclass
class ParsedComponent:
    """An rfc5545 component."""

    name: str
    properties: list[ParsedProperty] = field(default_factory=list)
    components: list[ParsedComponent] = field(default_factory=list)

    def get_properties(self, name: str) -> list[ParsedProperty]:
        """Return all properties with the specified name, in document order."""
        return [prop for prop in self.properties if prop.name == name.lower()]


def parse_content(content: str) -> list[ParsedComponent]:
    """Parse content into a tree of raw components.

    This walks through each unfolded line and uses a stack to associate
    properties with the current component.
    """
    stack: list[ParsedComponent] = [ParsedComponent(name="stream")]
    for prop in parse_contentlines(unfolded_lines(content)):
        if prop.name == ATTR_BEGIN:
            stack.append(ParsedComponent(name=prop.value.lower()))
        elif prop.name == ATTR_END:
            if len(stack) == 1:
                raise CalendarParseError(
                    f"Unexpected 'END:{prop.value}' without matching BEGIN"
                )
            component = stack.pop()
            if prop.value.lower() != component.name:
                raise CalendarParseError(
                    f"Unexpected 'END:{prop.value}', expected END:{component.name.upper()}"
                )
            stack[-1].components.append(component)
        else:
            stack[-1].properties.append(prop)

    if len(stack) > 1:
        raise CalendarParseError(
            f"Unexpected end of content, missing END:{stack[-1].name.upper()}"
        )
    return stack[0].components


def unfolded_lines(content: str) -> Generator[str, None, None]:
    """Read content and unfold lines."""
    content = FOLD_RE.sub("", content)
    yield from LINES_RE.split(content)
