"""Library for handling rfc5545 properties and parameters.

A property is a single "contentline" of a calendar document, parsed into its
name, its parameters and its raw value. This library does not attempt to
interpret the value itself, that is left to `ical_agenda.types`.

For example, given a content line of:

  DTSTART;TZID=Europe/Berlin:20230501T090000

This library would create:

  ParsedProperty(
    name='dtstart',
    value='20230501T090000',
    params=[ParsedPropertyParameter(name='TZID', values=['Europe/Berlin'])],
  )
"""

from __future__ import annotations

import re
from collections.abc import Collection, Generator, Iterable, Sequence
from dataclasses import dataclass
from typing import Optional

from ical_agenda.exceptions import CalendarParseError

_RE_NAME = re.compile("[A-Z0-9-]+")
_RE_CONTROL_CHARS = re.compile("[\x00-\x08\x0a-\x1f\x7f]")
_UNSAFE_CHAR_RE = re.compile(r"[,:;]")
_NAME_DELIMITERS = (";", ":")
_PARAM_DELIMITERS = (",", ";", ":")
_QUOTE = '"'


def _find_first(line: str, chars: Sequence[str], start: int = 0) -> int | None:
    """Return the position of the earliest of any of the characters."""
    positions = [pos for char in chars if (pos := line.find(char, start)) != -1]
    return min(positions) if positions else None


@dataclass
class ParsedPropertyParameter:
    """An rfc5545 property parameter."""

    name: str
    values: list[str]


@dataclass
class ParsedProperty:
    """An rfc5545 property."""

    name: str
    value: str
    params: Optional[list[ParsedPropertyParameter]] = None

    def get_parameter_values(self, name: str) -> list[str]:
        """Return the list of values for the named parameter."""
        for param in self.params or ():
            if param.name.lower() == name.lower():
                return param.values
        return []

    def get_parameter_value(self, name: str) -> str | None:
        """Return the single value of the named parameter."""
        if not (values := self.get_parameter_values(name)):
            return None
        if len(values) > 1:
            raise ValueError(f"Expected only a single parameter value, got {values}")
        return values[0]

    def ics(self, param_names: Collection[str] | None = None) -> str:
        """Encode the property as a content line.

        When upper case `param_names` are given, only those parameters are written.
        """
        result = [self.name.upper()]
        for param in self.params or ():
            if param_names is not None and param.name.upper() not in param_names:
                continue
            values = ",".join(
                f'"{value}"' if _UNSAFE_CHAR_RE.search(value) else value
                for value in param.values
            )
            result.append(f";{param.name.upper()}={values}")
        result.append(f":{self.value}")
        return "".join(result)

    @classmethod
    def from_ics(cls, contentline: str) -> ParsedProperty:
        """Decode a ParsedProperty from a content line.

        Will raise a CalendarParseError on failure.
        """
        return _parse_line(contentline)


def _parse_param_value(line: str, pos: int) -> tuple[str, int]:
    """Parse a single, possibly quoted, parameter value starting at pos."""
    if line[pos] == _QUOTE:
        if (end_quote_pos := line.find(_QUOTE, pos + 1)) == -1:
            raise CalendarParseError(
                "Unexpected end of line: unclosed quoted parameter value",
                detailed_error=line,
            )
        return line[pos + 1 : end_quote_pos], end_quote_pos + 1
    if (end_pos := _find_first(line, _PARAM_DELIMITERS, pos)) is None:
        raise CalendarParseError(
            "Unexpected end of line: missing parameter value delimiter",
            detailed_error=line,
        )
    return line[pos:end_pos], end_pos


def _parse_line(line: str) -> ParsedProperty:
    """Parse a single property line."""
    if (name_end_pos := _find_first(line, _NAME_DELIMITERS)) is None:
        raise CalendarParseError(
            f"Invalid property line, expected {_NAME_DELIMITERS} after property name",
            detailed_error=line,
        )
    property_name = line[:name_end_pos].upper()
    if not _RE_NAME.fullmatch(property_name):
        raise CalendarParseError(
            f"Invalid property name '{property_name}'", detailed_error=line
        )

    pos = name_end_pos + 1
    params: list[ParsedPropertyParameter] = []
    delimiter = line[name_end_pos]
    while delimiter == ";":
        if (param_name_end_pos := line.find("=", pos)) == -1:
            raise CalendarParseError(
                f"Invalid parameter format: missing '=' in '{line[pos:]}'",
                detailed_error=line,
            )
        param_name = line[pos:param_name_end_pos].upper()
        if not _RE_NAME.fullmatch(param_name):
            raise CalendarParseError(
                f"Invalid parameter name '{param_name}'", detailed_error=line
            )
        pos = param_name_end_pos + 1

        values: list[str] = []
        delimiter = ","
        while delimiter == ",":
            if pos >= len(line):
                raise CalendarParseError(
                    "Unexpected end of line, expected parameter value",
                    detailed_error=line,
                )
            value, pos = _parse_param_value(line, pos)
            if _QUOTE in value or _RE_CONTROL_CHARS.search(value):
                raise CalendarParseError(
                    f"Invalid value '{value}' for parameter '{param_name}'",
                    detailed_error=line,
                )
            values.append(value)
            if pos >= len(line) or line[pos] not in _PARAM_DELIMITERS:
                raise CalendarParseError(
                    f"Expected {_PARAM_DELIMITERS} after parameter value '{value}'",
                    detailed_error=line,
                )
            delimiter = line[pos]
            pos += 1
        params.append(ParsedPropertyParameter(name=param_name, values=values))

    property_value = line[pos:]
    if _RE_CONTROL_CHARS.search(property_value):
        raise CalendarParseError(
            f"Property value contains control characters: {property_value}",
            detailed_error=line,
        )
    return ParsedProperty(
        name=property_name.lower(),
        value=property_value,
        params=params or None,
    )


def parse_contentlines(
    contentlines: Iterable[str],
) -> Generator[ParsedProperty, None, None]:
    """Parse content lines into ParsedProperty objects, skipping blank lines."""
    for contentline in contentlines:
        if not contentline:
            continue
        try:
            yield ParsedProperty.from_ics(contentline)
        except CalendarParseError as err:
            raise CalendarParseError(
                "Failed to parse calendar contents", detailed_error=str(err)
            ) from err
