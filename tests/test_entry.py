"""Tests for calendar entry models."""

from collections.abc import Callable
import datetime

import pytest
from pydantic import ValidationError

from ical_agenda.entry import CalendarEntry, Event, Todo, Venue
from ical_agenda.parsing.component import parse_content
from ical_agenda.types import CalendarDateTime


def test_event(event_from_ics: Callable[[str], Event]) -> None:
    """Test the properties of an event."""
    event = event_from_ics(
        """\
        SUMMARY:Team sync\\, weekly
        DTSTART;TZID=Europe/Berlin:20230501T090000
        DTEND;TZID=Europe/Berlin:20230501T100000
        RRULE:FREQ=WEEKLY
        """
    )
    assert isinstance(event, CalendarEntry)
    assert event.get_summary() == "Team sync, weekly"
    assert event.get_start() == CalendarDateTime(
        datetime.datetime(2023, 5, 1, 9, 0), tzid="Europe/Berlin"
    )
    assert event.get_end() == CalendarDateTime(
        datetime.datetime(2023, 5, 1, 10, 0), tzid="Europe/Berlin"
    )
    assert event.property_value("RRULE") == "FREQ=WEEKLY"
    assert event.property_value("EXDATE") is None
    assert [prop.name for prop in event.get_properties("dtstart")] == ["dtstart"]


def test_event_duration(event_from_ics: Callable[[str], Event]) -> None:
    """Test an event end computed from a DURATION."""
    event = event_from_ics(
        """\
        DTSTART:20230501T233000Z
        DURATION:PT1H
        """
    )
    assert event.get_summary() is None
    assert event.get_end() == CalendarDateTime(
        datetime.datetime(2023, 5, 2, 0, 30), utc=True
    )


def test_all_day_event_duration(event_from_ics: Callable[[str], Event]) -> None:
    """Test an all day event end computed from a DURATION."""
    event = event_from_ics(
        """\
        DTSTART;VALUE=DATE:20230501
        DURATION:P2D
        """
    )
    assert event.get_end() == datetime.date(2023, 5, 3)


def test_event_without_end(event_from_ics: Callable[[str], Event]) -> None:
    """Test an event with only a start."""
    event = event_from_ics("DTSTART:20230501T090000")
    assert event.get_end() is None


def test_event_text_escapes(event_from_ics: Callable[[str], Event]) -> None:
    """Test unescaping TEXT values."""
    event = event_from_ics(r"SUMMARY:a\;b\\c\nd")
    assert event.get_summary() == "a;b\\c\nd"


@pytest.mark.parametrize(
    "body",
    [
        "DTSTART:2023-05-01",
        "DTEND:20230501T0900",
        "DURATION:1 hour",
    ],
)
def test_invalid_event(event_from_ics: Callable[[str], Event], body: str) -> None:
    """Test an event with invalid property values."""
    with pytest.raises(ValidationError):
        event_from_ics(body)


def test_todo() -> None:
    """Test a to-do ends when it is due."""
    todo = Todo.model_validate(
        parse_content(
            "BEGIN:VTODO\nSUMMARY:Taxes\nDTSTART:20230501\nDUE:20230502\nEND:VTODO\n"
        )[0]
    )
    assert isinstance(todo, CalendarEntry)
    assert todo.get_summary() == "Taxes"
    assert todo.get_start() == datetime.date(2023, 5, 1)
    assert todo.get_end() == datetime.date(2023, 5, 2)


def test_todo_duration() -> None:
    """Test a to-do without a due date uses its duration."""
    todo = Todo(
        dtstart=CalendarDateTime(datetime.datetime(2023, 5, 1, 9, 0)),
        duration=datetime.timedelta(minutes=30),
    )
    assert todo.get_end() == CalendarDateTime(datetime.datetime(2023, 5, 1, 9, 30))


def test_venue() -> None:
    """Test a venue is displayed by its name."""
    venue = Venue.model_validate(
        parse_content(
            "\n".join(
                [
                    "BEGIN:VVENUE",
                    "NAME:Town Hall",
                    "SUMMARY:Ignored",
                    "DTSTART:20230501T090000",
                    "DTEND:20230501T100000",
                    "END:VVENUE",
                ]
            )
        )[0]
    )
    assert isinstance(venue, CalendarEntry)
    assert venue.get_summary() == "Town Hall"
    assert venue.get_end() == CalendarDateTime(datetime.datetime(2023, 5, 1, 10, 0))
    assert Venue(summary="Fallback").get_summary() == "Fallback"


def test_entries_are_frozen() -> None:
    """Test calendar entries are read only."""
    event = Event(summary="Example")
    with pytest.raises(ValidationError):
        event.summary = "Changed"  # type: ignore[misc]
