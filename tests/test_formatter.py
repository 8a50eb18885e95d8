"""Tests for formatting agenda occurrences."""

import datetime

import pytest

from ical_agenda.formatter import format_agenda, format_agenda_entry, format_duration
from ical_agenda.model import AgendaEntry, DisplayMode

NOW = datetime.datetime(2023, 5, 1, 14, 0, 0)


@pytest.mark.parametrize(
    "duration,expected",
    [
        (datetime.timedelta(hours=2), "2h"),
        (datetime.timedelta(minutes=30), "30min"),
        (datetime.timedelta(seconds=45), "45s"),
        (datetime.timedelta(hours=1, minutes=30), "1.5h"),
        (datetime.timedelta(hours=1, minutes=15), "1.25h"),
        (datetime.timedelta(hours=2, minutes=50), "2.83h"),
        (datetime.timedelta(hours=1, seconds=59), "1h"),
        (datetime.timedelta(minutes=5, seconds=59), "5min"),
        (datetime.timedelta(days=2), "48h"),
        (datetime.timedelta(seconds=59, microseconds=999999), "59s"),
        (datetime.timedelta(minutes=-45), "45min"),
        (datetime.timedelta(0), "0s"),
    ],
)
def test_format_duration(duration: datetime.timedelta, expected: str) -> None:
    """Test durations are shown in their largest non-zero unit."""
    assert format_duration(duration) == expected


def test_format_default() -> None:
    """Test the default display of upcoming and past events."""
    future_event = AgendaEntry(
        "Future Event", NOW + datetime.timedelta(minutes=30), datetime.timedelta(hours=1)
    )
    assert (
        format_agenda_entry(DisplayMode.DEFAULT, future_event, NOW)
        == "Future Event 14:30 (in 30min)"
    )

    past_event = AgendaEntry(
        "Past Event", NOW - datetime.timedelta(minutes=30), datetime.timedelta(hours=1)
    )
    assert (
        format_agenda_entry(DisplayMode.DEFAULT, past_event, NOW)
        == "Past Event 13:30 (30min ago)"
    )


def test_format_default_starting_now() -> None:
    """Test an event starting exactly now counts as started."""
    entry = AgendaEntry("Now", NOW, datetime.timedelta(hours=1))
    assert format_agenda_entry(DisplayMode.DEFAULT, entry, NOW) == "Now 14:00 (0s ago)"


def test_format_default_tomorrow() -> None:
    """Test the start time is shown in 24 hour local time."""
    entry = AgendaEntry(
        "Early", datetime.datetime(2023, 5, 2, 7, 5), datetime.timedelta(hours=1)
    )
    assert (
        format_agenda_entry(DisplayMode.DEFAULT, entry, NOW)
        == "Early 07:05 (in 17.08h)"
    )


def test_format_compact() -> None:
    """Test the compact display of upcoming and ongoing events."""
    future_event = AgendaEntry(
        "Future Event", NOW + datetime.timedelta(minutes=45), datetime.timedelta(hours=1)
    )
    assert (
        format_agenda_entry(DisplayMode.COMPACT, future_event, NOW)
        == "Future Event · 45min"
    )

    ongoing_event = AgendaEntry(
        "Ongoing Event", NOW - datetime.timedelta(minutes=45), datetime.timedelta(hours=2)
    )
    assert (
        format_agenda_entry(DisplayMode.COMPACT, ongoing_event, NOW)
        == "Ongoing Event · 45min/1.25h"
    )


def test_format_compact_same_minute() -> None:
    """Test an event starting within a minute is shown as ongoing."""
    entry = AgendaEntry(
        "Soon", NOW + datetime.timedelta(seconds=30), datetime.timedelta(minutes=10)
    )
    assert format_agenda_entry(DisplayMode.COMPACT, entry, NOW) == "Soon · 30s/10min"


def test_format_modes() -> None:
    """Test the same occurrence in both display modes."""
    entry = AgendaEntry(
        "Test Event", NOW + datetime.timedelta(minutes=30), datetime.timedelta(hours=1)
    )
    assert format_agenda_entry(DisplayMode.DEFAULT, entry, NOW) == (
        "Test Event 14:30 (in 30min)"
    )
    assert format_agenda_entry(DisplayMode.COMPACT, entry, NOW) == "Test Event · 30min"
    # Formatting only depends on its arguments
    assert format_agenda_entry(DisplayMode.COMPACT, entry, NOW) == "Test Event · 30min"


def test_format_agenda() -> None:
    """Test occurrences are joined into a single line."""
    entries = [
        AgendaEntry("A", datetime.datetime(2023, 5, 1, 15, 0), datetime.timedelta(hours=1)),
        AgendaEntry("B", datetime.datetime(2023, 5, 1, 16, 0), datetime.timedelta(hours=1)),
    ]
    assert (
        format_agenda(DisplayMode.DEFAULT, entries, NOW)
        == "A 15:00 (in 1h) » B 16:00 (in 2h)"
    )
    assert format_agenda(DisplayMode.COMPACT, entries, NOW, separator=" | ") == (
        "A · 1h | B · 2h"
    )
    assert format_agenda(DisplayMode.DEFAULT, [], NOW) == ""


def test_agenda_entry_invariants() -> None:
    """Test occurrences are local times with a non-negative duration."""
    with pytest.raises(ValueError):
        AgendaEntry("Negative", NOW, datetime.timedelta(minutes=-1))
    with pytest.raises(ValueError):
        AgendaEntry(
            "Aware",
            NOW.replace(tzinfo=datetime.timezone.utc),
            datetime.timedelta(minutes=1),
        )
    entry = AgendaEntry("Example", NOW, datetime.timedelta(hours=1))
    assert entry.end == datetime.datetime(2023, 5, 1, 15, 0)
