"""Tests for converting calendar values to local wall clock times."""

import datetime
import zoneinfo

import pytest

from ical_agenda.exceptions import InvalidTimezoneError
from ical_agenda.normalize import (
    end_of_day,
    normalize_date,
    normalize_datetime,
    resolve_timezone,
)
from ical_agenda.types import CalendarDateTime

LOCAL_TZ = zoneinfo.ZoneInfo("America/New_York")
VALUE = datetime.datetime(2023, 5, 1, 14, 0, 0)


def test_floating() -> None:
    """Test a floating time is already a local time."""
    assert normalize_datetime(CalendarDateTime.floating_time(VALUE), LOCAL_TZ) == VALUE


def test_utc() -> None:
    """Test a UTC time is converted to the local timezone."""
    assert normalize_datetime(
        CalendarDateTime.utc_time(VALUE), LOCAL_TZ
    ) == datetime.datetime(2023, 5, 1, 10, 0, 0)


def test_with_timezone() -> None:
    """Test a time in another timezone is converted to the local timezone."""
    value = CalendarDateTime.with_timezone(VALUE, "Europe/Berlin")
    assert normalize_datetime(value, LOCAL_TZ) == datetime.datetime(2023, 5, 1, 8, 0, 0)


def test_with_local_timezone() -> None:
    """Test a time qualified with the local timezone is unchanged."""
    value = CalendarDateTime.with_timezone(VALUE, "America/New_York")
    assert normalize_datetime(value, LOCAL_TZ) == VALUE


def test_result_is_naive() -> None:
    """Test all results are wall clock times without tzinfo."""
    value = CalendarDateTime.with_timezone(VALUE, "Asia/Tokyo")
    assert normalize_datetime(value, LOCAL_TZ).tzinfo is None


@pytest.mark.parametrize("tzid", ["Invalid/Timezone", "Mars/Olympus_Mons", "../etc"])
def test_unknown_timezone(tzid: str) -> None:
    """Test a timezone missing from the timezone database."""
    with pytest.raises(InvalidTimezoneError) as exc_info:
        normalize_datetime(CalendarDateTime.with_timezone(VALUE, tzid), LOCAL_TZ)
    assert exc_info.value.tzid == tzid


@pytest.mark.parametrize(
    "value",
    [
        # Clocks fall back and 01:30 happens twice
        datetime.datetime(2023, 11, 5, 1, 30, 0),
        # Clocks spring forward and 02:30 never happens
        datetime.datetime(2023, 3, 12, 2, 30, 0),
    ],
)
def test_ambiguous_local_time(value: datetime.datetime) -> None:
    """Test wall clock times at daylight saving transitions are rejected."""
    with pytest.raises(InvalidTimezoneError, match="ambiguous or nonexistent"):
        normalize_datetime(
            CalendarDateTime.with_timezone(value, "America/New_York"), LOCAL_TZ
        )


def test_resolve_timezone() -> None:
    """Test looking up a timezone by identifier."""
    assert resolve_timezone("Europe/Berlin") == zoneinfo.ZoneInfo("Europe/Berlin")


def test_normalize_date() -> None:
    """Test a date is local midnight."""
    assert normalize_date(datetime.date(2023, 5, 1)) == datetime.datetime(2023, 5, 1)


def test_end_of_day() -> None:
    """Test the end of the day containing a time."""
    assert end_of_day(datetime.datetime(2023, 5, 1, 9, 30)) == datetime.datetime(
        2023, 5, 1, 23, 59, 59, 999999
    )
