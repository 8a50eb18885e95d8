"""Test fixtures."""

from collections.abc import Callable
import datetime
import textwrap
import zoneinfo

import pytest

from ical_agenda.entry import Event
from ical_agenda.parsing.component import parse_content

LOCAL_TZ = zoneinfo.ZoneInfo("America/New_York")


@pytest.fixture(name="local_tz")
def local_tz_fixture() -> datetime.tzinfo:
    """Fixture for the local display timezone used in tests."""
    return LOCAL_TZ


@pytest.fixture(name="event_from_ics")
def event_from_ics_fixture() -> Callable[[str], Event]:
    """Fixture that creates an Event from the body of a VEVENT."""

    def _parse(body: str) -> Event:
        content = "BEGIN:VEVENT\n" + textwrap.dedent(body).strip() + "\nEND:VEVENT\n"
        return Event.model_validate(parse_content(content)[0])

    return _parse
