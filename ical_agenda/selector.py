"""Select the occurrences that are relevant right now.

All entries of a calendar are expanded into occurrences around the current
time, ordered by start and filtered down to the few that are either
happening now or coming up next.
"""

from __future__ import annotations

import datetime
import itertools
import logging
from collections.abc import Iterable

from .entry import CalendarEntry
from .exceptions import ExtractionError
from .extract import extract_occurrences
from .model import AgendaEntry
from .settings import AgendaSettings

__all__ = ["agenda_window", "is_relevant", "select_agenda"]

_LOGGER = logging.getLogger(__name__)


def agenda_window(
    now: datetime.datetime, settings: AgendaSettings
) -> tuple[datetime.datetime, datetime.datetime]:
    """Return the bounds around now in which recurring entries are expanded.

    The bounds are computed in UTC so the window spans the configured number
    of elapsed hours even across a daylight saving change, and are returned
    in the timezone of now.
    """
    instant = now.astimezone(datetime.timezone.utc)
    return (
        (instant - settings.window_behind).astimezone(now.tzinfo),
        (instant + settings.window_ahead).astimezone(now.tzinfo),
    )


def is_relevant(
    entry: AgendaEntry, now: datetime.datetime, relevance: datetime.timedelta
) -> bool:
    """Return True if the occurrence has not ended and did not start too long ago.

    Occurrences that have not started yet are always relevant.
    """
    return entry.end >= now and now - entry.start < relevance


def select_agenda(
    entries: Iterable[CalendarEntry],
    now: datetime.datetime,
    settings: AgendaSettings | None = None,
) -> list[AgendaEntry]:
    """Return the next occurrences to show on the agenda, ordered by start.

    The current time must be timezone aware in the local display timezone.
    Entries that fail to produce occurrences are skipped so that one bad
    entry does not hide the rest of the agenda.
    """
    if now.tzinfo is None:
        raise ValueError("Expected a timezone aware current time")
    settings = settings or AgendaSettings()
    window_start, window_end = agenda_window(now, settings)

    occurrences: list[AgendaEntry] = []
    for entry in entries:
        try:
            occurrences.extend(
                extract_occurrences(
                    entry, window_start, window_end, settings.max_recurrences
                )
            )
        except ExtractionError as err:
            _LOGGER.debug("Skipping calendar entry '%s': %s", entry.get_summary(), err)

    # Stable sort keeps document order for occurrences with the same start
    occurrences.sort(key=lambda item: item.start)
    current = now.replace(tzinfo=None)
    relevant = (
        item for item in occurrences if is_relevant(item, current, settings.relevance)
    )
    return list(itertools.islice(relevant, settings.max_entries))
