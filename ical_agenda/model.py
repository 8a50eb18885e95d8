"""Value objects produced by occurrence extraction."""

from __future__ import annotations

import datetime
import enum
from dataclasses import dataclass

__all__ = ["AgendaEntry", "DisplayMode"]


@dataclass(frozen=True)
class AgendaEntry:
    """A single concrete occurrence of a calendar entry.

    The start is a naive local wall clock time, already normalized from
    whatever timezone the calendar file used.
    """

    name: str
    start: datetime.datetime
    duration: datetime.timedelta

    def __post_init__(self) -> None:
        if self.start.tzinfo is not None:
            raise ValueError(f"Expected a local wall clock start time: {self.start}")
        if self.duration < datetime.timedelta(0):
            raise ValueError(f"Duration must not be negative: {self.duration}")

    @property
    def end(self) -> datetime.datetime:
        """Return the local wall clock time the occurrence ends."""
        return self.start + self.duration


class DisplayMode(enum.Enum):
    """How agenda entries are rendered."""

    DEFAULT = "default"
    """Start time with a relative 'ago' or 'in' hint."""

    COMPACT = "compact"
    """Time until start, or elapsed and remaining time."""
