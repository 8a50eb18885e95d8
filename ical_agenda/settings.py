"""Tunable bounds for building an agenda."""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["AgendaSettings"]


class AgendaSettings(BaseModel):
    """Settings that control which occurrences end up on the agenda."""

    model_config = ConfigDict(frozen=True)

    hours_behind: int = Field(default=32, gt=0)
    """Elapsed hours before now in which recurring entries are expanded."""

    hours_ahead: int = Field(default=32, gt=0)
    """Elapsed hours after now in which recurring entries are expanded."""

    relevance_hours: int = Field(default=24, gt=0)
    """Occurrences that started at least this long ago are not shown."""

    max_recurrences: int = Field(default=100, gt=0)
    """Maximum number of instances expanded from a single recurring entry."""

    max_entries: int = Field(default=2, gt=0)
    """Maximum number of occurrences on the agenda."""

    separator: str = " » "
    """Text placed between formatted occurrences."""

    @property
    def window_behind(self) -> datetime.timedelta:
        return datetime.timedelta(hours=self.hours_behind)

    @property
    def window_ahead(self) -> datetime.timedelta:
        return datetime.timedelta(hours=self.hours_ahead)

    @property
    def relevance(self) -> datetime.timedelta:
        return datetime.timedelta(hours=self.relevance_hours)
