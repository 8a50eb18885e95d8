"""Exceptions for the ical_agenda library.

There are two families of errors. A `CalendarParseError` means the calendar
document itself could not be read and is fatal for the whole run. An
`ExtractionError` is scoped to a single calendar entry: the entry is dropped
from the agenda and the remaining entries are still shown.
"""


class AgendaError(Exception):
    """Base exception for all ical_agenda errors."""


class CalendarParseError(AgendaError):
    """Exception raised when parsing an ical string.

    The 'message' attribute contains a human-readable message about the
    error that occurred. The 'detailed_error' attribute can provide additional
    information about the error, such as the offending content line.
    """

    def __init__(self, message: str, *, detailed_error: str | None = None) -> None:
        """Initialize the CalendarParseError with a message."""
        super().__init__(message)
        self.message = message
        self.detailed_error = detailed_error


class ExtractionError(AgendaError):
    """Exception raised when a calendar entry can't produce occurrences."""


class MissingStartTimeError(ExtractionError):
    """The calendar entry does not have a start time."""


class MissingEndTimeError(ExtractionError):
    """The calendar entry has a start time but no end time or duration."""


class InvalidDurationError(ExtractionError):
    """The calendar entry ends before it starts."""


class InvalidTimezoneError(ExtractionError):
    """Exception raised when a TZID can't be resolved to a single local time.

    This covers identifiers missing from the timezone database as well as
    wall clock times that are ambiguous or skipped by a daylight saving
    transition in that zone.
    """

    def __init__(self, tzid: str, reason: str | None = None) -> None:
        """Initialize InvalidTimezoneError."""
        message = f"Invalid timezone '{tzid}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.tzid = tzid


class RecurrenceParseError(ExtractionError):
    """Exception raised when evaluating a recurrence specification.

    Recurrence rules have complex logic and `dateutil.rrule` rejects a number
    of real world inputs, so the 'detail' attribute carries the underlying
    error message to help find the source of the issue.
    """

    def __init__(self, detail: str) -> None:
        """Initialize RecurrenceParseError."""
        super().__init__(f"Failed to evaluate recurrence: {detail}")
        self.detail = detail
