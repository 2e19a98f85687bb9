"""Errors raised by the time tracking core.

All of them derive from ValueError so callers that already handle
ValueError (the CLI does) report them without special casing.
"""


class TrackerError(ValueError):
    """Base class for recoverable tracker errors."""


class ValidationError(TrackerError):
    """Input rejected before any state was changed."""


class NotFoundError(TrackerError):
    """Referenced entry or user does not exist."""


class AlreadyClosedError(TrackerError):
    """Entry already has an end time."""
