"""Exception hierarchy shared by the scheduler core and the menu layer."""
from __future__ import annotations


class ReminderError(RuntimeError):
    """Base class for every error raised by :mod:`reminders`."""


class NoSuchTimerError(ReminderError, KeyError):
    """Raised when an operation references a title absent from the registry."""

    def __init__(self, title: str) -> None:
        super().__init__(title)
        self.title = title

    def __str__(self) -> str:
        return f"no such timer: {self.title!r}"


class InputIllegalError(ReminderError, ValueError):
    """Malformed user input. Only the menu layer raises this."""


class UnknownError(ReminderError):
    """An internal invariant was violated, e.g. selecting from an empty list."""


class NotifierError(ReminderError):
    """A notification could not be delivered."""
