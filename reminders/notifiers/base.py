"""Notification payload and the action that delivers it."""
from __future__ import annotations

import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional, Protocol, TextIO

from reminders.services.timer import Action, Clock


@dataclass(slots=True)
class Notification:
    """A reminder that has just fired."""

    title: str
    fired_at: datetime
    message: str


class Notifier(Protocol):
    """Delivers notifications somewhere the user will see them."""

    def send(self, notifications: Iterable[Notification]) -> None:
        ...


class ConsoleNotifier:
    """Print notifications to a text stream (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream

    def send(self, notifications: Iterable[Notification]) -> None:
        stream = self._stream or sys.stdout
        for notification in notifications:
            print(notification.message, file=stream, flush=True)


def format_notification(title: str, fired_at: datetime) -> Notification:
    return Notification(
        title=title,
        fired_at=fired_at,
        message=f"[{fired_at:%Y-%m-%d %H:%M:%S}] Reminder: {title}",
    )


def build_action(
    title: str,
    notifiers: Iterable[Notifier],
    clock: Clock = datetime.now,
    formatter: Callable[[str, datetime], Notification] = format_notification,
) -> Action:
    """Return the zero-argument callback a timer invokes when ``title`` fires."""

    targets = tuple(notifiers)

    def action() -> None:
        notification = formatter(title, clock())
        for notifier in targets:
            notifier.send([notification])

    return action
