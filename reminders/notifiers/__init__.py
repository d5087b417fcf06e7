"""Notification backends."""

from .base import ConsoleNotifier, Notification, Notifier, build_action, format_notification
from .telegram import TelegramNotifier

__all__ = [
    "ConsoleNotifier",
    "Notification",
    "Notifier",
    "TelegramNotifier",
    "build_action",
    "format_notification",
]
