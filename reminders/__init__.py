"""Personal reminder scheduler: one-shot, daily and interval reminders."""

from .cli import main as cli_main
from .config_loader import load_config
from .errors import (
    InputIllegalError,
    NoSuchTimerError,
    NotifierError,
    ReminderError,
    UnknownError,
)
from .services import Timer, TimerKind, TimerRegistry, TimerState

__all__ = [
    "cli_main",
    "load_config",
    "InputIllegalError",
    "NoSuchTimerError",
    "NotifierError",
    "ReminderError",
    "UnknownError",
    "Timer",
    "TimerKind",
    "TimerRegistry",
    "TimerState",
    "config",
    "menu",
    "notifiers",
    "services",
    "timeparse",
]
