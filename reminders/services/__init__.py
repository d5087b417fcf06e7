"""Reminder scheduling core."""

from .registry import TimerRegistry
from .timer import Timer, TimerKind, TimerState

__all__ = ["Timer", "TimerKind", "TimerRegistry", "TimerState"]
