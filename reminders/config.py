"""Configuration schema for the reminder scheduler.

Every field has a default, so the application runs without a configuration
file. :mod:`reminders.config_loader` fills these dataclasses from YAML.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional, Sequence

from .timeparse import DEFAULT_DATETIME_FORMAT, DEFAULT_TIME_FORMAT


@dataclass(slots=True)
class InputFormats:
    """``strptime`` formats accepted when reminders are entered."""

    datetime_format: str = DEFAULT_DATETIME_FORMAT
    time_format: str = DEFAULT_TIME_FORMAT


@dataclass(slots=True)
class SchedulerConfig:
    """Timing knobs for the timer threads."""

    max_wait: timedelta = timedelta(seconds=30)
    join_timeout: timedelta = timedelta(seconds=2)


@dataclass(slots=True)
class TelegramConfig:
    """Outgoing Telegram bot integration."""

    bot_token: str
    chat_ids: Sequence[int]
    api_base_url: str = "https://api.telegram.org"
    request_timeout: float = 5.0
    dry_run: bool = False


@dataclass(slots=True)
class RemindersConfig:
    """Top-level configuration bundle."""

    formats: InputFormats = field(default_factory=InputFormats)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    console: bool = True
    telegram: Optional[TelegramConfig] = None
    log_level: str = "WARNING"
