"""Utilities to load :mod:`reminders.config` structures from YAML files."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .config import InputFormats, RemindersConfig, SchedulerConfig, TelegramConfig
from .timeparse import DEFAULT_DATETIME_FORMAT, DEFAULT_TIME_FORMAT, parse_duration


def load_config(path: Optional[Path] = None) -> RemindersConfig:
    """Load a configuration file into :class:`RemindersConfig`.

    Durations accept human friendly values such as ``"30s"`` or ``"2m"``.
    Omitted fields, or a missing ``path``, fall back to the defaults declared
    in :mod:`reminders.config`.
    """

    if path is None:
        return RemindersConfig()

    raw = _load_yaml(path)

    formats_section = _section(raw, "formats")
    formats = InputFormats(
        datetime_format=str(formats_section.get("datetime", DEFAULT_DATETIME_FORMAT)),
        time_format=str(formats_section.get("time_of_day", DEFAULT_TIME_FORMAT)),
    )

    scheduler_section = _section(raw, "scheduler")
    scheduler = SchedulerConfig(
        max_wait=parse_duration(scheduler_section.get("max_wait", "30s")),
        join_timeout=parse_duration(scheduler_section.get("join_timeout", "2s")),
    )
    if scheduler.max_wait.total_seconds() <= 0:
        raise ValueError("scheduler.max_wait must be positive")

    telegram_cfg = None
    if raw.get("telegram"):
        telegram = _section(raw, "telegram")
        telegram_cfg = TelegramConfig(
            bot_token=str(telegram["bot_token"]),
            chat_ids=tuple(int(cid) for cid in telegram.get("chat_ids", [])),
            api_base_url=str(telegram.get("api_base_url", "https://api.telegram.org")),
            request_timeout=float(telegram.get("request_timeout", 5.0)),
            dry_run=bool(telegram.get("dry_run", False)),
        )

    return RemindersConfig(
        formats=formats,
        scheduler=scheduler,
        console=bool(raw.get("console", True)),
        telegram=telegram_cfg,
        log_level=str(raw.get("log_level", "WARNING")).upper(),
    )


def _load_yaml(path: Path) -> Mapping[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError("configuration root must be a mapping")
    return data


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = raw.get(name) or {}
    if not isinstance(value, Mapping):
        raise ValueError(f"'{name}' section must be a mapping")
    return value
