"""Parsing of user-entered timestamps and durations.

These helpers belong to the menu layer: the scheduler core only ever sees
already-parsed :mod:`datetime` values.
"""
from __future__ import annotations

import datetime as _dt
import re
from typing import Any

from .errors import InputIllegalError
from .services.timer import MAX_INTERVAL

DEFAULT_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_TIME_FORMAT = "%H:%M:%S"

_DURATION_UNITS = {
    "s": _dt.timedelta(seconds=1),
    "m": _dt.timedelta(minutes=1),
    "h": _dt.timedelta(hours=1),
    "d": _dt.timedelta(days=1),
}

_CLOCK_DURATION = re.compile(r"^(?P<hours>\d+):(?P<minutes>[0-5]?\d):(?P<seconds>[0-5]?\d)$")


def parse_duration(value: Any) -> _dt.timedelta:
    """Convert ``"30s"``, ``"5m"``, ``"1.5h"``, ``"2d"`` or a number of seconds.

    Raises :class:`ValueError` on anything else.
    """

    if isinstance(value, _dt.timedelta):
        return value
    if isinstance(value, bool):
        raise ValueError(f"unsupported duration value: {value!r}")
    if isinstance(value, (int, float)):
        return _seconds(float(value))
    if not isinstance(value, str):
        raise ValueError(f"unsupported duration value: {value!r}")
    value = value.strip()
    if not value:
        raise ValueError("empty duration")
    if value.isdigit():
        return _seconds(int(value))
    unit = value[-1].lower()
    if unit not in _DURATION_UNITS:
        raise ValueError(f"unknown duration unit: {value}")
    amount = float(value[:-1])
    base = _DURATION_UNITS[unit]
    return _seconds(base.total_seconds() * amount)


def parse_datetime(text: str, fmt: str = DEFAULT_DATETIME_FORMAT) -> _dt.datetime:
    """Parse an absolute local instant for a one-shot reminder."""

    try:
        return _dt.datetime.strptime(text.strip(), fmt)
    except ValueError as exc:
        raise InputIllegalError(f"expected a date and time like {format_example(fmt)}") from exc


def parse_time_of_day(text: str, fmt: str = DEFAULT_TIME_FORMAT) -> _dt.time:
    """Parse the wall-clock time a daily reminder fires at."""

    try:
        return _dt.datetime.strptime(text.strip(), fmt).time()
    except ValueError as exc:
        raise InputIllegalError(f"expected a time of day like {format_example(fmt)}") from exc


def parse_interval(text: str) -> _dt.timedelta:
    """Parse ``HH:MM:SS`` or a compact duration (``90s``, ``5m``, ``1h``)."""

    text = text.strip()
    match = _CLOCK_DURATION.match(text)
    try:
        if match:
            interval = _dt.timedelta(
                hours=int(match["hours"]),
                minutes=int(match["minutes"]),
                seconds=int(match["seconds"]),
            )
        else:
            interval = parse_duration(text)
    except (ValueError, OverflowError) as exc:
        raise InputIllegalError("expected an interval like 01:30:00 or 90m") from exc
    if interval <= _dt.timedelta(0):
        raise InputIllegalError("interval must be longer than zero")
    if interval > MAX_INTERVAL:
        raise InputIllegalError(f"interval must not exceed {MAX_INTERVAL.days} days")
    return interval


def format_example(fmt: str) -> str:
    return _dt.datetime(2006, 1, 2, 15, 4, 5).strftime(fmt)


def _seconds(amount: float) -> _dt.timedelta:
    try:
        return _dt.timedelta(seconds=amount)
    except OverflowError as exc:
        raise ValueError(f"duration out of range: {amount}") from exc
