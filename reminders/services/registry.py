"""Title-keyed registry of live reminder timers."""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from reminders.errors import NoSuchTimerError
from reminders.services.timer import (
    DEFAULT_JOIN_TIMEOUT,
    DEFAULT_MAX_WAIT,
    Action,
    Clock,
    Schedule,
    Timer,
    TimerKind,
)

logger = logging.getLogger(__name__)


class TimerRegistry:
    """Owns every live :class:`Timer` and routes requests to it by title.

    The title -> timer mapping is the only state shared between caller threads
    and timer threads, so every read and write happens under ``_lock``.
    Cancelling a timer can block on an in-flight action and is therefore always
    done after the lock has been released.
    """

    def __init__(
        self,
        *,
        clock: Clock = datetime.now,
        max_wait: timedelta = DEFAULT_MAX_WAIT,
        join_timeout: timedelta = DEFAULT_JOIN_TIMEOUT,
    ) -> None:
        self._clock = clock
        self._max_wait = max_wait
        self._join_timeout = join_timeout
        self._timers: Dict[str, Timer] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    def create(self, title: str, kind: TimerKind, schedule: Schedule, action: Action) -> Timer:
        """Register and start a new timer under ``title``.

        A timer already registered under the same title is replaced and
        cancelled, so a title is never owned by two live timers.
        """

        timer = Timer(
            title,
            kind,
            schedule,
            action,
            clock=self._clock,
            max_wait=self._max_wait,
            join_timeout=self._join_timeout,
            on_finished=self._discard,
        )
        with self._lock:
            previous = self._timers.get(title)
            self._timers[title] = timer
        timer.start()

        if previous is not None:
            logger.info(f"Replacing existing timer {title!r}")
            previous.cancel()
        return timer

    def get(self, title: str) -> Timer:
        with self._lock:
            return self._get_locked(title)

    def list_titles(self, kind: Optional[TimerKind] = None) -> List[str]:
        """Snapshot of registered titles in insertion order, optionally by kind."""

        with self._lock:
            return [
                title
                for title, timer in self._timers.items()
                if kind is None or timer.kind is kind
            ]

    def list_by_kind(self, kind: TimerKind) -> List[str]:
        return self.list_titles(kind)

    def list_repeating(self) -> List[str]:
        """Titles whose next firing can be skipped."""

        with self._lock:
            return [title for title, timer in self._timers.items() if timer.kind.repeating]

    def cancel_once(self, title: str) -> None:
        """Skip the next firing of ``title``. A no-op for one-shot timers."""

        with self._lock:
            timer = self._get_locked(title)
        timer.skip_next()

    def delete(self, title: str) -> None:
        """Remove ``title`` and stop its timer before returning."""

        with self._lock:
            timer = self._get_locked(title)
            del self._timers[title]
        timer.cancel()

    def shutdown(self) -> None:
        """Cancel every timer and leave the registry empty."""

        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()
        if timers:
            logger.info(f"Stopped {len(timers)} timer(s)")

    # ------------------------------------------------------------------
    # Internal helpers
    def _get_locked(self, title: str) -> Timer:
        try:
            return self._timers[title]
        except KeyError:
            raise NoSuchTimerError(title) from None

    def _discard(self, timer: Timer) -> None:
        """Drop a timer whose thread ended on its own, unless it was already replaced."""

        with self._lock:
            if self._timers.get(timer.title) is timer:
                del self._timers[timer.title]

    def __len__(self) -> int:
        with self._lock:
            return len(self._timers)

    def __contains__(self, title: object) -> bool:
        with self._lock:
            return title in self._timers

    def __enter__(self) -> "TimerRegistry":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        self.shutdown()
