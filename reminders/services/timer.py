"""A single reminder and the background thread that fires it."""
from __future__ import annotations

import enum
import logging
import threading
from datetime import datetime, time, timedelta
from typing import Callable, Optional, Union

logger = logging.getLogger(__name__)

Action = Callable[[], None]
Clock = Callable[[], datetime]
Schedule = Union[datetime, time, timedelta]

DEFAULT_MAX_WAIT = timedelta(seconds=30)
DEFAULT_JOIN_TIMEOUT = timedelta(seconds=2)
MAX_INTERVAL = timedelta(days=36500)


class TimerKind(enum.Enum):
    """How a timer's schedule value is interpreted."""

    DISPOSABLE = "once"
    DAILY = "daily"
    INTERVAL = "interval"

    @property
    def repeating(self) -> bool:
        return self is not TimerKind.DISPOSABLE


class TimerState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


_SCHEDULE_TYPES = {
    TimerKind.DISPOSABLE: datetime,
    TimerKind.DAILY: time,
    TimerKind.INTERVAL: timedelta,
}


class Timer:
    """Schedulable unit of work driven by its own daemon thread.

    ``schedule`` depends on ``kind``:

    * ``DISPOSABLE`` - a naive local :class:`~datetime.datetime`, fired once.
    * ``DAILY`` - a naive :class:`~datetime.time`, fired every day at that time.
    * ``INTERVAL`` - a positive :class:`~datetime.timedelta`, fired that long
      after the previous evaluation.

    The timer moves ``IDLE -> RUNNING -> STOPPED`` and never leaves ``STOPPED``.
    Every transition happens under ``_lock``, which the firing thread also holds
    while it invokes the action, so once :meth:`cancel` returns the action will
    not run again.
    """

    def __init__(
        self,
        title: str,
        kind: TimerKind,
        schedule: Schedule,
        action: Action,
        *,
        clock: Clock = datetime.now,
        max_wait: timedelta = DEFAULT_MAX_WAIT,
        join_timeout: timedelta = DEFAULT_JOIN_TIMEOUT,
        on_finished: Optional[Callable[["Timer"], None]] = None,
    ) -> None:
        _validate_schedule(kind, schedule)
        if not callable(action):
            raise TypeError("action must be callable")
        if max_wait.total_seconds() <= 0:
            raise ValueError("max_wait must be positive")

        self._title = title
        self._kind = kind
        self._schedule = schedule
        self._action = action
        self._clock = clock
        self._max_wait = max_wait.total_seconds()
        self._join_timeout = join_timeout.total_seconds()
        self._on_finished = on_finished

        self._lock = threading.RLock()
        self._state = TimerState.IDLE
        self._skip_pending = False
        self._cancel_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None
        self._deadline: Optional[datetime] = None
        self._fired = 0
        self._skipped = 0

    # ------------------------------------------------------------------
    # Read-only views
    @property
    def title(self) -> str:
        return self._title

    @property
    def kind(self) -> TimerKind:
        return self._kind

    @property
    def schedule(self) -> Schedule:
        return self._schedule

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is TimerState.RUNNING

    @property
    def skip_pending(self) -> bool:
        return self._skip_pending

    @property
    def deadline(self) -> Optional[datetime]:
        """Instant the firing thread is currently waiting for, once computed."""
        return self._deadline

    @property
    def fired(self) -> int:
        """Number of times the action has been invoked."""
        return self._fired

    @property
    def skipped(self) -> int:
        """Number of firings suppressed by :meth:`skip_next`."""
        return self._skipped

    # ------------------------------------------------------------------
    # Lifecycle
    def start(self) -> bool:
        """Spawn the firing thread. Returns ``False`` unless the timer was idle."""

        with self._lock:
            if self._state is not TimerState.IDLE:
                return False
            self._state = TimerState.RUNNING
            self._cancel_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._cancel_event,),
                name=f"reminder-{self._title}",
                daemon=True,
            )
            self._thread.start()
        logger.debug(f"Started {self._kind.value} timer {self._title!r}")
        return True

    def cancel(self) -> bool:
        """Stop the timer for good.

        Waits for an in-flight action to return and joins the firing thread,
        unless called from that thread (an action cancelling its own timer).
        Returns ``False`` if the timer had already stopped.
        Two timers whose actions cancel each other at the same moment deadlock,
        since each action holds its own timer's lock.
        """

        with self._lock:
            if self._state is TimerState.STOPPED:
                return False
            self._state = TimerState.STOPPED
            if self._cancel_event is not None:
                self._cancel_event.set()
            thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(self._join_timeout)
        logger.debug(f"Cancelled timer {self._title!r}")
        return True

    def skip_next(self) -> bool:
        """Suppress the next firing of a repeating timer.

        Idempotent while a skip is pending. No-op (returns ``False``) for
        one-shot or stopped timers.
        """

        if not self._kind.repeating:
            return False
        with self._lock:
            if self._state is TimerState.STOPPED:
                return False
            self._skip_pending = True
        return True

    # ------------------------------------------------------------------
    # Scheduling
    def next_time(self, now: Optional[datetime] = None) -> datetime:
        """Return the next instant this timer should fire, seen from ``now``."""

        if self._kind is TimerKind.DISPOSABLE:
            return self._schedule  # type: ignore[return-value]
        if now is None:
            now = self._clock()
        if self._kind is TimerKind.DAILY:
            candidate = datetime.combine(now.date(), self._schedule)  # type: ignore[arg-type]
            if now < candidate:
                return candidate
            return candidate + timedelta(days=1)
        return now + self._schedule  # type: ignore[operator]

    def _run(self, cancel_event: threading.Event) -> None:
        finished = False
        while True:
            try:
                deadline = self.next_time()
            except OverflowError:
                logger.exception(f"Reminder {self._title!r} has no representable next firing")
                with self._lock:
                    self._state = TimerState.STOPPED
                finished = True
                break
            self._deadline = deadline
            if self._wait_until(deadline, cancel_event):
                break
            with self._lock:
                if self._state is not TimerState.RUNNING:
                    break
                if self._kind is TimerKind.DISPOSABLE:
                    self._fire()
                    self._state = TimerState.STOPPED
                    finished = True
                    break
                if self._skip_pending:
                    self._skip_pending = False
                    self._skipped += 1
                    logger.debug(f"Skipped one firing of {self._title!r}")
                    continue
                self._fire()

        if finished and self._on_finished is not None:
            self._on_finished(self)

    def _wait_until(self, deadline: datetime, cancel_event: threading.Event) -> bool:
        """Block until ``deadline`` or cancellation. Returns ``True`` if cancelled.

        The wait is sliced so the remaining time is re-measured against the
        wall clock; a deadline in the past returns immediately.
        """

        while True:
            remaining = (deadline - self._clock()).total_seconds()
            if remaining <= 0:
                return cancel_event.is_set()
            if cancel_event.wait(min(remaining, self._max_wait)):
                return True

    def _fire(self) -> None:
        self._fired += 1
        try:
            self._action()
        except Exception:
            logger.exception(f"Action for reminder {self._title!r} failed")

    def __repr__(self) -> str:
        return (
            f"Timer(title={self._title!r}, kind={self._kind.value}, "
            f"state={self._state.value})"
        )


def _validate_schedule(kind: TimerKind, schedule: Schedule) -> None:
    expected = _SCHEDULE_TYPES[kind]
    if not isinstance(schedule, expected):
        raise TypeError(
            f"{kind.value} timer expects {expected.__name__}, got {type(schedule).__name__}"
        )
    if kind is not TimerKind.INTERVAL and schedule.tzinfo is not None:  # type: ignore[union-attr]
        raise ValueError("schedule must use the naive local clock")
    if kind is TimerKind.INTERVAL and schedule <= timedelta(0):  # type: ignore[operator]
        raise ValueError("interval must be positive")
    if kind is TimerKind.INTERVAL and schedule > MAX_INTERVAL:  # type: ignore[operator]
        raise ValueError(f"interval must not exceed {MAX_INTERVAL.days} days")
