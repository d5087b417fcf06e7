"""Interactive text menu on top of :class:`~reminders.services.TimerRegistry`."""
from __future__ import annotations

import sys
from datetime import datetime
from typing import Callable, Optional, Sequence, TextIO, TypeVar

from .config import InputFormats
from .errors import InputIllegalError, NoSuchTimerError, UnknownError
from .notifiers import Notifier, build_action
from .services import TimerKind, TimerRegistry
from .services.timer import Clock
from .timeparse import format_example, parse_datetime, parse_interval, parse_time_of_day

T = TypeVar("T")

KIND_TAGS = {
    TimerKind.DISPOSABLE: "[once]",
    TimerKind.DAILY: "[daily]",
    TimerKind.INTERVAL: "[interval]",
}

MAIN_OPTIONS = (
    "One-shot reminder",
    "Daily reminder",
    "Interval reminder",
    "Delete a reminder",
    "Skip the next occurrence of a repeating reminder",
    "List reminders",
    "Quit",
)


class ReminderMenu:
    """Numbered-option menu that turns typed input into registry calls.

    The menu keeps no reminder state of its own: every choice is resolved to
    a title and handed to the registry.
    """

    def __init__(
        self,
        registry: TimerRegistry,
        notifiers: Sequence[Notifier],
        formats: Optional[InputFormats] = None,
        *,
        input_func: Callable[[], str] = input,
        output: Optional[TextIO] = None,
        clock: Clock = datetime.now,
    ) -> None:
        self._registry = registry
        self._notifiers = tuple(notifiers)
        self._formats = formats or InputFormats()
        self._input = input_func
        self._output = output
        self._clock = clock

    def run(self) -> None:
        """Show the main menu until the user quits or input ends."""

        handlers = (
            self.add_one_shot,
            self.add_daily,
            self.add_interval,
            self.delete,
            self.skip_next,
            self.show,
        )
        try:
            while True:
                choice = self.select_option("Reminder menu", MAIN_OPTIONS)
                if choice == len(MAIN_OPTIONS):
                    return
                handlers[choice - 1]()
        except EOFError:
            return

    # ------------------------------------------------------------------
    # Menu actions
    def add_one_shot(self) -> None:
        fmt = self._formats.datetime_format
        when = self._prompt_parsed(
            f"Reminder time (format: {format_example(fmt)})",
            lambda text: parse_datetime(text, fmt),
        )
        title = self._create(TimerKind.DISPOSABLE, when)
        minutes = (when - self._clock()).total_seconds() / 60
        if minutes > 0:
            self._say(f"Reminder {title} fires in {minutes:.1f} minutes")
        else:
            self._say(f"Reminder {title} is already due and fires now")

    def add_daily(self) -> None:
        fmt = self._formats.time_format
        at = self._prompt_parsed(
            f"Daily reminder time (format: {format_example(fmt)})",
            lambda text: parse_time_of_day(text, fmt),
        )
        self._create(TimerKind.DAILY, at)

    def add_interval(self) -> None:
        every = self._prompt_parsed(
            "Repeat every (format: 01:30:00 or 90m)",
            parse_interval,
        )
        self._create(TimerKind.INTERVAL, every)

    def delete(self) -> None:
        titles = self._registry.list_titles()
        if not titles:
            self._say("There are no reminders")
            return
        choice = self.select_option("Select the reminder to delete", titles)
        try:
            self._registry.delete(titles[choice - 1])
        except NoSuchTimerError as exc:
            self._say(str(exc))
            return
        self._say("Deleted")

    def skip_next(self) -> None:
        titles = self._registry.list_repeating()
        if not titles:
            self._say("There are no repeating reminders")
            return
        choice = self.select_option("Select the reminder whose next occurrence to skip", titles)
        try:
            self._registry.cancel_once(titles[choice - 1])
        except NoSuchTimerError as exc:
            self._say(str(exc))
            return
        self._say("The next occurrence will be skipped")

    def show(self) -> None:
        titles = self._registry.list_titles()
        if not titles:
            self._say("There are no reminders")
            return
        now = self._clock()
        for title in titles:
            try:
                timer = self._registry.get(title)
            except NoSuchTimerError:
                continue
            upcoming = timer.deadline or timer.next_time(now)
            line = f"{title}  next: {upcoming:%Y-%m-%d %H:%M:%S}  fired: {timer.fired}"
            if timer.skip_pending:
                line += "  (next occurrence skipped)"
            self._say(line)

    # ------------------------------------------------------------------
    # Prompting
    def select_option(self, heading: str, options: Sequence[str]) -> int:
        """Print ``options`` numbered from 1 and return the chosen number.

        Re-prompts until a valid number is entered.
        """

        if not options:
            raise UnknownError("nothing to select from")
        self._say(heading)
        for index, option in enumerate(options, start=1):
            self._say(f"{index}. {option}")
        return self._prompt_parsed(
            "Enter a number",
            lambda text: _parse_choice(text, len(options)),
        )

    def _create(self, kind: TimerKind, schedule) -> str:
        content = self._prompt_parsed("Reminder text", _parse_content)
        title = f"{KIND_TAGS[kind]} {content}"
        action = build_action(title, self._notifiers, clock=self._clock)
        self._registry.create(title, kind, schedule, action)
        self._say("Added")
        return title

    def _prompt_parsed(self, prompt: str, parse: Callable[[str], T]) -> T:
        self._say(prompt)
        while True:
            try:
                return parse(self._input())
            except InputIllegalError as exc:
                self._say(f"Input error: {exc}")

    def _say(self, text: str) -> None:
        print(text, file=self._output or sys.stdout)


def _parse_choice(text: str, count: int) -> int:
    try:
        choice = int(text.strip())
    except ValueError:
        raise InputIllegalError(f"please enter a number between 1 and {count}") from None
    if not 1 <= choice <= count:
        raise InputIllegalError(f"please enter a number between 1 and {count}")
    return choice


def _parse_content(text: str) -> str:
    content = text.strip()
    if not content:
        raise InputIllegalError("reminder text must not be empty")
    return content
