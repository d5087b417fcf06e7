import io
import time
import unittest
from datetime import datetime, time as dtime, timedelta

from reminders.errors import UnknownError
from reminders.menu import ReminderMenu
from reminders.services import TimerKind, TimerRegistry

NOW = datetime(2099, 1, 1, 9, 0, 0)
QUIT = "7"


class ScriptedInput:
    def __init__(self, *lines):
        self._lines = list(lines)

    def __call__(self):
        if not self._lines:
            raise EOFError
        return self._lines.pop(0)


def noop():
    pass


def wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class ReminderMenuTests(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = TimerRegistry(clock=lambda: NOW)
        self.addCleanup(self.registry.shutdown)
        self.output = io.StringIO()

    def _run(self, *lines):
        menu = ReminderMenu(
            self.registry,
            [],
            input_func=ScriptedInput(*lines),
            output=self.output,
            clock=lambda: NOW,
        )
        menu.run()
        return self.output.getvalue()

    def test_add_one_shot_reports_time_left(self):
        out = self._run("1", "2099-01-01 10:00:00", "dentist", QUIT)
        self.assertEqual(self.registry.list_titles(TimerKind.DISPOSABLE), ["[once] dentist"])
        self.assertIn("fires in 60.0 minutes", out)

    def test_add_one_shot_reprompts_on_bad_timestamp(self):
        out = self._run("1", "next tuesday", "2099-01-01 10:00:00", "dentist", QUIT)
        self.assertIn("Input error", out)
        self.assertIn("[once] dentist", self.registry)

    def test_add_daily(self):
        self._run("2", "09:30:00", "standup", QUIT)
        timer = self.registry.get("[daily] standup")
        self.assertEqual(timer.kind, TimerKind.DAILY)
        self.assertEqual(timer.schedule, dtime(9, 30, 0))

    def test_add_interval_rejects_zero(self):
        out = self._run("3", "00:00:00", "90m", "", "stretch", QUIT)
        timer = self.registry.get("[interval] stretch")
        self.assertEqual(timer.schedule, timedelta(minutes=90))
        self.assertEqual(out.count("Input error"), 2)

    def test_add_interval_reprompts_on_out_of_range_input(self):
        out = self._run(
            "3", "infs", "99999999999d", "999999999999:00:00", "3000000d", "90m", "stretch", QUIT
        )
        self.assertEqual(out.count("Input error"), 4)
        self.assertIn("[interval] stretch", self.registry)

    def test_invalid_menu_choice_reprompts(self):
        out = self._run("9", "abc", QUIT)
        self.assertEqual(out.count("Input error"), 2)

    def test_delete(self):
        self.registry.create("[daily] standup", TimerKind.DAILY, dtime(9, 0), noop)
        out = self._run("4", "1", QUIT)
        self.assertIn("Deleted", out)
        self.assertEqual(len(self.registry), 0)

    def test_delete_without_reminders(self):
        out = self._run("4", QUIT)
        self.assertIn("There are no reminders", out)

    def test_skip_lists_only_repeating(self):
        self.registry.create("[once] dentist", TimerKind.DISPOSABLE, NOW + timedelta(hours=1), noop)
        daily = self.registry.create("[daily] standup", TimerKind.DAILY, dtime(9, 0), noop)
        out = self._run("5", "1", QUIT)
        self.assertIn("1. [daily] standup", out)
        self.assertNotIn("1. [once] dentist", out)
        self.assertTrue(daily.skip_pending)

    def test_show(self):
        self.registry.create("[daily] standup", TimerKind.DAILY, dtime(10, 0), noop)
        self.registry.cancel_once("[daily] standup")
        out = self._run("6", QUIT)
        self.assertIn("[daily] standup  next: 2099-01-01 10:00:00  fired: 0", out)
        self.assertIn("(next occurrence skipped)", out)

    def test_show_reports_the_deadline_being_waited_on(self):
        timer = self.registry.create(
            "[interval] stretch", TimerKind.INTERVAL, timedelta(hours=1), noop
        )
        self.assertTrue(wait_for(lambda: timer.deadline is not None))
        menu = ReminderMenu(
            self.registry,
            [],
            input_func=ScriptedInput("6", QUIT),
            output=self.output,
            clock=lambda: NOW + timedelta(minutes=30),
        )
        menu.run()
        self.assertIn("[interval] stretch  next: 2099-01-01 10:00:00", self.output.getvalue())

    def test_end_of_input_stops_menu(self):
        self._run("2", "09:30:00")
        self.assertEqual(len(self.registry), 0)

    def test_select_from_empty_list_is_an_internal_error(self):
        menu = ReminderMenu(self.registry, [], input_func=ScriptedInput(), output=self.output)
        with self.assertRaises(UnknownError):
            menu.select_option("Pick one", [])


if __name__ == "__main__":
    unittest.main()
