import io
import tempfile
import unittest
from contextlib import redirect_stderr
from pathlib import Path
from unittest import mock

from reminders.cli import build_notifiers, build_parser, main
from reminders.config import RemindersConfig, TelegramConfig
from reminders.notifiers import ConsoleNotifier, TelegramNotifier


class CliTests(unittest.TestCase):
    def test_command_is_required(self):
        with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit):
            build_parser().parse_args([])

    def test_run_starts_menu_and_shuts_down_registry(self):
        with mock.patch("reminders.cli.ReminderMenu") as menu_cls, mock.patch(
            "reminders.cli.TimerRegistry"
        ) as registry_cls, mock.patch("reminders.cli.logging.basicConfig"):
            self.assertEqual(main(["run"]), 0)
        menu_cls.return_value.run.assert_called_once_with()
        registry_cls.return_value.shutdown.assert_called_once_with()

    def test_run_reports_bad_config(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bad.yaml"
            path.write_text("- not a mapping\n", encoding="utf-8")
            stderr = io.StringIO()
            with redirect_stderr(stderr):
                self.assertEqual(main(["run", "--config", str(path)]), 2)
        self.assertIn("Could not load configuration", stderr.getvalue())

    def test_run_rejects_unknown_log_level(self):
        stderr = io.StringIO()
        with mock.patch("reminders.cli.ReminderMenu") as menu_cls, redirect_stderr(stderr):
            self.assertEqual(main(["run", "--log-level", "loud"]), 2)
        menu_cls.assert_not_called()
        self.assertIn("Unknown log level: LOUD", stderr.getvalue())

    def test_build_notifiers(self):
        self.assertEqual(build_notifiers(RemindersConfig(console=False)), [])
        config = RemindersConfig(telegram=TelegramConfig(bot_token="t", chat_ids=(1,)))
        notifiers = build_notifiers(config)
        self.addCleanup(notifiers[1].close)
        self.assertIsInstance(notifiers[0], ConsoleNotifier)
        self.assertIsInstance(notifiers[1], TelegramNotifier)


if __name__ == "__main__":
    unittest.main()
