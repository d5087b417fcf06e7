"""Command line entry point for the interactive reminder scheduler."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Sequence

from .config import RemindersConfig
from .config_loader import load_config
from .menu import ReminderMenu
from .notifiers import ConsoleNotifier, Notifier, TelegramNotifier
from .services import TimerRegistry

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Personal reminder scheduler")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser(
        "run",
        help="Start the interactive reminder menu",
    )
    run.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to an optional YAML configuration file",
    )
    run.add_argument(
        "--log-level",
        default=None,
        help="Override the configured log level (e.g. DEBUG, INFO)",
    )

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "run":
        return _command_run(args)

    parser.error("unknown command")
    return 1


def _command_run(args: argparse.Namespace) -> int:
    try:
        config = load_config(args.config)
    except (OSError, ValueError) as exc:
        print(f"Could not load configuration: {exc}", file=sys.stderr)
        return 2

    level = (args.log_level or config.log_level).upper()
    if not isinstance(logging.getLevelName(level), int):
        print(f"Unknown log level: {level}", file=sys.stderr)
        return 2
    logging.basicConfig(level=level, format=LOG_FORMAT)

    notifiers = build_notifiers(config)
    registry = TimerRegistry(
        max_wait=config.scheduler.max_wait,
        join_timeout=config.scheduler.join_timeout,
    )
    menu = ReminderMenu(registry, notifiers, config.formats)
    try:
        menu.run()
    except KeyboardInterrupt:  # pragma: no cover - interactive use
        print("Interrupted", file=sys.stderr)
    finally:
        registry.shutdown()
        for notifier in notifiers:
            if isinstance(notifier, TelegramNotifier):
                notifier.close()
    return 0


def build_notifiers(config: RemindersConfig) -> List[Notifier]:
    notifiers: List[Notifier] = []
    if config.console:
        notifiers.append(ConsoleNotifier())
    if config.telegram is not None:
        notifiers.append(TelegramNotifier(config.telegram))
    return notifiers


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
