"""Command-line entry point.

Tails Omega Strikers' log file to detect when a match is started and sends a
desktop notification.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path

from . import __version__
from .config import NotifierConfig, load_config_file
from .errors import ConfigError, LocatorError, SignalSourceError
from .locator import find_log_file
from .logging_manager import LoggingManager
from .match_monitor import MatchMonitor
from .monitoring.models import WatchTarget
from .monitoring.status_matcher import StatusMatcher
from .notifier import NotificationDispatcher

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_RUNTIME_ERROR = 1
EXIT_USAGE_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="strikers-notifier",
        description=(
            "Tails Omega Strikers' log file to detect when a match is started "
            "and sends a notification."
        ),
    )
    parser.add_argument(
        "-l",
        "--log-path",
        help="Omega Strikers log file. If unset, the program will attempt to find it automatically.",
    )
    parser.add_argument(
        "-u",
        "--update-frequency",
        type=int,
        help="Polling frequency to check for updates to the file in seconds (default: 5).",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        default=None,
        help="Enables verbose output.",
    )
    parser.add_argument("-c", "--config", help="YAML configuration file.")
    parser.add_argument(
        "--force-polling",
        action="store_true",
        default=None,
        help="Poll the file instead of using native filesystem events.",
    )
    parser.add_argument(
        "--structured-fallback",
        action="store_true",
        default=None,
        help="Also detect matches by decoding the matchmaking status JSON.",
    )
    parser.add_argument("--log-dir", help="Directory for JSON logs and the notification audit trail.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def resolve_config(args: argparse.Namespace) -> NotifierConfig:
    """Merge defaults, the optional config file and command-line flags."""
    config = load_config_file(args.config) if args.config else NotifierConfig()
    return config.merged(
        log_path=args.log_path,
        update_frequency=args.update_frequency,
        debug=args.debug,
        force_polling=args.force_polling,
        structured_fallback=args.structured_fallback,
        log_dir=args.log_dir,
    )


def build_monitor(config: NotifierConfig) -> MatchMonitor:
    """Create the match monitor for ``config``.

    Raises:
        LocatorError: If no log path is configured and none can be found.
    """
    log_path = Path(config.log_path).expanduser() if config.log_path else find_log_file()
    logger.debug(f"Attempting with log file path: {log_path}")

    target = WatchTarget(path=log_path, poll_interval=float(config.update_frequency))
    return MatchMonitor(
        target,
        dispatcher=NotificationDispatcher(notification=config.notification()),
        matcher=StatusMatcher(structured_fallback=config.structured_fallback),
        force_polling=config.force_polling,
    )


async def run_monitor(monitor: MatchMonitor) -> None:
    """Run ``monitor`` until it stops or SIGINT/SIGTERM arrives."""
    task = asyncio.create_task(monitor.run())
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, task.cancel)
        except (NotImplementedError, RuntimeError):
            # Windows event loops; Ctrl-C still cancels via KeyboardInterrupt
            pass
    await task


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = resolve_config(args)
    except (ConfigError, FileNotFoundError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    try:
        logging_manager = LoggingManager(debug=config.debug, log_dir=config.log_dir)
    except OSError as e:
        print(f"Configuration error: cannot use log directory {config.log_dir}: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    try:
        try:
            monitor = build_monitor(config)
        except LocatorError as e:
            logger.error(f"Could not locate the Omega Strikers log file: {e}")
            print("Pass the log file location explicitly with --log-path.", file=sys.stderr)
            return EXIT_USAGE_ERROR

        try:
            asyncio.run(run_monitor(monitor))
        except KeyboardInterrupt:
            logger.info("Interrupted, exiting")
        except SignalSourceError as e:
            logger.critical(f"Cannot watch for log changes: {e}")
            return EXIT_RUNTIME_ERROR
        except OSError as e:
            logger.critical(f"Cannot open log file {monitor.target.path}: {e}")
            return EXIT_RUNTIME_ERROR
        return EXIT_OK
    finally:
        logging_manager.shutdown()


if __name__ == "__main__":
    sys.exit(main())
