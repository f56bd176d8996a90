"""logwatcher — print lines appended to a log file, following rotations."""

import logging
import sys
from argparse import ArgumentParser

from logwatcher.config import load_config, load_yaml_config
from logwatcher.errors import ConfigError, LogWatcherError
from logwatcher.events import Line, LogRotation, LogWatcherAction, StopReason
from logwatcher.watcher import LogWatcher

logger = logging.getLogger("logwatcher.cli")


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser. Unset options stay None so env vars can apply."""
    parser = ArgumentParser(
        prog="logwatcher",
        description="Tail a log file and survive log rotation.",
    )
    parser.add_argument(
        "log_file",
        nargs="?",
        help="Path of the log file to watch (or LOG_FILE env var)",
    )
    parser.add_argument(
        "--poll-interval",
        type=float,
        help="Seconds between polls (default: 1.0)",
    )
    parser.add_argument(
        "--encoding",
        help="Text encoding of the log file (default: utf-8)",
    )
    parser.add_argument(
        "--missing-file-limit",
        type=int,
        help="Give up after the file has been missing for N polls (default: wait forever)",
    )
    parser.add_argument(
        "--max-lines",
        type=int,
        help="Stop after printing N lines",
    )
    parser.add_argument(
        "--read-limit",
        type=int,
        help="Max bytes read per poll (default: 1048576)",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level for diagnostics on stderr (default: INFO)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a YAML config file",
    )
    return parser


class LinePrinter:
    """Callback that prints each line and stops after ``max_lines``."""

    def __init__(self, out=None, max_lines=None):
        self._out = out or sys.stdout
        self._max_lines = max_lines
        self.lines = 0
        self.rotations = 0

    def __call__(self, result):
        if isinstance(result, LogWatcherError):
            logger.warning("Error: %s", result)
            return LogWatcherAction.CONTINUE
        if isinstance(result, LogRotation):
            self.rotations += 1
            logger.info("Log file rotated")
            return LogWatcherAction.CONTINUE
        if isinstance(result, Line):
            print(result.text, file=self._out, flush=True)
            self.lines += 1
            if self._max_lines is not None and self.lines >= self._max_lines:
                return LogWatcherAction.FINISH
        return LogWatcherAction.CONTINUE


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args, load_yaml_config(args.config))
    except ConfigError as e:
        print(f"logwatcher: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        stream=sys.stderr,
    )

    try:
        watcher = LogWatcher.register(config.log_file, config)
    except LogWatcherError as e:
        logger.error("Cannot watch %s: %s", config.log_file, e)
        return 1

    printer = LinePrinter(max_lines=config.max_lines)
    try:
        outcome = watcher.watch(printer)
    except KeyboardInterrupt:
        logger.info("Interrupted, %d lines printed", printer.lines)
        return 130
    finally:
        watcher.close()

    logger.info("Done: %d lines, %d rotations", printer.lines, printer.rotations)
    return 0 if outcome.reason is StopReason.USER_REQUESTED else 1


if __name__ == "__main__":
    sys.exit(main())
