"""
Console and file logging for the citecheck logger tree.

Core modules log through ``logging.getLogger(__name__)``; nothing is emitted
until a host calls :func:`setup_logging`.
"""

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, TextIO

import colorama
from colorama import Fore, Style

colorama.just_fix_windows_console()

ROOT_LOGGER_NAME = "citecheck"
DEFAULT_LOG_FILE = "logs/citecheck.log"

CONSOLE_FORMAT = "%(levelname)-8s | %(message)s"
DETAILED_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"


class LogLevel(str, Enum):
    """Verbosity presets understood by the CLI."""

    MINIMAL = "minimal"  # warnings and errors
    NORMAL = "normal"  # batch summaries
    DETAILED = "detailed"  # per-record debug lines
    FULL = "full"  # detailed, with timestamps and logger names


_LEVELS: Dict[LogLevel, int] = {
    LogLevel.MINIMAL: logging.WARNING,
    LogLevel.NORMAL: logging.INFO,
    LogLevel.DETAILED: logging.DEBUG,
    LogLevel.FULL: logging.DEBUG,
}


class ColoredFormatter(logging.Formatter):
    """Colors the level name; the record itself is left as other handlers see it."""

    COLORS = {
        "DEBUG": Fore.CYAN,
        "INFO": Fore.GREEN,
        "WARNING": Fore.YELLOW,
        "ERROR": Fore.RED,
        "CRITICAL": Fore.RED + Style.BRIGHT,
    }

    def format(self, record):
        color = self.COLORS.get(record.levelname)
        if color is None:
            return super().format(record)
        plain = record.levelname
        record.levelname = f"{color}{plain}{Style.RESET_ALL}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


def resolve_level(level: LogLevel, verbose: bool = False, debug: bool = False) -> int:
    """Map CLI flags onto a stdlib level; --debug and --verbose both force DEBUG."""
    if debug or verbose:
        return logging.DEBUG
    return _LEVELS[LogLevel(level)]


def _console_handler(log_level: int, detailed: bool, stream: TextIO) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setLevel(log_level)
    if detailed:
        handler.setFormatter(ColoredFormatter(DETAILED_CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    else:
        handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT))
    return handler


def _file_handler(log_file: str) -> logging.Handler:
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    # The file always gets everything, whatever the console shows.
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    level: LogLevel = LogLevel.NORMAL,
    log_to_file: bool = False,
    log_file: Optional[str] = None,
    verbose: bool = False,
    debug: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the ``citecheck`` logger. Safe to call repeatedly: existing
    handlers are replaced, not stacked.

    Args:
        level: Verbosity preset
        log_to_file: Also write to ``log_file``
        log_file: Log file path (default logs/citecheck.log)
        verbose: Force DEBUG on the console
        debug: Force DEBUG and the detailed console format
        stream: Console stream (default stderr, keeping stdout for results)

    Returns:
        The configured ``citecheck`` logger
    """
    log_level = resolve_level(level, verbose=verbose, debug=debug)
    detailed = debug or verbose or LogLevel(level) == LogLevel.FULL

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(log_level)
    logger.addHandler(_console_handler(log_level, detailed, stream or sys.stderr))

    if log_to_file:
        logger.addHandler(_file_handler(log_file or DEFAULT_LOG_FILE))

    logger.debug("Logging configured at %s", logging.getLevelName(log_level))
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger inside the citecheck tree; ``__name__`` of a citecheck module is kept as is."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
