import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_LOGGER = "admin"


class CenteredFormatter(logging.Formatter):
    """
    Centers logger names in a column that widens to the longest name seen.
    """

    name_width = 16

    def __init__(self, fmt=None, datefmt=None, style="%", initial_width=16):
        super().__init__(fmt, datefmt, style)
        CenteredFormatter.name_width = max(CenteredFormatter.name_width, initial_width)

    def format(self, record):
        CenteredFormatter.name_width = max(CenteredFormatter.name_width, len(record.name))
        record.name = record.name.center(CenteredFormatter.name_width)
        return super().format(record)


def _level() -> int:
    return logging.DEBUG if os.getenv("DEBUG") else logging.INFO


_shared_console: Optional[Console] = None


def _console() -> Console:
    """
    The TUI owns the terminal, so records go to ADMIN_LOG_FILE when it is set
    and to stderr otherwise. Every logger shares one console and one file.
    """
    global _shared_console
    if _shared_console is None:
        log_file = os.getenv("ADMIN_LOG_FILE")
        if log_file:
            _shared_console = Console(file=open(log_file, "a", encoding="utf-8"), width=140)
        else:
            _shared_console = Console(stderr=True)
    return _shared_console


def _build_handler(level: int) -> RichHandler:
    handler = RichHandler(
        console=_console(),
        show_time=True,
        show_level=True,
        show_path=False,
        rich_tracebacks=True,
        log_time_format="[%X]",
    )
    handler.setFormatter(CenteredFormatter("[%(name)s]  %(message)s"))
    handler.setLevel(level)
    return handler


def get_logger(name=None) -> logging.Logger:
    """
    Module logger with a RichHandler attached once.
    Set DEBUG in the environment to see gateway traffic.
    """
    logger = logging.getLogger(name or DEFAULT_LOGGER)
    level = _level()
    logger.setLevel(level)

    if not logger.handlers:
        logger.addHandler(_build_handler(level))
        logger.propagate = False
        logger.debug(f"Logger for '{logger.name}' ready")

    return logger
