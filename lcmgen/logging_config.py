"""Logging configuration for lcmgen.

Every module obtains its logger through get_logger(__name__); the CLI calls
setup_logging() once to attach a rich handler to the package logger.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "lcmgen"


def setup_logging(
    level: int | str = logging.WARNING,
    console: Console | None = None,
    show_path: bool = False,
) -> logging.Logger:
    """Configure the package logger.

    Args:
        level: Logging level name or number.
        console: Rich console to log to (defaults to stderr).
        show_path: Whether records show the emitting file and line.

    Returns:
        The package root logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Clear existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=show_path,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module (typically __name__)."""
    return logging.getLogger(name)
