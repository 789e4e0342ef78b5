"""Logging configuration for fixturekit."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "fixturekit"


def setup_logging(level: int | str = logging.WARNING, console: Console | None = None) -> None:
    """
    Configure the fixturekit logger with a rich handler.

    Library code only ever obtains loggers; this is meant for entry points
    such as the CLI. Existing handlers on the package logger are replaced.

    Args:
        level: Logging level (name or number)
        console: Console to render to (stderr by default)
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for old_handler in logger.handlers[:]:
        old_handler.close()
        logger.removeHandler(old_handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
