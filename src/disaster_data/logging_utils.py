"""Logging setup shared by the CLI and library callers."""

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "disaster_data"


def configure_logging(level: str | int = "WARNING", console: Console | None = None) -> logging.Logger:
    """
    Attach a rich handler to the package logger.

    Calling it again only updates the level, so repeated CLI invocations
    in one process do not stack handlers.

    Args:
        level: Logging level name or number.
        console: Console to render to (defaults to stderr).

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logger.setLevel(level)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=False,
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)

    return logger
