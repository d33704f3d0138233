"""
Logging setup.

User-facing output goes through the rich Console. The `maclockdown.*`
loggers carry diagnostics (every external command, skipped settings,
unexpected exceptions) and are rendered on stderr by RichHandler.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "maclockdown"


def setup_logging(verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """
    Attach a RichHandler to the package logger.

    WARNING and above by default; DEBUG with --verbose.
    Calling twice replaces the handler rather than stacking a second one.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=verbose,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger
