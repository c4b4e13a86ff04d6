"""Logging configuration for fasthog.

Logging goes through a Rich handler so warnings about skipped entries and
scan summaries render cleanly next to the progress display.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_logger: Optional[logging.Logger] = None

LOG_FORMAT = "%(message)s"
DATE_FORMAT = "[%X]"


def setup_logging(
    verbose: bool = False,
    console: Optional[Console] = None,
    level: Optional[str] = None,
) -> logging.Logger:
    """Configure the ``fasthog`` logger with a Rich handler.

    Args:
        verbose: If True, log at DEBUG regardless of ``level``.
        console: Optional console to write to. Defaults to stderr so that
                 JSON written to stdout stays clean.
        level: Level name such as "info" used when not verbose.
               Defaults to "warning".

    Returns:
        The configured ``fasthog`` logger.
    """
    global _logger

    if verbose:
        log_level = logging.DEBUG
    else:
        log_level = logging.getLevelName((level or "warning").upper())
        if not isinstance(log_level, int):
            log_level = logging.WARNING

    rich_handler = RichHandler(
        level=log_level,
        console=console or Console(stderr=True),
        show_time=True,
        show_level=True,
        show_path=verbose,
        rich_tracebacks=True,
        markup=False,
    )
    rich_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    logger = logging.getLogger("fasthog")
    logger.setLevel(log_level)

    # Avoid duplicate handlers when called more than once (tests, repeated CLI runs)
    logger.handlers.clear()
    logger.addHandler(rich_handler)
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Return the fasthog logger, configuring it with defaults if needed."""
    global _logger

    if _logger is None:
        _logger = setup_logging(verbose=False)

    return _logger
