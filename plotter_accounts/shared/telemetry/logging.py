"""Logging configuration for plotter-accounts."""

import logging
import sys

from plotter_accounts.core.config import get_settings


def setup_logging() -> None:
    """Configure process-wide logging.

    Level is settings.log_level when set, else DEBUG when settings.debug is
    True, otherwise WARNING so the REPL output is not interleaved with INFO
    records. Output goes to stderr; command output owns stdout.
    """
    settings = get_settings()
    if settings.log_level:
        log_level = logging.getLevelNamesMapping()[settings.log_level]
    else:
        log_level = logging.DEBUG if settings.debug else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)
