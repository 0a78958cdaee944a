"""Shared telemetry: logging setup."""

from plotter_accounts.shared.telemetry.logging import get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
]
