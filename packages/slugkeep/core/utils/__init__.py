"""Shared utilities for slugkeep."""

from slugkeep.core.utils.logging import configure_logging, get_logger, log_duration

__all__ = [
    "configure_logging",
    "get_logger",
    "log_duration",
]
