"""Logging infrastructure for chainsql.

This module provides structured logging with JSON output and context
tracking. chainsql never configures logging on import; applications call
``setup_logging`` (or their own ``dictConfig``) when they want output.
"""

from chainsql.logging.filters import (
    ContextFilter,
    clear_request_context,
    set_logging_context,
    set_request_context,
)
from chainsql.logging.logger import CustomJsonFormatter, get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "CustomJsonFormatter",
    "ContextFilter",
    "set_logging_context",
    "set_request_context",
    "clear_request_context",
]
