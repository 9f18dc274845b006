"""Observability module for levelgraph.

Provides structured logging for the graph and progression engines.
"""

from levelgraph.observability.logging import (
    LOGGER_NAMESPACE,
    close_file_logging,
    configure_logging,
    console_level,
    get_logger,
)

__all__ = [
    "LOGGER_NAMESPACE",
    "close_file_logging",
    "configure_logging",
    "console_level",
    "get_logger",
]
