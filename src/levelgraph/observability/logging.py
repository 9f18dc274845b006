"""Structured logging for levelgraph.

Only the ``levelgraph`` logger namespace is configured; the root logger and
third-party loggers are left alone. Two sinks hang off that namespace:

- Console: a rich handler on stderr, filtered by the CLI's ``-v`` count.
- Event file: optional JSON lines (``--log PATH``) receiving every event at
  DEBUG, including context bound with ``structlog.contextvars`` such as the
  CLI command and backup path.

Level filtering happens on the stdlib loggers, so module-level loggers
created at import time follow later reconfiguration.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import structlog
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from pathlib import Path

    from structlog.typing import EventDict, Processor, WrappedLogger

LOGGER_NAMESPACE = "levelgraph"

_VERBOSITY_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)

_SHARED_PROCESSORS: list[Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
]

_configured = False
_file_handler: logging.FileHandler | None = None


def console_level(verbosity: int) -> int:
    """Console threshold for a ``-v`` count: 0=WARNING, 1=INFO, 2+=DEBUG."""
    return _VERBOSITY_LEVELS[min(max(verbosity, 0), len(_VERBOSITY_LEVELS) - 1)]


def _drop_console_keys(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    # RichHandler already shows level and time.
    for key in ("level", "timestamp", "logger"):
        event_dict.pop(key, None)
    return event_dict


def _formatter(*renderers: Processor) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_SHARED_PROCESSORS,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderers],
    )


def _console_handler(verbosity: int) -> logging.Handler:
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_time=verbosity >= 1,
        show_path=verbosity >= 2,
        markup=False,
    )
    handler.setLevel(console_level(verbosity))
    handler.setFormatter(
        _formatter(_drop_console_keys, structlog.processors.KeyValueRenderer(key_order=["event"]))
    )
    return handler


def _event_file_handler(log_file: Path) -> logging.FileHandler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(_formatter(structlog.processors.JSONRenderer(default=str)))
    return handler


def configure_logging(verbosity: int = 0, log_file: Path | None = None) -> None:
    """Configure the ``levelgraph`` logger namespace.

    Safe to call repeatedly; each call replaces the previous handlers and
    closes a previously opened event file.

    Args:
        verbosity: Console verbosity, 0=WARNING (default), 1=INFO, 2+=DEBUG.
        log_file: Optional JSON-lines file receiving every event.
    """
    global _configured, _file_handler

    close_file_logging()

    logger = logging.getLogger(LOGGER_NAMESPACE)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    logger.addHandler(_console_handler(verbosity))
    if log_file is not None:
        _file_handler = _event_file_handler(log_file)
        logger.addHandler(_file_handler)

    logger.setLevel(logging.DEBUG if log_file is not None else console_level(verbosity))
    logger.propagate = False

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, configuring defaults on first use.

    Args:
        name: Logger name, normally ``__name__`` of a ``levelgraph`` module.
    """
    if not _configured:
        configure_logging()

    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger


def close_file_logging() -> None:
    """Detach and close the event file, if one is open."""
    global _file_handler
    if _file_handler is not None:
        logging.getLogger(LOGGER_NAMESPACE).removeHandler(_file_handler)
        _file_handler.close()
        _file_handler = None
