"""Structured logging for EvenKeel, built on structlog.

Every event is a flat key/value record. Request-scoped fields (the
``request_id`` assigned by RequestIdMiddleware) live in structlog's
contextvars store, so they follow the request across ``await`` points and
worker threads without being passed around explicitly.

Raw identifiers and email addresses are never logged; validation notes carry
the kind and the input length only.
"""

import logging
import sys
import time
from contextlib import contextmanager
from typing import Iterator, Optional, TextIO

import structlog
from structlog.types import EventDict, Processor

SERVICE_NAME = "evenkeel"

REQUEST_ID_KEY = "request_id"


def add_service(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Tag every event with the service name (shared log sinks)."""
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def add_timestamp(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add epoch timestamp to log entries."""
    event_dict["timestamp"] = time.time()
    return event_dict


def _level_number(log_level: str) -> int:
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level!r}")
    return level


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = True,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure structlog for the process.

    Args:
        log_level:   DEBUG, INFO, WARNING, ERROR or CRITICAL.
        json_output: JSON lines when True, colourised console output otherwise.
        stream:      Destination; stdout when omitted.

    Raises:
        ValueError: If ``log_level`` is not a standard level name.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service,
        add_timestamp,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stdout),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str = SERVICE_NAME) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger named after the calling module."""
    return structlog.get_logger(name)


def set_request_id(request_id: str) -> None:
    """Bind ``request_id`` to every event logged in the current context."""
    structlog.contextvars.bind_contextvars(**{REQUEST_ID_KEY: request_id})


def clear_request_id() -> None:
    structlog.contextvars.unbind_contextvars(REQUEST_ID_KEY)


def current_request_id() -> Optional[str]:
    """The request_id bound in this context, if any."""
    return structlog.contextvars.get_contextvars().get(REQUEST_ID_KEY)


@contextmanager
def request_context(request_id: str) -> Iterator[str]:
    """Bind ``request_id`` for the duration of the ``with`` block."""
    set_request_id(request_id)
    try:
        yield request_id
    finally:
        clear_request_id()


# Defaults until main.py reconfigures from the environment
configure_logging()
