"""
Structured logging configuration using structlog.

Console output in development, one JSON object per line elsewhere.
Request and tick identifiers are carried in contextvars so that events
from stores, notifiers and services can be joined to the request or tick
that produced them.
"""

import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from typing import Any

import structlog
from structlog.types import Processor

from renewals.config.settings import get_settings

# Third-party loggers that drown out reminder events at INFO
_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "apscheduler", "aiosqlite")


def add_service_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    settings = get_settings()
    event_dict.setdefault("service", settings.app_name)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def _processors(json_output: bool) -> list[Processor]:
    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        add_service_context,
    ]
    if json_output:
        return shared + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return shared + [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]


def configure_logging(json_output: bool | None = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        json_output: Force JSON lines; defaults to JSON outside development.
    """
    settings = get_settings()
    if json_output is None:
        json_output = settings.environment != "development"

    structlog.configure(
        processors=_processors(json_output),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
        force=True,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@contextmanager
def tick_context(as_of: date) -> Iterator[str]:
    """Bind a tick id and evaluation day to every event logged inside."""
    tick_id = uuid.uuid4().hex[:12]
    with structlog.contextvars.bound_contextvars(tick_id=tick_id, as_of=as_of.isoformat()):
        yield tick_id


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
