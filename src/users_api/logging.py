"""
Structured logging for the users API.

Events go through structlog on top of the stdlib root logger. Values that
belong to the request being served (``request_id``, method, path, GraphQL
operation) are bound with ``structlog.contextvars`` and merged into every
event logged while that request is in flight.
"""

import base64
import logging
import secrets
import sys
import time
from typing import Any

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars

# Loggers that are too chatty at INFO for a request-per-line service log
QUIET_LOGGERS = ("aiosqlite", "asyncio", "httpcore", "httpx")


def configure_logging(debug: bool = False, level: str | None = None) -> None:
    """Configure stdlib logging and structlog for the process.

    Args:
        debug: Render events for a terminal and log at DEBUG.
        level: Log level name used when ``debug`` is off (default ``INFO``).
    """
    if debug:
        log_level = logging.DEBUG
    else:
        log_level = logging.getLevelNamesMapping().get((level or "INFO").upper(), logging.INFO)

    logging.basicConfig(level=log_level, stream=sys.stdout, format="%(message)s", force=True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    renderer: Any
    if debug:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="ISO", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def new_request_id() -> str:
    """Return a 14-character urlsafe id: microsecond clock plus 2 random bytes."""
    raw = (time.time_ns() // 1000).to_bytes(8, "big") + secrets.token_bytes(2)
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def bind_request_context(request_id: str | None = None, **values: Any) -> str:
    """Start a fresh logging context for one request and return its id.

    Anything bound by a previous request on the same context is dropped.
    """
    request_id = request_id or new_request_id()
    clear_contextvars()
    bind_contextvars(request_id=request_id, **values)
    return request_id


def clear_request_context() -> None:
    clear_contextvars()
