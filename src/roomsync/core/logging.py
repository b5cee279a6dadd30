"""Logging configuration using structlog."""

import logging
import sys
from uuid import UUID

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars
from structlog.typing import EventDict, WrappedLogger

MASKED_KEYS = frozenset({"phone_number", "email"})


def mask_personal_data(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Keep only the last four characters of invitee phone numbers and emails."""
    for key in MASKED_KEYS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, str) and value:
            event_dict[key] = "*" * max(len(value) - 4, 0) + value[-4:]
    return event_dict


def setup_logging(debug: bool = False) -> None:
    """Configure structlog for structured logging.

    Args:
        debug: Colored console output when True, JSON lines otherwise.
    """
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    shared_processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        mask_personal_data,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        processors = shared_processors + [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        processors = shared_processors + [structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    for noisy in ("sqlalchemy.engine", "httpx", "httpcore", "aiosqlite"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance."""
    return structlog.get_logger(name)


def bind_request_context(request_id: str | None, method: str, path: str) -> None:
    """Bind request-level context to all subsequent log calls.

    Args:
        request_id: The correlation ID for the current request.
        method: HTTP method.
        path: Request path without the query string.
    """
    bind_contextvars(method=method, path=path)
    if request_id:
        bind_contextvars(request_id=request_id)


def bind_account_context(account_id: UUID, room_id: str | None = None) -> None:
    """Bind the authenticated account (and optionally the room it acts on).

    Args:
        account_id: The internal account ID of the caller.
        room_id: Room the request operates on, when known.
    """
    bind_contextvars(account_id=str(account_id))
    if room_id:
        bind_contextvars(room_id=room_id)


def clear_request_context() -> None:
    """Clear all request-scoped context."""
    clear_contextvars()
