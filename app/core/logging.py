"""
Structured logging for the relay.

OAuth state tokens are correlation ids and are only ever logged by their
prefix; authorization codes, client secrets and provider tokens are removed
from every event before it is rendered.
"""
import logging
import sys
from typing import Any, Dict, Optional

import structlog
from structlog.types import EventDict, Processor

from app.core.config import settings

STATE_PREFIX_LENGTH = 8

SECRET_KEYS = frozenset({
    "code",
    "access_token",
    "refresh_token",
    "client_secret",
    "token",
})


def redact_oauth_secrets(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Truncate ``state`` and drop credential-bearing keys from an event."""
    for key in SECRET_KEYS & event_dict.keys():
        del event_dict[key]

    state = event_dict.get("state")
    if isinstance(state, str):
        event_dict["state"] = state[:STATE_PREFIX_LENGTH]
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        redact_oauth_secrets,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def setup_logging() -> None:
    """Route structlog to stdout: console output in development, JSON elsewhere."""
    level = logging.DEBUG if settings.DEBUG else logging.INFO

    # uvicorn and aiohttp still log through the stdlib
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    if settings.is_development:
        renderers: list[Processor] = [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    else:
        renderers = [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=_shared_processors() + renderers,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def log_request_details(method: str, path: str, client_ip: Optional[str] = None) -> Dict[str, Any]:
    """Fields for the request start event; ``request_id`` comes from contextvars."""
    context: Dict[str, Any] = {"method": method, "path": path}
    if client_ip:
        context["client_ip"] = client_ip
    return context


def log_error_details(error: Exception, **kwargs: Any) -> Dict[str, Any]:
    """Fields describing a handled error, merged with any error details."""
    return {
        "error_type": type(error).__name__,
        "error_message": str(error),
        **kwargs,
    }
