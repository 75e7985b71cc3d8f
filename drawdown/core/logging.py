"""Structured logging for the planning engine and API.

Engine modules log snake_case events with keyword fields, e.g.
``logger.info("withdrawal_strategy_generated", traditional=...)``. Amounts
are Decimals and are written as strings so cents survive the JSON stream.
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any

import orjson
import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from drawdown.core.config import settings

# Set per request by RequestContextMiddleware.
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)


def _add_context_vars(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Attach the current request ID, if any, to the event."""
    if request_id := request_id_ctx.get():
        event_dict["request_id"] = request_id
    return event_dict


def _orjson_serializer(obj: Any, **kwargs: Any) -> str:
    return orjson.dumps(obj, default=str).decode("utf-8")


def _use_json() -> bool:
    if settings.log_format:
        return settings.log_format.lower() == "json"
    return settings.environment != "development"


def configure_logging() -> None:
    """Configure structlog: JSON via orjson, or colored console output."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _add_context_vars,
    ]

    if _use_json():
        processors += [
            structlog.processors.EventRenamer("message"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(serializer=_orjson_serializer),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if settings.debug else logging.INFO,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, conventionally ``get_logger(__name__)``."""
    return structlog.get_logger(name)
