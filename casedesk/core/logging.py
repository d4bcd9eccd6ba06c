"""
Structured logging with structlog.

JSON lines unless ``LOG_JSON`` is off (it defaults to off in debug), so log
shippers can parse them. Every entry carries the service name and
environment; request middleware adds the request id.
"""

import logging
import sys

import structlog

from casedesk.core.config import settings


def add_service_context(_, __, event_dict: structlog.types.EventDict) -> structlog.types.EventDict:
    event_dict.setdefault("service", "casedesk-api")
    event_dict.setdefault("environment", settings.ENVIRONMENT)
    return event_dict


def setup_logging() -> None:
    """Configure structlog and route stdlib logging through the same stream."""
    json_logs = settings.LOG_JSON if settings.LOG_JSON is not None else not settings.DEBUG
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service_context,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_logs:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    # Request logging is ours; uvicorn's access log would duplicate it
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if settings.DEBUG else logging.WARNING)
