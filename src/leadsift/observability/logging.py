"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from leadsift.config.settings import ObservabilitySettings

# opensearch-py logs every HTTP round trip (with request bodies at DEBUG).
NOISY_LOGGERS = ("opensearch", "uvicorn.access", "httpx")


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(settings: ObservabilitySettings | None = None) -> None:
    """Configure structured logging for LeadSift.

    Args:
        settings: Observability settings. Uses defaults if None.
    """
    log_level = _level(settings.log_level if settings else "info")
    log_format = settings.log_format if settings else "json"

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    processors.append(
        structlog.dev.ConsoleRenderer() if log_format == "console" else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    logging.getLogger("leadsift").setLevel(log_level)

    # Per-request transport chatter only at debug
    third_party_level = log_level if log_level <= logging.DEBUG else max(log_level, logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service="leadsift")
