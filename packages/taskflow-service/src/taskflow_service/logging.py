"""structlog configuration."""

from __future__ import annotations

import logging

import structlog

from taskflow_service.settings import Settings


def configure_logging(settings: Settings) -> None:
    """Configure structlog once at startup.

    JSON lines for ``log_format == "json"``, a console renderer otherwise.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
