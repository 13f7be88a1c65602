"""Structured logging setup utilities."""

import logging
from typing import Any

import structlog


def configure_logging(level: str = "INFO", renderer: str = "json") -> None:
    """Configure structlog; JSON for CI logs, console for interactive runs."""

    final_processor: Any
    if renderer == "console":
        final_processor = structlog.dev.ConsoleRenderer()
    else:
        final_processor = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            final_processor,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def build_logger(name: str, **context: Any) -> structlog.stdlib.BoundLogger:
    """Create a structlog bound logger with default context."""

    logger = structlog.get_logger(name)
    if context:
        return logger.bind(**context)
    return logger
