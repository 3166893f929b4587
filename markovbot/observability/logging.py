"""
Logging configuration for the Slack bot.

Uses structlog for structured JSON logging in production. Records from
plain stdlib loggers (the rest of the package) go through the same
processor chain via structlog's ProcessorFormatter, so every line on stdout
has the same shape.
"""

import logging
import sys
from typing import Any

import structlog

from ..config import settings


def configure_logging(log_level: str | None = None) -> None:
    """
    Configure structured logging for the application.

    Uses structlog with JSON output for production, pretty output for development.

    Args:
        log_level: Override for settings.log_level (e.g. from the command line)
    """
    level = log_level or settings.log_level
    is_dev = level == "DEBUG"

    # Applied to structlog events and to foreign stdlib records alike
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if is_dev:
        renderers: list[Any] = [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        renderers = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *renderers,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level))

    # Frame-level chatter from the transport libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("websockets").setLevel(logging.WARNING)

    logger = structlog.get_logger()
    logger.info(
        "Logging configured",
        level=level,
        format="json" if not is_dev else "console",
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
