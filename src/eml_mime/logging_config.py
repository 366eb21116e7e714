"""
Structured logging configuration using structlog.

This module sets up structlog for JSON-based structured logging with context binding.
The library itself only calls ``structlog.get_logger``; applications (and the CLI)
call ``setup_logging`` once at startup.
"""

import logging
import sys
from typing import Optional

import structlog

from .config import Settings, settings as default_settings


def setup_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure structlog for structured logging.

    Sets up processors for:
    - Context variable merging
    - Log level addition
    - Exception info rendering
    - Timestamp addition
    - JSON or console rendering based on settings

    Args:
        settings: Settings to read log level and renderer from (defaults to global)
    """
    settings = settings or default_settings
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            (
                structlog.processors.JSONRenderer()
                if settings.log_json
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(settings.log_level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        structlog BoundLogger instance
    """
    return structlog.get_logger(name)
