"""
Structured logging configuration using structlog.

Log events go to stderr so report output on stdout stays machine-readable.
Context bound with ``structlog.contextvars`` (the product being reported
on, for instance) is merged into every event.
"""

import logging
import sys
from typing import Any, TextIO

import structlog
from structlog.types import Processor

from stocklens.config.settings import get_settings

# Transport loggers that are chatty at INFO during page collection
_NOISY_LOGGERS = ("httpx", "httpcore")


def add_app_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add application context to log events."""
    settings = get_settings()
    event_dict["app"] = settings.app_name
    event_dict["version"] = settings.app_version
    event_dict["environment"] = settings.environment
    return event_dict


def configure_logging(
    log_level: str | None = None,
    json_logs: bool | None = None,
    stream: TextIO | None = None,
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        log_level: Overrides ``LOG_LEVEL`` from settings.
        json_logs: Force JSON (True) or console (False) rendering. Defaults
            to console in development and JSON everywhere else.
        stream: Destination for log lines; stderr by default.
    """
    settings = get_settings()
    level_name = (log_level or settings.log_level).upper()
    if json_logs is None:
        json_logs = settings.environment != "development"

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
    ]

    if json_logs:
        renderer: list[Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderer = [structlog.dev.ConsoleRenderer(colors=stream is None)]

    structlog.configure(
        processors=shared_processors + renderer,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stderr,
        level=getattr(logging, level_name, logging.INFO),
        force=True,
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
