"""
Logging Configuration

Structured logging for the enrichment pipeline using structlog.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import EventDict, Processor

from config.settings import settings

SERVICE_NAME = "leadenrich"


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Stamp every entry with the service name and deployment environment.
    """
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict["environment"] = settings.environment
    return event_dict


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> structlog.BoundLogger:
    """
    Configure structured logging for the pipeline.

    Args:
        level: Log level override (defaults to settings.log_level)
        log_format: "json" or "console" (defaults to settings.log_format)

    Returns:
        Configured structlog logger instance
    """
    level = (level or settings.log_level).upper()
    log_format = log_format or settings.log_format

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level, logging.INFO),
    )

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_app_context,
    ]

    if log_format == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger(SERVICE_NAME)


def get_logger(name: str = None) -> structlog.BoundLogger:
    """
    Get a logger bound to a module name.

    Args:
        name: Logger name (typically __name__)
    """
    return structlog.get_logger(name or SERVICE_NAME)
