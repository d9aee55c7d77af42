"""
Structured logging configuration for the F1 history API.
"""

import logging
import sys

import structlog
from structlog.stdlib import LoggerFactory

from f1history.core.config import settings


def setup_logging() -> None:
    """Configure structured logging for the application."""

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            (
                structlog.processors.JSONRenderer()
                if settings.log_format == "json"
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper()),
    )

    # Set specific log levels for noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def log_external_api_call(
    logger: structlog.BoundLogger,
    api_name: str,
    endpoint: str,
    method: str,
    status_code: int,
    response_time_ms: int,
    error: str = "",
) -> None:
    """Log external API call information.

    Args:
        logger: Structured logger instance
        api_name: Name of the external API
        endpoint: API endpoint
        method: HTTP method
        status_code: Response status code (0 when no response was received)
        response_time_ms: Response time in milliseconds
        error: Error message if the call failed
    """
    log_data = {
        "api_name": api_name,
        "endpoint": endpoint,
        "method": method,
        "status_code": status_code,
        "response_time_ms": response_time_ms,
    }

    if error:
        logger.error("External API call failed", **log_data, error=error)
    else:
        logger.info("External API call completed", **log_data)
