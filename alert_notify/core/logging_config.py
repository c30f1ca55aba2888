"""
Centralized logging configuration using structlog.

Provides structured JSON logging with context support for
request tracing and correlation IDs.
"""

import logging
import sys
import os
from typing import Optional

import structlog


def configure_logging(
    json_output: Optional[bool] = None,
    log_level: Optional[str] = None
) -> None:
    """
    Configure structured logging for the entire service.

    Args:
        json_output: If True, output JSON format. If None, auto-detect from LOG_FORMAT.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR). Defaults to LOG_LEVEL or INFO.
    """
    if json_output is None:
        json_output = os.getenv("LOG_FORMAT", "json").lower() == "json"

    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(
            structlog.dev.ConsoleRenderer(colors=True)
        )

    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    # The access log and httpx request lines would echo webhook URLs with credentials
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """
    Get a structlog logger instance.

    Args:
        name: Logger name, typically __name__ from the calling module.

    Returns:
        A bound structlog logger with context support.
    """
    return structlog.get_logger(name)


def redact_secret(value: Optional[str], visible: int = 4) -> str:
    """
    Mask a credential so only its first few characters remain readable.

    Webhook keys and access tokens pass through this before they reach a log line.
    """
    if not value:
        return ""
    if len(value) <= visible:
        return "*" * len(value)
    return value[:visible] + "*" * 6


Logger = structlog.BoundLogger
