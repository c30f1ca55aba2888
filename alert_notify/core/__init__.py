"""Core module for logging, context, settings and shared utilities."""

from .logging_config import configure_logging, get_logger, redact_secret
from .context import CorrelationIdMiddleware, bind_context, get_correlation_id
from .config import NotifySettings

__all__ = [
    "configure_logging",
    "get_logger",
    "redact_secret",
    "CorrelationIdMiddleware",
    "get_correlation_id",
    "bind_context",
    "NotifySettings",
]
