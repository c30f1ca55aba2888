"""
Request context management for correlation ID tracking.

Every alarm report that enters through the API carries a correlation ID,
so the log lines of its fan-out to many receivers can be grouped together.
"""

import uuid
from contextvars import ContextVar

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
import structlog


correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle correlation ID for request tracing.

    - Extracts correlation ID from X-Correlation-ID header or generates new one
    - Binds correlation ID to structlog context for all log messages
    - Adds correlation ID to response headers for client tracking
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint
    ) -> Response:
        correlation_id = request.headers.get(
            "X-Correlation-ID",
            str(uuid.uuid4())
        )

        correlation_id_ctx.set(correlation_id)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=correlation_id,
            request_path=request.url.path,
            request_method=request.method,
        )

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id

        return response


def get_correlation_id() -> str:
    """
    Get current correlation ID from context.

    Returns:
        The correlation ID for the current request, or empty string if not set.
    """
    return correlation_id_ctx.get()


def bind_context(**kwargs) -> None:
    """Bind additional context variables for logging."""
    structlog.contextvars.bind_contextvars(**kwargs)
