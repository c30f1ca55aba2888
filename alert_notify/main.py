"""
FastAPI Main Application for the alert notification service.

Receives fired alarms over HTTP and delivers them to the configured
receivers through the channel strategies (WeWork robot, DingTalk robot,
email, Slack, Discord and generic webhooks).
"""

import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from alert_notify.core import (
    CorrelationIdMiddleware,
    NotifySettings,
    configure_logging,
    get_correlation_id,
    get_logger,
)
from alert_notify.exceptions import (
    AlertSystemException,
    ReceiverNotFoundError,
    UnsupportedChannelError,
)
from alert_notify.routers import alerts
from alert_notify.services.alerts import (
    AlertDispatcher,
    ReceiverStore,
    TemplateRenderer,
    TransportClient,
    build_default_registry,
)

# Configure structured logging
configure_logging()
logger = get_logger(__name__)


API_TITLE = "Alert Notify API"
API_VERSION = "1.0.0"
API_DESCRIPTION = """
## Alert notification delivery

Report fired alarms and manage the receivers they are delivered to.

### Channels

| Type | Channel |
|------|---------|
| 1 | Email (SMTP) |
| 2 | Generic webhook |
| 4 | WeWork group robot |
| 5 | DingTalk group robot |
| 8 | Slack incoming webhook |
| 9 | Discord webhook |
"""

TAGS_METADATA = [
    {
        "name": "Alert",
        "description": "Alarm reporting, receiver management and test sends.",
    },
    {
        "name": "Health",
        "description": "Liveness check for load balancers and monitoring.",
    },
]

EXCEPTION_STATUS_CODES = {
    ReceiverNotFoundError: 404,
    UnsupportedChannelError: 400,
}


def create_app(
    settings: Optional[NotifySettings] = None,
    transport: Optional[TransportClient] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Service settings; read from the environment when omitted
        transport: HTTP transport for webhook strategies; created from the
            settings when omitted and closed on shutdown either way
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        # Startup
        logger.info("Starting Alert Notify API...")

        app_settings = settings or NotifySettings.from_env()
        app_transport = transport or TransportClient(app_settings.http_timeout_seconds)
        renderer = TemplateRenderer(console_url=app_settings.console_url)
        registry = build_default_registry(renderer, app_transport, app_settings)
        store = ReceiverStore()

        app.state.settings = app_settings
        app.state.transport = app_transport
        app.state.registry = registry
        app.state.receiver_store = store
        app.state.dispatcher = AlertDispatcher(registry, store)

        yield

        # Shutdown
        logger.info("Shutting down Alert Notify API...")
        await app_transport.aclose()

    app = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=TAGS_METADATA,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "X-Correlation-ID"],
        expose_headers=["X-Correlation-ID"],
    )

    # Correlation ID middleware for request tracing
    app.add_middleware(CorrelationIdMiddleware)

    @app.exception_handler(AlertSystemException)
    async def alert_system_exception_handler(request: Request, exc: AlertSystemException):
        """Map service exceptions to JSON error bodies."""
        status_code = EXCEPTION_STATUS_CODES.get(type(exc), 500)
        if status_code >= 500:
            logger.error("Request failed", error_code=exc.error_code, error=exc.message)
        else:
            logger.info("Request rejected", error_code=exc.error_code, error=exc.message)

        return JSONResponse(status_code=status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler."""
        logger.error("Unhandled exception", error=str(exc), exc_info=True)

        content = {
            "error": "Internal server error",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "correlation_id": get_correlation_id(),
        }
        if _is_production(request):
            content["message"] = "An unexpected error occurred"
        else:
            content["message"] = str(exc)
            content["type"] = type(exc).__name__

        return JSONResponse(status_code=500, content=content)

    @app.get("/health", tags=["Health"], summary="Simple Health Check")
    async def health_check():
        """Liveness probe."""
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": "alert-notify",
            "version": API_VERSION,
        }

    app.include_router(alerts.router, prefix="/api/alert", tags=["Alert"])

    return app


def _is_production(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    if settings is not None:
        return settings.is_production
    return os.getenv("ENV") == "production"


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "alert_notify.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )
