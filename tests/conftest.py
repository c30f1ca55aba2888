"""
Common pytest fixtures for the alert-notify test suite.

Provides shared fixtures for:
- Sample alarms and settings
- Template rendering
- Provider fakes on top of httpx.MockTransport
- Captured structlog output
"""

import logging
import os
from typing import Callable, List

import httpx
import pytest
import structlog
from structlog.testing import LogCapture

from alert_notify.core import NotifySettings
from alert_notify.models import AlarmContent, AlarmLevel
from alert_notify.services.alerts import TemplateRenderer, TransportClient


# ============================================
# Environment Setup
# ============================================

@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Set up test environment variables."""
    os.environ.setdefault("ENV", "test")
    os.environ.setdefault("LOG_FORMAT", "console")
    # Cached loggers would keep their first configuration and bypass log_output
    structlog.configure(cache_logger_on_first_use=False)
    yield


# ============================================
# Alarm / Settings Fixtures
# ============================================

@pytest.fixture
def alarm() -> AlarmContent:
    return AlarmContent(
        title="Gateway error rate above 5%",
        content="divide plugin upstream order-service answered 503",
        level=AlarmLevel.CRITICAL,
        labels={"plugin": "divide", "service": "order-service"},
    )


@pytest.fixture
def settings() -> NotifySettings:
    return NotifySettings(env="test", console_url="http://console.test")


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer(console_url="http://console.test")


# ============================================
# HTTP Provider Fakes
# ============================================

@pytest.fixture
def captured_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def make_transport(captured_requests) -> Callable[..., TransportClient]:
    """
    Build a TransportClient whose requests are answered by ``handler``.

    Every request is appended to ``captured_requests`` before the handler runs.
    """
    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> TransportClient:
        def _record(request: httpx.Request) -> httpx.Response:
            captured_requests.append(request)
            return handler(request)

        return TransportClient(client=httpx.AsyncClient(transport=httpx.MockTransport(_record)))

    return _make


# ============================================
# Logging
# ============================================

@pytest.fixture
def log_output() -> LogCapture:
    """Capture every structlog event, debug included, with bound context merged in."""
    capture = LogCapture()
    old_config = structlog.get_config()
    structlog.configure(
        processors=[structlog.contextvars.merge_contextvars, capture],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        cache_logger_on_first_use=False,
    )
    yield capture
    structlog.configure(**old_config)
