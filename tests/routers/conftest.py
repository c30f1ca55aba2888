"""Shared fixtures for router tests."""

import httpx
import pytest
from fastapi.testclient import TestClient

from alert_notify.core import NotifySettings
from alert_notify.main import create_app


def provider(request: httpx.Request) -> httpx.Response:
    """WeWork robot fake: key ``bad`` is rejected, anything else accepted."""
    if request.url.params.get("key") == "bad":
        return httpx.Response(200, json={"errcode": 93000, "errmsg": "invalid key"})
    return httpx.Response(200, json={"errcode": 0, "errmsg": "ok"})


@pytest.fixture
def client(make_transport):
    """FastAPI test client with the lifespan running and providers faked."""
    app = create_app(settings=NotifySettings(env="test"), transport=make_transport(provider))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def receiver_id(client):
    resp = client.post(
        "/api/alert/receiver",
        json={"name": "ops robot", "type": 4, "wechat_id": "abc123"},
    )
    return resp.json()["id"]
