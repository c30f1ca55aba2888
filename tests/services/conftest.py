"""Shared fixtures for alert service tests."""

from typing import List

import pytest

from alert_notify.models import AlarmContent, AlertReceiver, ChannelType


class StubRenderer:
    """Renderer that returns fixed text and records what it was asked for."""

    def __init__(self, text: str = "**ALERT** disk full", error: Exception = None):
        self.text = text
        self.error = error
        self.calls: List[str] = []

    def render(self, template_name: str, alarm: AlarmContent) -> str:
        self.calls.append(template_name)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def stub_renderer() -> StubRenderer:
    return StubRenderer()


@pytest.fixture
def wework_receiver() -> AlertReceiver:
    return AlertReceiver(id="ops-robot-1", name="ops robot", type=ChannelType.WEWORK_ROBOT, wechat_id="abc123")
