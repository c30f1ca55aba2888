"""Tests for the DingTalk group robot strategy."""

import json

import httpx
import pytest

from alert_notify.exceptions import DeliveryFailureKind, NotificationDeliveryError
from alert_notify.models import AlertReceiver, ChannelType
from alert_notify.services.alerts import DingTalkRobotStrategy


@pytest.fixture
def dingtalk_receiver():
    return AlertReceiver(name="dingtalk", type=ChannelType.DINGTALK_ROBOT, access_token="tok-42")


class TestDingTalkRobotStrategy:
    @pytest.mark.asyncio
    async def test_success(
        self, make_transport, captured_requests, stub_renderer, dingtalk_receiver, alarm
    ):
        transport = make_transport(lambda request: httpx.Response(200, json={"errcode": 0, "errmsg": "ok"}))
        strategy = DingTalkRobotStrategy(stub_renderer, transport)

        await strategy.send(dingtalk_receiver, alarm)

        request = captured_requests[0]
        assert str(request.url) == "https://oapi.dingtalk.com/robot/send?access_token=tok-42"
        assert json.loads(request.content) == {
            "msgtype": "markdown",
            "markdown": {"title": alarm.title, "text": "**ALERT** disk full"},
        }

    @pytest.mark.asyncio
    async def test_rejection(self, make_transport, stub_renderer, dingtalk_receiver, alarm):
        transport = make_transport(
            lambda request: httpx.Response(200, json={"errcode": 310000, "errmsg": "keywords not in content"})
        )
        strategy = DingTalkRobotStrategy(stub_renderer, transport)

        with pytest.raises(NotificationDeliveryError) as exc_info:
            await strategy.send(dingtalk_receiver, alarm)

        assert exc_info.value.message == "[DingTalk Notify Error] keywords not in content"
        assert exc_info.value.kind == DeliveryFailureKind.PROVIDER_REJECTION

    @pytest.mark.asyncio
    async def test_http_error_status(self, make_transport, stub_renderer, dingtalk_receiver, alarm):
        strategy = DingTalkRobotStrategy(stub_renderer, make_transport(lambda request: httpx.Response(403)))

        with pytest.raises(NotificationDeliveryError, match="Http StatusCode 403"):
            await strategy.send(dingtalk_receiver, alarm)

    @pytest.mark.asyncio
    async def test_missing_token(self, make_transport, captured_requests, stub_renderer, alarm):
        receiver = AlertReceiver(name="dingtalk", type=ChannelType.DINGTALK_ROBOT, access_token="  ")
        strategy = DingTalkRobotStrategy(stub_renderer, make_transport(lambda request: httpx.Response(200)))

        with pytest.raises(NotificationDeliveryError) as exc_info:
            await strategy.send(receiver, alarm)

        assert "access_token" in exc_info.value.message
        assert captured_requests == []

    def test_identity(self, stub_renderer):
        strategy = DingTalkRobotStrategy(stub_renderer, transport=None)

        assert strategy.type() == ChannelType.DINGTALK_ROBOT
        assert strategy.template_name() == "alertNotifyDingTalkRobot"
