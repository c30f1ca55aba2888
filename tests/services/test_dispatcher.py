"""
Tests for the strategy registry and the alert dispatcher.

Tests cover:
- Registry lookup and duplicate registration
- Default registry wiring
- Receiver matching on level and labels
- Failure isolation during fan-out
"""

import asyncio

import pytest

from alert_notify.core import NotifySettings
from alert_notify.exceptions import (
    DeliveryFailureKind,
    NotificationDeliveryError,
    UnsupportedChannelError,
)
from alert_notify.models import AlarmLevel, AlertReceiver, AlertReceiverCreate, ChannelType
from alert_notify.services.alerts import (
    AlertDispatcher,
    AlertNotifyStrategy,
    DeliveryResult,
    ReceiverStore,
    StrategyRegistry,
    build_default_registry,
)


class FakeStrategy:
    """Strategy that records deliveries and fails for selected receivers."""

    def __init__(self, channel_type=ChannelType.WEWORK_ROBOT, fail_for=(), crash_for=()):
        self.channel_type = channel_type
        self.fail_for = set(fail_for)
        self.crash_for = set(crash_for)
        self.delivered = []

    def type(self):
        return self.channel_type

    def template_name(self):
        return "fake"

    async def send(self, receiver, alarm):
        await asyncio.sleep(0)
        if receiver.name in self.fail_for:
            raise NotificationDeliveryError(
                "Fake Notify Error", "invalid key", DeliveryFailureKind.PROVIDER_REJECTION
            )
        if receiver.name in self.crash_for:
            raise RuntimeError("strategy bug")
        self.delivered.append(receiver.name)


def make_receiver(name, channel_type=ChannelType.WEWORK_ROBOT, **kwargs):
    return AlertReceiver(name=name, type=channel_type, wechat_id="key", **kwargs)


# ============================================
# Registry
# ============================================


class TestStrategyRegistry:
    def test_register_and_get(self):
        registry = StrategyRegistry()
        strategy = FakeStrategy()
        registry.register(strategy)

        assert registry.get(ChannelType.WEWORK_ROBOT) is strategy
        assert registry.get(4) is strategy
        assert ChannelType.WEWORK_ROBOT in registry
        assert len(registry) == 1

    def test_duplicate_type_rejected(self):
        registry = StrategyRegistry()
        registry.register(FakeStrategy())

        with pytest.raises(ValueError, match="WEWORK_ROBOT"):
            registry.register(FakeStrategy())

    @pytest.mark.parametrize("channel_type", [ChannelType.SLACK_WEBHOOK, 3, 99])
    def test_unknown_type(self, channel_type):
        registry = StrategyRegistry()
        registry.register(FakeStrategy())

        with pytest.raises(UnsupportedChannelError) as exc_info:
            registry.get(channel_type)

        assert exc_info.value.error_code == "R001"
        assert channel_type not in registry

    def test_default_registry(self, renderer, make_transport):
        registry = build_default_registry(renderer, make_transport(lambda request: None), NotifySettings())

        assert registry.types() == [
            ChannelType.EMAIL,
            ChannelType.WEBHOOK,
            ChannelType.WEWORK_ROBOT,
            ChannelType.DINGTALK_ROBOT,
            ChannelType.SLACK_WEBHOOK,
            ChannelType.DISCORD_WEBHOOK,
        ]
        for strategy in registry:
            assert isinstance(strategy, AlertNotifyStrategy)
        assert registry.get(ChannelType.WEWORK_ROBOT).template_name() == "alertNotifyWeWorkRobot"


# ============================================
# Matching
# ============================================


class TestReceiverMatching:
    def setup_method(self):
        self.dispatcher = AlertDispatcher(StrategyRegistry())

    def test_match_all(self, alarm):
        receiver = make_receiver("all")

        assert self.dispatcher.match_receivers(alarm, [receiver]) == [receiver]

    def test_disabled_never_matches(self, alarm):
        receiver = make_receiver("off", enabled=False)

        assert self.dispatcher.match_receivers(alarm, [receiver]) == []

    def test_level_filter(self, alarm):
        critical_only = make_receiver("crit", match_all=False, levels=[AlarmLevel.CRITICAL])
        info_only = make_receiver("info", match_all=False, levels=[AlarmLevel.INFO])

        assert self.dispatcher.match_receivers(alarm, [critical_only, info_only]) == [critical_only]

    def test_label_filter(self, alarm):
        same_service = make_receiver("svc", match_all=False, labels={"service": "order-service"})
        other_service = make_receiver("other", match_all=False, labels={"service": "user-service"})
        missing_label = make_receiver("dc", match_all=False, labels={"dc": "sh"})

        matched = self.dispatcher.match_receivers(alarm, [same_service, other_service, missing_label])

        assert matched == [same_service]

    def test_level_and_labels_combined(self, alarm):
        receiver = make_receiver(
            "both", match_all=False, levels=[AlarmLevel.WARNING], labels={"plugin": "divide"}
        )

        assert self.dispatcher.match_receivers(alarm, [receiver]) == []

    def test_empty_filters_match(self, alarm):
        receiver = make_receiver("empty", match_all=False)

        assert self.dispatcher.match_receivers(alarm, [receiver]) == [receiver]


# ============================================
# Dispatching
# ============================================


class TestAlertDispatcher:
    @pytest.mark.asyncio
    async def test_send_to_receiver_success(self, alarm):
        registry = StrategyRegistry()
        registry.register(FakeStrategy())
        dispatcher = AlertDispatcher(registry)
        receiver = make_receiver("ok")

        result = await dispatcher.send_to_receiver(receiver, alarm)

        assert result == DeliveryResult(receiver.id, ChannelType.WEWORK_ROBOT, True)
        assert result.error_code is None

    @pytest.mark.asyncio
    async def test_send_to_receiver_failure_is_a_result(self, alarm):
        registry = StrategyRegistry()
        registry.register(FakeStrategy(fail_for={"bad"}))
        dispatcher = AlertDispatcher(registry)

        result = await dispatcher.send_to_receiver(make_receiver("bad"), alarm)

        assert result.success is False
        assert result.error_code == "N003"
        assert result.to_dict()["error"] == "[Fake Notify Error] invalid key"

    @pytest.mark.asyncio
    async def test_unsupported_channel_is_a_result(self, alarm):
        dispatcher = AlertDispatcher(StrategyRegistry())

        result = await dispatcher.send_to_receiver(make_receiver("x"), alarm)

        assert result.success is False
        assert isinstance(result.error, UnsupportedChannelError)

    @pytest.mark.asyncio
    async def test_failure_isolation(self, alarm):
        strategy = FakeStrategy(fail_for={"bad"}, crash_for={"crash"})
        registry = StrategyRegistry()
        registry.register(strategy)
        dispatcher = AlertDispatcher(registry)
        receivers = [make_receiver("first"), make_receiver("bad"), make_receiver("crash"), make_receiver("last")]

        results = await dispatcher.dispatch(alarm, receivers)

        assert [r.success for r in results] == [True, False, False, True]
        assert [r.receiver_id for r in results] == [r.id for r in receivers]
        assert sorted(strategy.delivered) == ["first", "last"]
        assert results[2].error.message == "strategy bug"

    @pytest.mark.asyncio
    async def test_dispatch_routes_by_channel_type(self, alarm):
        wework = FakeStrategy(ChannelType.WEWORK_ROBOT)
        slack = FakeStrategy(ChannelType.SLACK_WEBHOOK)
        registry = StrategyRegistry()
        registry.register(wework)
        registry.register(slack)
        dispatcher = AlertDispatcher(registry)

        await dispatcher.dispatch(
            alarm, [make_receiver("w"), make_receiver("s", ChannelType.SLACK_WEBHOOK)]
        )

        assert wework.delivered == ["w"]
        assert slack.delivered == ["s"]

    @pytest.mark.asyncio
    async def test_dispatch_defaults_to_store(self, alarm):
        strategy = FakeStrategy()
        registry = StrategyRegistry()
        registry.register(strategy)
        store = ReceiverStore()
        store.add(AlertReceiverCreate(name="stored", type=ChannelType.WEWORK_ROBOT, wechat_id="k"))
        store.add(AlertReceiverCreate(name="disabled", type=ChannelType.WEWORK_ROBOT, enabled=False))
        dispatcher = AlertDispatcher(registry, store)

        results = await dispatcher.dispatch(alarm)

        assert len(results) == 1
        assert strategy.delivered == ["stored"]

    @pytest.mark.asyncio
    async def test_dispatch_without_receivers(self, alarm):
        dispatcher = AlertDispatcher(StrategyRegistry())

        assert await dispatcher.dispatch(alarm) == []
