"""
Channel type to strategy lookup.

The registry is built explicitly at startup and handed to the dispatcher;
there is no global strategy container.
"""

from typing import Dict, Iterator, List

from alert_notify.core import NotifySettings, get_logger
from alert_notify.exceptions import UnsupportedChannelError
from alert_notify.models import ChannelType
from .base import AlertNotifyStrategy
from .dingtalk_robot import DingTalkRobotStrategy
from .discord_client import DiscordWebhookStrategy
from .email_client import EmailStrategy
from .slack_client import SlackWebhookStrategy
from .templates import TemplateRenderer
from .transport import TransportClient
from .webhook_client import WebhookStrategy
from .wework_robot import WeWorkRobotStrategy

logger = get_logger(__name__)


class StrategyRegistry:
    """Holds at most one strategy per channel type."""

    def __init__(self):
        self._strategies: Dict[ChannelType, AlertNotifyStrategy] = {}

    def register(self, strategy: AlertNotifyStrategy) -> None:
        channel_type = strategy.type()
        if channel_type in self._strategies:
            raise ValueError(f"Strategy already registered for channel type {channel_type.name}")
        self._strategies[channel_type] = strategy
        logger.debug(
            "Notification strategy registered",
            channel_type=channel_type.name,
            template=strategy.template_name(),
        )

    def get(self, channel_type: int) -> AlertNotifyStrategy:
        """
        Return the strategy for ``channel_type``.

        Raises:
            UnsupportedChannelError: no strategy handles the type
        """
        try:
            return self._strategies[ChannelType(channel_type)]
        except (KeyError, ValueError):
            raise UnsupportedChannelError(int(channel_type)) from None

    def types(self) -> List[ChannelType]:
        return sorted(self._strategies)

    def __contains__(self, channel_type: object) -> bool:
        try:
            return ChannelType(channel_type) in self._strategies
        except ValueError:
            return False

    def __len__(self) -> int:
        return len(self._strategies)

    def __iter__(self) -> Iterator[AlertNotifyStrategy]:
        return iter(self._strategies.values())


def build_default_registry(
    renderer: TemplateRenderer,
    transport: TransportClient,
    settings: NotifySettings,
) -> StrategyRegistry:
    """Register every built-in channel strategy."""
    registry = StrategyRegistry()
    registry.register(WeWorkRobotStrategy(renderer, transport, settings.wework_webhook_url))
    registry.register(DingTalkRobotStrategy(renderer, transport, settings.dingtalk_webhook_url))
    registry.register(SlackWebhookStrategy(renderer, transport))
    registry.register(DiscordWebhookStrategy(renderer, transport))
    registry.register(WebhookStrategy(renderer, transport))
    registry.register(EmailStrategy(renderer, settings))

    logger.info(
        "Notification strategies ready",
        channels=[t.name for t in registry.types()],
        email_enabled=settings.email_enabled,
    )
    return registry
