"""
Alert service package for multi-channel notifications.

Provides one strategy per notification channel:
- WeWork group robot
- DingTalk group robot
- Email (SMTP)
- Slack (Webhook)
- Discord (Webhook)
- Generic Webhook
"""

from .base import AlertNotifyStrategy
from .templates import TemplateRenderer, DEFAULT_TEMPLATES
from .transport import TransportClient
from .wework_robot import WeWorkRobotStrategy
from .dingtalk_robot import DingTalkRobotStrategy
from .email_client import EmailStrategy
from .slack_client import SlackWebhookStrategy
from .discord_client import DiscordWebhookStrategy
from .webhook_client import WebhookStrategy
from .registry import StrategyRegistry, build_default_registry
from .receiver_store import ReceiverStore
from .dispatcher import AlertDispatcher, DeliveryResult

__all__ = [
    "AlertNotifyStrategy",
    "TemplateRenderer",
    "DEFAULT_TEMPLATES",
    "TransportClient",
    "WeWorkRobotStrategy",
    "DingTalkRobotStrategy",
    "EmailStrategy",
    "SlackWebhookStrategy",
    "DiscordWebhookStrategy",
    "WebhookStrategy",
    "StrategyRegistry",
    "build_default_registry",
    "ReceiverStore",
    "AlertDispatcher",
    "DeliveryResult",
]
