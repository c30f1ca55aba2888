"""Pydantic models for alarms, receivers, API schemas and channel payloads."""

from .schemas import (
    ChannelType,
    AlarmLevel,
    AlarmContent,
    AlertReceiverBase,
    AlertReceiverCreate,
    AlertReceiverUpdate,
    AlertReceiver,
    ReceiverTestRequest,
    DeliveryResultResponse,
    AlarmReportResponse,
    SECRET_RECEIVER_FIELDS,
)

from .payloads import (
    MarkdownContent,
    WeWorkWebhookPayload,
    DingTalkMarkdown,
    DingTalkWebhookPayload,
    RobotNotifyResponse,
    SlackWebhookPayload,
    DiscordEmbed,
    DiscordEmbedFooter,
    DiscordWebhookPayload,
)

__all__ = [
    "ChannelType",
    "AlarmLevel",
    "AlarmContent",
    "AlertReceiverBase",
    "AlertReceiverCreate",
    "AlertReceiverUpdate",
    "AlertReceiver",
    "ReceiverTestRequest",
    "DeliveryResultResponse",
    "AlarmReportResponse",
    "SECRET_RECEIVER_FIELDS",
    "MarkdownContent",
    "WeWorkWebhookPayload",
    "DingTalkMarkdown",
    "DingTalkWebhookPayload",
    "RobotNotifyResponse",
    "SlackWebhookPayload",
    "DiscordEmbed",
    "DiscordEmbedFooter",
    "DiscordWebhookPayload",
]
