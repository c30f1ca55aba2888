"""
Discord webhook notifications.

Uses Discord's embed format for rich message display. Discord returns
204 No Content on success, or 200 with the message when ``wait=true``.
"""

from alert_notify.core import get_logger
from alert_notify.models import (
    AlarmContent,
    AlarmLevel,
    AlertReceiver,
    ChannelType,
    DiscordEmbed,
    DiscordEmbedFooter,
    DiscordWebhookPayload,
)
from .base import check_status, delivery_errors, require_address
from .templates import TemplateRenderer
from .transport import JSON_HEADERS, TransportClient

logger = get_logger(__name__)


class DiscordWebhookStrategy:
    """Send alarms to a Discord channel through its webhook URL."""

    CHANNEL_TAG = "Discord Notify Error"
    TEMPLATE_NAME = "alertNotifyDiscord"
    ACCEPTED_STATUS = (200, 204)

    def __init__(self, renderer: TemplateRenderer, transport: TransportClient):
        self._renderer = renderer
        self._transport = transport

    def type(self) -> ChannelType:
        return ChannelType.DISCORD_WEBHOOK

    def template_name(self) -> str:
        return self.TEMPLATE_NAME

    async def send(self, receiver: AlertReceiver, alarm: AlarmContent) -> None:
        with delivery_errors(self.CHANNEL_TAG):
            url = require_address(self.CHANNEL_TAG, receiver.discord_webhook_url, "discord_webhook_url")
            description = self._renderer.render(self.template_name(), alarm)

            embed = DiscordEmbed(
                title=f"[Alert Notify] {alarm.title}"[:256],
                description=description[:4096],
                color=self._get_color_int(alarm.level),
                timestamp=alarm.date_created.isoformat(),
                footer=DiscordEmbedFooter(text=f"Level: {alarm.level.name}"),
            )
            body = DiscordWebhookPayload(embeds=[embed]).model_dump_json(exclude_none=True)

            response = await self._transport.post(url, content=body, headers=JSON_HEADERS)
            if response.status_code not in self.ACCEPTED_STATUS:
                logger.warning(
                    "Discord webhook failed",
                    receiver_id=receiver.id,
                    status_code=response.status_code,
                )
            check_status(self.CHANNEL_TAG, response, accepted=self.ACCEPTED_STATUS)

            logger.debug("Discord message sent", receiver_id=receiver.id, level=alarm.level.name)

    def _get_color_int(self, level: AlarmLevel) -> int:
        """Get embed color for alarm level."""
        colors = {
            AlarmLevel.INFO: 0x3498DB,
            AlarmLevel.WARNING: 0xF39C12,
            AlarmLevel.CRITICAL: 0xE74C3C,
        }
        return colors.get(level, 0x95A5A6)
