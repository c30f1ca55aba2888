"""
Slack incoming webhook notifications.

Slack answers a plain-text ``ok`` body with status 200 when it accepted
the message.
"""

from alert_notify.core import get_logger
from alert_notify.exceptions import DeliveryFailureKind, NotificationDeliveryError
from alert_notify.models import AlarmContent, AlarmLevel, AlertReceiver, ChannelType, SlackWebhookPayload
from .base import check_status, delivery_errors, require_address
from .templates import TemplateRenderer
from .transport import JSON_HEADERS, TransportClient

logger = get_logger(__name__)

SLACK_TEXT_LIMIT = 3000


class SlackWebhookStrategy:
    """Send alarms to a Slack channel through its incoming webhook URL."""

    CHANNEL_TAG = "Slack Notify Error"
    TEMPLATE_NAME = "alertNotifySlack"
    SUCCESS_BODY = "ok"

    def __init__(self, renderer: TemplateRenderer, transport: TransportClient):
        self._renderer = renderer
        self._transport = transport

    def type(self) -> ChannelType:
        return ChannelType.SLACK_WEBHOOK

    def template_name(self) -> str:
        return self.TEMPLATE_NAME

    async def send(self, receiver: AlertReceiver, alarm: AlarmContent) -> None:
        with delivery_errors(self.CHANNEL_TAG):
            url = require_address(self.CHANNEL_TAG, receiver.slack_webhook_url, "slack_webhook_url")
            text = self._renderer.render(self.template_name(), alarm)
            body = SlackWebhookPayload(
                text=f"{self._get_emoji(alarm.level)} {text}"[:SLACK_TEXT_LIMIT]
            ).model_dump_json()

            response = await self._transport.post(url, content=body, headers=JSON_HEADERS)
            check_status(self.CHANNEL_TAG, response)

            if response.text.strip() != self.SUCCESS_BODY:
                logger.warning(
                    "Slack webhook rejected message",
                    receiver_id=receiver.id,
                    response=response.text[:200],
                )
                raise NotificationDeliveryError(
                    self.CHANNEL_TAG,
                    response.text[:200] or "Empty response body",
                    DeliveryFailureKind.PROVIDER_REJECTION
                    if response.text
                    else DeliveryFailureKind.MALFORMED_RESPONSE,
                    status_code=response.status_code,
                )

            logger.debug("Slack message sent", receiver_id=receiver.id, level=alarm.level.name)

    def _get_emoji(self, level: AlarmLevel) -> str:
        """Get emoji for alarm level."""
        emojis = {
            AlarmLevel.INFO: ":information_source:",
            AlarmLevel.WARNING: ":warning:",
            AlarmLevel.CRITICAL: ":rotating_light:",
        }
        return emojis.get(level, ":loudspeaker:")
