"""
Generic webhook notifications.

Posts the alarm as JSON to the receiver's own endpoint together with the
rendered message. Any 2xx status counts as delivered.
"""

from typing import Any, Dict

from alert_notify.core import get_logger
from alert_notify.models import AlarmContent, AlertReceiver, ChannelType
from .base import check_status, delivery_errors, require_address
from .templates import TemplateRenderer
from .transport import JSON_HEADERS, TransportClient

logger = get_logger(__name__)


class WebhookStrategy:
    """Send alarms to a custom HTTP endpoint."""

    CHANNEL_TAG = "WebHook Notify Error"
    TEMPLATE_NAME = "alertNotifyCustom"
    ACCEPTED_STATUS = tuple(range(200, 300))

    def __init__(self, renderer: TemplateRenderer, transport: TransportClient):
        self._renderer = renderer
        self._transport = transport

    def type(self) -> ChannelType:
        return ChannelType.WEBHOOK

    def template_name(self) -> str:
        return self.TEMPLATE_NAME

    async def send(self, receiver: AlertReceiver, alarm: AlarmContent) -> None:
        with delivery_errors(self.CHANNEL_TAG):
            url = require_address(self.CHANNEL_TAG, receiver.hook_url, "hook_url")
            payload = self._build_payload(alarm, self._renderer.render(self.template_name(), alarm))

            response = await self._transport.post(url, json=payload, headers=JSON_HEADERS)
            if not 200 <= response.status_code < 300:
                logger.warning(
                    "Webhook returned non-success status",
                    receiver_id=receiver.id,
                    status_code=response.status_code,
                )
            check_status(self.CHANNEL_TAG, response, accepted=self.ACCEPTED_STATUS)

            logger.debug("Alarm sent to webhook", receiver_id=receiver.id, status_code=response.status_code)

    def _build_payload(self, alarm: AlarmContent, message: str) -> Dict[str, Any]:
        return {
            "alert": alarm.model_dump(mode="json"),
            "message": message,
        }
