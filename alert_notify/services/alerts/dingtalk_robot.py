"""
DingTalk group robot notifications.

Same acknowledgment shape as the WeWork robot; the markdown body also
carries a title that DingTalk shows in the conversation list.
"""

from alert_notify.core import get_logger, redact_secret
from alert_notify.core.config import DINGTALK_WEBHOOK_URL
from alert_notify.exceptions import DeliveryFailureKind, NotificationDeliveryError
from alert_notify.models import (
    AlarmContent,
    AlertReceiver,
    ChannelType,
    DingTalkMarkdown,
    DingTalkWebhookPayload,
)
from .base import check_status, delivery_errors, parse_robot_ack, require_address
from .templates import TemplateRenderer
from .transport import JSON_HEADERS, TransportClient

logger = get_logger(__name__)


class DingTalkRobotStrategy:
    """Send alarms through a DingTalk robot identified by its access token."""

    CHANNEL_TAG = "DingTalk Notify Error"
    TEMPLATE_NAME = "alertNotifyDingTalkRobot"
    SUCCESS_CODE = 0

    def __init__(
        self,
        renderer: TemplateRenderer,
        transport: TransportClient,
        webhook_url: str = DINGTALK_WEBHOOK_URL,
    ):
        self._renderer = renderer
        self._transport = transport
        self._webhook_url = webhook_url

    def type(self) -> ChannelType:
        return ChannelType.DINGTALK_ROBOT

    def template_name(self) -> str:
        return self.TEMPLATE_NAME

    async def send(self, receiver: AlertReceiver, alarm: AlarmContent) -> None:
        with delivery_errors(self.CHANNEL_TAG):
            token = require_address(self.CHANNEL_TAG, receiver.access_token, "access_token")
            text = self._renderer.render(self.template_name(), alarm)
            body = DingTalkWebhookPayload(
                markdown=DingTalkMarkdown(title=alarm.title, text=text)
            ).model_dump_json()

            url = self._webhook_url + token
            safe_url = self._webhook_url + redact_secret(token)
            logger.debug("Sending DingTalk robot message", url=safe_url, receiver_id=receiver.id)

            response = await self._transport.post(url, content=body, headers=JSON_HEADERS)
            check_status(self.CHANNEL_TAG, response)

            ack = parse_robot_ack(self.CHANNEL_TAG, response)
            if ack.errcode != self.SUCCESS_CODE:
                logger.warning(
                    "DingTalk robot rejected message",
                    receiver_id=receiver.id,
                    errcode=ack.errcode,
                    errmsg=ack.errmsg,
                )
                raise NotificationDeliveryError(
                    self.CHANNEL_TAG,
                    ack.errmsg or f"errcode {ack.errcode}",
                    DeliveryFailureKind.PROVIDER_REJECTION,
                    status_code=response.status_code,
                )

            logger.debug("DingTalk robot message sent", url=safe_url, receiver_id=receiver.id)
