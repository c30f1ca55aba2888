"""
WeWork (enterprise WeChat) group robot notifications.

The robot webhook accepts a markdown message and answers with an
``errcode``/``errmsg`` acknowledgment, even when it rejects the message.
"""

from alert_notify.core import get_logger, redact_secret
from alert_notify.core.config import WEWORK_WEBHOOK_URL
from alert_notify.exceptions import DeliveryFailureKind, NotificationDeliveryError
from alert_notify.models import (
    AlarmContent,
    AlertReceiver,
    ChannelType,
    MarkdownContent,
    WeWorkWebhookPayload,
)
from .base import check_status, delivery_errors, parse_robot_ack, require_address
from .templates import TemplateRenderer
from .transport import JSON_HEADERS, TransportClient

logger = get_logger(__name__)


class WeWorkRobotStrategy:
    """
    Send alarms through a WeWork group robot.

    The receiver's ``wechat_id`` is the robot key; it is appended to the
    webhook base URL and never logged in clear text.
    """

    CHANNEL_TAG = "WeWork Notify Error"
    TEMPLATE_NAME = "alertNotifyWeWorkRobot"
    SUCCESS_CODE = 0

    def __init__(
        self,
        renderer: TemplateRenderer,
        transport: TransportClient,
        webhook_url: str = WEWORK_WEBHOOK_URL,
    ):
        self._renderer = renderer
        self._transport = transport
        self._webhook_url = webhook_url

    def type(self) -> ChannelType:
        return ChannelType.WEWORK_ROBOT

    def template_name(self) -> str:
        return self.TEMPLATE_NAME

    async def send(self, receiver: AlertReceiver, alarm: AlarmContent) -> None:
        with delivery_errors(self.CHANNEL_TAG):
            key = require_address(self.CHANNEL_TAG, receiver.wechat_id, "wechat_id")
            content = self._renderer.render(self.template_name(), alarm)
            body = WeWorkWebhookPayload(
                markdown=MarkdownContent(content=content)
            ).model_dump_json()

            url = self._webhook_url + key
            safe_url = self._webhook_url + redact_secret(key)
            logger.debug("Sending WeWork robot message", url=safe_url, receiver_id=receiver.id)

            response = await self._transport.post(url, content=body, headers=JSON_HEADERS)

            if response.status_code != 200:
                logger.warning(
                    "WeWork robot webhook failed",
                    receiver_id=receiver.id,
                    status_code=response.status_code,
                )
            check_status(self.CHANNEL_TAG, response)

            ack = parse_robot_ack(self.CHANNEL_TAG, response)
            if ack.errcode != self.SUCCESS_CODE:
                logger.warning(
                    "WeWork robot rejected message",
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

            logger.debug("WeWork robot message sent", url=safe_url, receiver_id=receiver.id)
