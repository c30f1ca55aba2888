"""
Email notifications via SMTP.

The HTML body comes from the ``mailAlarm`` template, with a plain text
alternative. smtplib is blocking, so the send runs in the default thread
pool executor.
"""

import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from alert_notify.core import NotifySettings, get_logger
from alert_notify.exceptions import DeliveryFailureKind, NotificationDeliveryError
from alert_notify.models import AlarmContent, AlertReceiver, ChannelType
from .base import delivery_errors, require_address
from .templates import TemplateRenderer

logger = get_logger(__name__)


class EmailStrategy:
    """
    SMTP email strategy.

    SMTP settings come from NotifySettings (SMTP_HOST, SMTP_PORT,
    SMTP_USER, SMTP_PASSWORD, SMTP_FROM, SMTP_USE_TLS); the recipient is
    the receiver's ``email``.
    """

    CHANNEL_TAG = "Email Notify Error"
    TEMPLATE_NAME = "mailAlarm"

    def __init__(self, renderer: TemplateRenderer, settings: NotifySettings):
        self._renderer = renderer
        self._settings = settings

    def type(self) -> ChannelType:
        return ChannelType.EMAIL

    def template_name(self) -> str:
        return self.TEMPLATE_NAME

    async def send(self, receiver: AlertReceiver, alarm: AlarmContent) -> None:
        with delivery_errors(self.CHANNEL_TAG):
            to_address = require_address(self.CHANNEL_TAG, receiver.email, "email")
            if not self._settings.email_enabled:
                raise NotificationDeliveryError(
                    self.CHANNEL_TAG,
                    "SMTP host is not configured. Set SMTP_HOST to enable email alerts",
                    DeliveryFailureKind.TRANSPORT,
                )

            html_content = self._renderer.render(self.template_name(), alarm)
            msg = self._build_message(to_address, alarm, html_content)

            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self._send_sync, msg)

            logger.info(
                "Alert email sent",
                receiver_id=receiver.id,
                level=alarm.level.name,
                title=alarm.title,
            )

    def _build_message(self, to_address: str, alarm: AlarmContent, html_content: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = f"[{alarm.level.name}] {alarm.title}"
        msg["From"] = self._settings.smtp_from or self._settings.smtp_user or ""
        msg["To"] = to_address

        text_content = f"{alarm.title}\n\n{alarm.content}"
        msg.attach(MIMEText(text_content, "plain", "utf-8"))
        msg.attach(MIMEText(html_content, "html", "utf-8"))
        return msg

    def _send_sync(self, msg: MIMEMultipart) -> None:
        """
        Synchronous email send (run in thread pool).

        Args:
            msg: Email message to send
        """
        timeout = self._settings.http_timeout_seconds
        with smtplib.SMTP(self._settings.smtp_host, self._settings.smtp_port, timeout=timeout) as server:
            if self._settings.smtp_use_tls:
                server.starttls()
            if self._settings.smtp_user:
                server.login(self._settings.smtp_user, self._settings.smtp_password or "")
            server.send_message(msg)
