"""
Service settings read from environment variables.

Settings are read once at startup into an immutable object and handed to
whatever needs them; nothing reads the environment on the send path.
"""

import os
from dataclasses import dataclass
from typing import Optional


WEWORK_WEBHOOK_URL = "https://qyapi.weixin.qq.com/cgi-bin/webhook/send?key="
DINGTALK_WEBHOOK_URL = "https://oapi.dingtalk.com/robot/send?access_token="


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class NotifySettings:
    """
    Notification service configuration.

    Environment variables:
    - ENV: development | production (production hides error details in API responses)
    - ALERT_HTTP_TIMEOUT: timeout in seconds for every outbound webhook call
    - WEWORK_WEBHOOK_URL / DINGTALK_WEBHOOK_URL: robot base URLs, the receiver token is appended
    - SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASSWORD, SMTP_FROM, SMTP_USE_TLS: email channel
    - ALERT_CONSOLE_URL: link rendered at the bottom of every message
    """

    env: str = "development"
    http_timeout_seconds: float = 10.0
    wework_webhook_url: str = WEWORK_WEBHOOK_URL
    dingtalk_webhook_url: str = DINGTALK_WEBHOOK_URL
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_from: Optional[str] = None
    smtp_use_tls: bool = True
    console_url: str = "http://localhost:9095"

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def email_enabled(self) -> bool:
        return bool(self.smtp_host)

    @classmethod
    def from_env(cls) -> "NotifySettings":
        smtp_user = os.getenv("SMTP_USER")
        return cls(
            env=os.getenv("ENV", "development"),
            http_timeout_seconds=_get_float("ALERT_HTTP_TIMEOUT", 10.0),
            wework_webhook_url=os.getenv("WEWORK_WEBHOOK_URL", WEWORK_WEBHOOK_URL),
            dingtalk_webhook_url=os.getenv("DINGTALK_WEBHOOK_URL", DINGTALK_WEBHOOK_URL),
            smtp_host=os.getenv("SMTP_HOST"),
            smtp_port=_get_int("SMTP_PORT", 587),
            smtp_user=smtp_user,
            smtp_password=os.getenv("SMTP_PASSWORD"),
            smtp_from=os.getenv("SMTP_FROM", smtp_user),
            smtp_use_tls=_get_bool("SMTP_USE_TLS", True),
            console_url=os.getenv("ALERT_CONSOLE_URL", "http://localhost:9095"),
        )
