"""
Pydantic schemas for alarms, receivers and API request/response models.

These models define the structure of data for the REST API,
providing validation, serialization, and OpenAPI documentation.
"""

import uuid
from datetime import datetime, timezone
from enum import IntEnum
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, ConfigDict, Field

from alert_notify.core.logging_config import redact_secret


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================
# Enums
# ============================================================

class ChannelType(IntEnum):
    """
    Notification channel routing key.

    The numeric values are stored in receiver configuration and must stay stable.
    """
    EMAIL = 1
    WEBHOOK = 2
    WEWORK_ROBOT = 4
    DINGTALK_ROBOT = 5
    SLACK_WEBHOOK = 8
    DISCORD_WEBHOOK = 9


class AlarmLevel(IntEnum):
    """Alarm severity, lower is more severe."""
    CRITICAL = 0
    WARNING = 1
    INFO = 2


# Fields of AlertReceiver that hold credentials or addresses
SECRET_RECEIVER_FIELDS = (
    "wechat_id",
    "access_token",
    "hook_url",
    "slack_webhook_url",
    "discord_webhook_url",
)


# ============================================================
# Alarm Models
# ============================================================

class AlarmContent(BaseModel):
    """
    A fired alarm as produced by the alerting engine.

    Immutable; strategies only read the fields they need for rendering.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "title": "Gateway error rate above 5%",
                    "content": "divide plugin upstream `order-service` answered 503 for 6.2% of requests",
                    "level": 0,
                    "labels": {"plugin": "divide", "service": "order-service"},
                }
            ]
        },
    )

    title: str = Field(..., min_length=1, description="Short alarm headline")
    content: str = Field("", description="Alarm description")
    level: AlarmLevel = Field(AlarmLevel.WARNING, description="0 critical, 1 warning, 2 info")
    labels: Dict[str, str] = Field(default_factory=dict, description="Free-form alarm labels")
    date_created: datetime = Field(default_factory=utc_now, description="Time the alarm fired")
    date_updated: Optional[datetime] = Field(None, description="Time the alarm was last re-evaluated")


# ============================================================
# Receiver Models
# ============================================================

class AlertReceiverBase(BaseModel):
    """
    Where and when to deliver alarms for one channel.

    Only the address field matching ``type`` is used by the channel strategy:
    WeWork robot uses ``wechat_id``, DingTalk robot ``access_token``, email
    ``email``, generic webhook ``hook_url``, Slack ``slack_webhook_url`` and
    Discord ``discord_webhook_url``.
    """
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    type: ChannelType = Field(..., description="Channel type code")
    enabled: bool = Field(True, description="Disabled receivers never get alarms")
    match_all: bool = Field(True, description="Receive every alarm regardless of level and labels")
    levels: List[AlarmLevel] = Field(default_factory=list, description="Accepted levels when match_all is false")
    labels: Dict[str, str] = Field(default_factory=dict, description="Labels an alarm must carry when match_all is false")

    wechat_id: Optional[str] = Field(None, description="WeWork robot webhook key")
    access_token: Optional[str] = Field(None, description="DingTalk robot access token")
    email: Optional[str] = Field(None, description="Email address")
    hook_url: Optional[str] = Field(None, description="Generic webhook URL")
    slack_webhook_url: Optional[str] = Field(None, description="Slack incoming webhook URL")
    discord_webhook_url: Optional[str] = Field(None, description="Discord webhook URL")


class AlertReceiverCreate(AlertReceiverBase):
    """Request model for registering a receiver."""
    pass


class AlertReceiverUpdate(BaseModel):
    """Request model for partial receiver updates; omitted fields stay unchanged."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[ChannelType] = None
    enabled: Optional[bool] = None
    match_all: Optional[bool] = None
    levels: Optional[List[AlarmLevel]] = None
    labels: Optional[Dict[str, str]] = None
    wechat_id: Optional[str] = None
    access_token: Optional[str] = None
    email: Optional[str] = None
    hook_url: Optional[str] = None
    slack_webhook_url: Optional[str] = None
    discord_webhook_url: Optional[str] = None


class AlertReceiver(AlertReceiverBase):
    """A stored receiver."""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex, description="Receiver identifier")
    date_created: datetime = Field(default_factory=utc_now)
    date_updated: datetime = Field(default_factory=utc_now)

    def to_public_dict(self) -> Dict[str, Any]:
        """Serialize for API responses with credentials masked."""
        data = self.model_dump(mode="json")
        for field in SECRET_RECEIVER_FIELDS:
            if data.get(field):
                data[field] = redact_secret(data[field])
        return data


# ============================================================
# API Request/Response Models
# ============================================================

class ReceiverTestRequest(BaseModel):
    """Send a fixed test alarm to one receiver."""
    receiver_id: str = Field(..., description="Receiver to test")
    title: str = Field("Alert notification test", description="Test alarm title")
    content: str = Field(
        "This is a test message, the receiver is configured correctly.",
        description="Test alarm content",
    )


class DeliveryResultResponse(BaseModel):
    """Outcome of one delivery attempt."""
    receiver_id: str
    channel: ChannelType
    success: bool
    error_code: Optional[str] = None
    error: Optional[str] = None


class AlarmReportResponse(BaseModel):
    """Outcome of dispatching one alarm to every matching receiver."""
    sent: int
    failed: int
    total: int
    results: List[DeliveryResultResponse]
