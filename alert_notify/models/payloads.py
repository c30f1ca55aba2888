"""
Wire models for channel webhooks.

Outbound payloads are built completely before a request is issued, and
inbound acknowledgments are parsed once and discarded.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt


# ============================================================
# Robot webhooks (WeWork / DingTalk)
# ============================================================

class MarkdownContent(BaseModel):
    """WeWork markdown body."""
    content: str


class WeWorkWebhookPayload(BaseModel):
    """
    WeWork group robot message.

    Serializes to ``{"msgtype":"markdown","markdown":{"content":"..."}}``.
    """
    msgtype: Literal["markdown"] = "markdown"
    markdown: MarkdownContent


class DingTalkMarkdown(BaseModel):
    """DingTalk markdown body; ``title`` is shown in the conversation list."""
    title: str
    text: str


class DingTalkWebhookPayload(BaseModel):
    msgtype: Literal["markdown"] = "markdown"
    markdown: DingTalkMarkdown


class RobotNotifyResponse(BaseModel):
    """
    Acknowledgment returned by robot webhooks.

    ``errcode`` 0 means the message was accepted. It must be a JSON integer;
    strings, booleans and floats are rejected as malformed.
    """
    model_config = ConfigDict(extra="ignore")

    errcode: StrictInt
    errmsg: str = ""


# ============================================================
# Slack / Discord
# ============================================================

class SlackWebhookPayload(BaseModel):
    text: str


class DiscordEmbedFooter(BaseModel):
    text: str


class DiscordEmbed(BaseModel):
    title: str = Field(..., max_length=256)
    description: str = Field(..., max_length=4096)
    color: int
    timestamp: Optional[str] = None
    footer: Optional[DiscordEmbedFooter] = None


class DiscordWebhookPayload(BaseModel):
    username: str = "Alert Notify"
    embeds: List[DiscordEmbed]
