"""
Named message templates for alarm notifications.

Each channel strategy asks for one template by name; the renderer fills it
from the alarm fields. Templates use ``str.format`` placeholders:

    {title} {content} {level} {level_color} {trigger_time} {labels}
    {label_lines} {console_url}
"""

import html
from typing import Any, Dict, Iterable, Mapping, Optional

from alert_notify.core import get_logger
from alert_notify.exceptions import TemplateRenderError
from alert_notify.models import AlarmContent, AlarmLevel

logger = get_logger(__name__)


TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

LEVEL_COLORS: Dict[AlarmLevel, str] = {
    AlarmLevel.CRITICAL: "#e74c3c",
    AlarmLevel.WARNING: "#f39c12",
    AlarmLevel.INFO: "#3498db",
}


DEFAULT_TEMPLATES: Dict[str, str] = {
    "alertNotifyWeWorkRobot": (
        "**[Alert Notify] {title}**\n"
        "> Level: <font color=\"warning\">{level}</font>\n"
        "> Trigger Time: {trigger_time}\n"
        "> Content: {content}\n"
        "{label_lines}"
        "[Console]({console_url})"
    ),
    "alertNotifyDingTalkRobot": (
        "#### [Alert Notify] {title}\n"
        "- **Level**: <font color=\"{level_color}\">{level}</font>\n"
        "- **Trigger Time**: {trigger_time}\n"
        "- **Content**: {content}\n"
        "{label_lines}"
        "\n[Console]({console_url})"
    ),
    "alertNotifySlack": (
        "*[Alert Notify] {title}*\n"
        "Level: {level}\n"
        "Trigger Time: {trigger_time}\n"
        "Content: {content}\n"
        "Labels: {labels}\n"
        "<{console_url}|Console>"
    ),
    "alertNotifyDiscord": (
        "**Level**: {level}\n"
        "**Trigger Time**: {trigger_time}\n"
        "**Content**: {content}\n"
        "**Labels**: {labels}"
    ),
    "alertNotifyCustom": (
        "[Alert Notify] {title}\n"
        "Level: {level}\n"
        "Trigger Time: {trigger_time}\n"
        "Content: {content}\n"
        "Labels: {labels}"
    ),
    "mailAlarm": (
        "<html><body style=\"font-family: Arial, sans-serif;\">"
        "<div style=\"border-left: 4px solid {level_color}; padding: 12px;\">"
        "<h3 style=\"color: {level_color}; margin: 0 0 8px 0;\">[Alert Notify] {title}</h3>"
        "<p><strong>Level:</strong> {level}</p>"
        "<p><strong>Trigger Time:</strong> {trigger_time}</p>"
        "<p style=\"white-space: pre-wrap;\"><strong>Content:</strong> {content}</p>"
        "<p><strong>Labels:</strong> {labels}</p>"
        "</div>"
        "<p style=\"color: #666; font-size: 12px;\"><a href=\"{console_url}\">Console</a></p>"
        "</body></html>"
    ),
}

# Alarm fields are HTML-escaped before they are placed in these templates
HTML_TEMPLATES = frozenset({"mailAlarm"})


class TemplateRenderer:
    """
    Render a named template with the fields of an alarm.

    Stateless after construction and safe to share between concurrent sends.
    """

    def __init__(
        self,
        templates: Optional[Mapping[str, str]] = None,
        console_url: str = "http://localhost:9095",
        html_templates: Iterable[str] = HTML_TEMPLATES,
    ):
        self._templates: Dict[str, str] = dict(DEFAULT_TEMPLATES)
        if templates:
            self._templates.update(templates)
        self._html_templates = frozenset(html_templates)
        self._console_url = console_url

    def template_names(self) -> list:
        return sorted(self._templates)

    def render(self, template_name: str, alarm: AlarmContent) -> str:
        """
        Render ``template_name`` for ``alarm``.

        Raises:
            TemplateRenderError: the template is unknown or references a field
                the alarm context does not provide.
        """
        template = self._templates.get(template_name)
        if template is None:
            raise TemplateRenderError(template_name, "template not found")

        try:
            context = self._build_context(alarm)
            if template_name in self._html_templates:
                context = {
                    k: html.escape(v) if isinstance(v, str) else v
                    for k, v in context.items()
                }
            return template.format_map(context)
        except (KeyError, IndexError, ValueError, AttributeError) as e:
            logger.warning(
                "Template rendering failed",
                template=template_name,
                error=str(e),
            )
            raise TemplateRenderError(template_name, f"incompatible fields: {e}", cause=e) from e

    def _build_context(self, alarm: AlarmContent) -> Dict[str, Any]:
        labels = ", ".join(f"{k}={v}" for k, v in sorted(alarm.labels.items())) or "-"
        label_lines = "".join(
            f"> {k}: {v}\n" for k, v in sorted(alarm.labels.items())
        )
        return {
            "title": alarm.title,
            "content": alarm.content,
            "level": alarm.level.name,
            "level_value": int(alarm.level),
            "level_color": LEVEL_COLORS.get(alarm.level, "#95a5a6"),
            "trigger_time": alarm.date_created.strftime(TIME_FORMAT),
            "labels": labels,
            "label_lines": label_lines,
            "console_url": self._console_url,
        }
