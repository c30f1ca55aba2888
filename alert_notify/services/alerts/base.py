"""
Channel strategy contract and the failure handling every strategy shares.

A strategy owns one channel type and one template. It holds references to
the template renderer and the transport client instead of inheriting them,
and reports every failure as a NotificationDeliveryError.
"""

from contextlib import contextmanager
from typing import Iterator, Optional, Protocol, Tuple, runtime_checkable

import httpx
from pydantic import ValidationError

from alert_notify.exceptions import (
    DeliveryFailureKind,
    NotificationDeliveryError,
    TemplateRenderError,
)
from alert_notify.models import AlarmContent, AlertReceiver, ChannelType, RobotNotifyResponse


@runtime_checkable
class AlertNotifyStrategy(Protocol):
    """
    Notification channel interface.

    - type() is the routing key the dispatcher selects strategies by
    - template_name() names the template used to render alarm content
    - send() returns only when the provider acknowledged the message and
      raises NotificationDeliveryError for every other outcome
    """

    def type(self) -> ChannelType: ...

    def template_name(self) -> str: ...

    async def send(self, receiver: AlertReceiver, alarm: AlarmContent) -> None: ...


@contextmanager
def delivery_errors(channel_tag: str) -> Iterator[None]:
    """
    Re-raise anything escaping the block as a NotificationDeliveryError.

    Errors that already are delivery errors pass through unchanged. A
    template or payload model that cannot be built is RENDERING; anything
    not recognized falls back to TRANSPORT.
    """
    try:
        yield
    except NotificationDeliveryError:
        raise
    except TemplateRenderError as e:
        raise NotificationDeliveryError(
            channel_tag, e.message, DeliveryFailureKind.RENDERING, cause=e
        ) from e
    except ValidationError as e:
        raise NotificationDeliveryError(
            channel_tag,
            f"Invalid {e.title} payload: {e.error_count()} validation error(s)",
            DeliveryFailureKind.RENDERING,
            cause=e,
        ) from e
    except httpx.TimeoutException as e:
        raise NotificationDeliveryError(
            channel_tag, f"Request timed out: {e}", DeliveryFailureKind.TRANSPORT, cause=e
        ) from e
    except httpx.HTTPError as e:
        raise NotificationDeliveryError(
            channel_tag, f"{type(e).__name__}: {e}", DeliveryFailureKind.TRANSPORT, cause=e
        ) from e
    except Exception as e:
        raise NotificationDeliveryError(
            channel_tag, str(e) or type(e).__name__, DeliveryFailureKind.TRANSPORT, cause=e
        ) from e


def require_address(channel_tag: str, value: Optional[str], field: str) -> str:
    """Return the receiver address or fail before anything is sent."""
    if not value or not value.strip():
        raise NotificationDeliveryError(
            channel_tag,
            f"Receiver has no {field} configured",
            DeliveryFailureKind.INVALID_RECEIVER,
        )
    return value.strip()


def check_status(
    channel_tag: str,
    response: httpx.Response,
    accepted: Tuple[int, ...] = (200,),
) -> None:
    """Fail on any status outside ``accepted`` without interpreting the body."""
    if response.status_code not in accepted:
        raise NotificationDeliveryError(
            channel_tag,
            f"Http StatusCode {response.status_code}",
            DeliveryFailureKind.TRANSPORT,
            status_code=response.status_code,
        )


def parse_robot_ack(channel_tag: str, response: httpx.Response) -> RobotNotifyResponse:
    """Parse a robot webhook acknowledgment; an empty or invalid body is a failure."""
    if not response.content:
        raise NotificationDeliveryError(
            channel_tag,
            "Empty response body",
            DeliveryFailureKind.MALFORMED_RESPONSE,
            status_code=response.status_code,
        )
    try:
        return RobotNotifyResponse.model_validate_json(response.content)
    except ValidationError as e:
        raise NotificationDeliveryError(
            channel_tag,
            f"Invalid response body: {response.text[:200]!r}",
            DeliveryFailureKind.MALFORMED_RESPONSE,
            status_code=response.status_code,
            cause=e,
        ) from e
