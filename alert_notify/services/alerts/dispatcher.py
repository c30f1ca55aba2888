"""
Central alert dispatching service.

Selects the receivers an alarm applies to and delivers it to each of them
through the strategy registered for the receiver's channel type.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from alert_notify.core import get_logger
from alert_notify.exceptions import (
    AlertSystemException,
    NotificationDeliveryError,
    UnsupportedChannelError,
)
from alert_notify.models import (
    AlarmContent,
    AlertReceiver,
    ChannelType,
    DeliveryResultResponse,
)
from .receiver_store import ReceiverStore
from .registry import StrategyRegistry

logger = get_logger(__name__)

__all__ = ["AlertDispatcher", "DeliveryResult"]


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of delivering one alarm to one receiver."""

    receiver_id: str
    channel: ChannelType
    success: bool
    error: Optional[AlertSystemException] = None

    @property
    def error_code(self) -> Optional[str]:
        return self.error.error_code if self.error else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "receiver_id": self.receiver_id,
            "channel": int(self.channel),
            "success": self.success,
            "error_code": self.error_code,
            "error": self.error.message if self.error else None,
        }

    def to_response(self) -> DeliveryResultResponse:
        return DeliveryResultResponse(**self.to_dict())


class AlertDispatcher:
    """
    Alert dispatching service.

    Features:
    - Receiver matching on level and labels
    - Parallel delivery to all matching receivers
    - Failures reported per receiver, never raised
    """

    def __init__(self, registry: StrategyRegistry, store: Optional[ReceiverStore] = None):
        self.registry = registry
        self.store = store

    async def send_to_receiver(self, receiver: AlertReceiver, alarm: AlarmContent) -> DeliveryResult:
        """Deliver ``alarm`` to a single receiver and report the outcome."""
        try:
            strategy = self.registry.get(receiver.type)
            await strategy.send(receiver, alarm)
        except (NotificationDeliveryError, UnsupportedChannelError) as e:
            logger.warning(
                "Alert delivery failed",
                receiver_id=receiver.id,
                channel_type=receiver.type.name,
                error_code=e.error_code,
                error=e.message,
            )
            return DeliveryResult(receiver.id, receiver.type, False, e)

        return DeliveryResult(receiver.id, receiver.type, True)

    def match_receivers(
        self,
        alarm: AlarmContent,
        receivers: Iterable[AlertReceiver],
    ) -> List[AlertReceiver]:
        """Return the enabled receivers whose filters accept ``alarm``."""
        return [r for r in receivers if r.enabled and self._matches(r, alarm)]

    async def dispatch(
        self,
        alarm: AlarmContent,
        receivers: Optional[Iterable[AlertReceiver]] = None,
    ) -> List[DeliveryResult]:
        """
        Send ``alarm`` to every matching receiver in parallel.

        Args:
            alarm: The alarm to deliver
            receivers: Candidate receivers; defaults to every stored receiver

        Returns:
            One DeliveryResult per matching receiver, in receiver order
        """
        if receivers is None:
            receivers = self.store.list() if self.store else []

        targets = self.match_receivers(alarm, receivers)
        if not targets:
            logger.info("No receiver matched alarm", title=alarm.title, level=alarm.level.name)
            return []

        outcomes = await asyncio.gather(
            *(self.send_to_receiver(r, alarm) for r in targets),
            return_exceptions=True,
        )
        results = [
            self._process_result(receiver, outcome)
            for receiver, outcome in zip(targets, outcomes)
        ]

        sent = sum(1 for r in results if r.success)
        logger.info(
            "Alert dispatched",
            title=alarm.title,
            level=alarm.level.name,
            sent=sent,
            failed=len(results) - sent,
        )
        return results

    def _matches(self, receiver: AlertReceiver, alarm: AlarmContent) -> bool:
        if receiver.match_all:
            return True
        if receiver.levels and alarm.level not in receiver.levels:
            return False
        return all(alarm.labels.get(k) == v for k, v in receiver.labels.items())

    def _process_result(self, receiver: AlertReceiver, outcome: Any) -> DeliveryResult:
        """Turn an unexpected exception from gather into a failed result."""
        if isinstance(outcome, DeliveryResult):
            return outcome

        logger.error(
            "Alert delivery raised unexpectedly",
            receiver_id=receiver.id,
            error=str(outcome),
            error_type=type(outcome).__name__,
        )
        error = outcome if isinstance(outcome, AlertSystemException) else AlertSystemException(
            str(outcome) or type(outcome).__name__, cause=outcome
        )
        return DeliveryResult(receiver.id, receiver.type, False, error)
