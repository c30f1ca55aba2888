"""
In-memory alert receiver storage.

Receivers live for the lifetime of the process. Callers get copies, so a
stored receiver only changes through ``update``.
"""

from typing import Dict, List, Optional

from alert_notify.core import get_logger
from alert_notify.exceptions import ReceiverNotFoundError
from alert_notify.models import (
    AlertReceiver,
    AlertReceiverCreate,
    AlertReceiverUpdate,
    ChannelType,
)
from alert_notify.models.schemas import SECRET_RECEIVER_FIELDS, utc_now

logger = get_logger(__name__)

CLEARABLE_FIELDS = SECRET_RECEIVER_FIELDS + ("email",)


class ReceiverStore:
    """Receiver CRUD keyed by receiver id."""

    def __init__(self):
        self._receivers: Dict[str, AlertReceiver] = {}

    def add(self, data: AlertReceiverCreate) -> AlertReceiver:
        receiver = AlertReceiver(**data.model_dump())
        self._receivers[receiver.id] = receiver
        logger.info(
            "Alert receiver added",
            receiver_id=receiver.id,
            name=receiver.name,
            channel_type=receiver.type.name,
        )
        return receiver.model_copy(deep=True)

    def update(self, receiver_id: str, data: AlertReceiverUpdate) -> AlertReceiver:
        current = self._get(receiver_id)
        # Address fields may be cleared with null, the rest keep their value
        changes = {
            k: v
            for k, v in data.model_dump(exclude_unset=True).items()
            if v is not None or k in CLEARABLE_FIELDS
        }
        updated = AlertReceiver.model_validate(
            {**current.model_dump(), **changes, "date_updated": utc_now()}
        )
        self._receivers[receiver_id] = updated
        logger.info(
            "Alert receiver updated",
            receiver_id=receiver_id,
            fields=sorted(changes),
        )
        return updated.model_copy(deep=True)

    def delete(self, receiver_id: str) -> None:
        self._get(receiver_id)
        del self._receivers[receiver_id]
        logger.info("Alert receiver deleted", receiver_id=receiver_id)

    def get(self, receiver_id: str) -> AlertReceiver:
        return self._get(receiver_id).model_copy(deep=True)

    def list(self, type: Optional[ChannelType] = None) -> List[AlertReceiver]:
        """List receivers in insertion order, optionally of one channel type."""
        return [
            r.model_copy(deep=True)
            for r in self._receivers.values()
            if type is None or r.type == type
        ]

    def __len__(self) -> int:
        return len(self._receivers)

    def _get(self, receiver_id: str) -> AlertReceiver:
        receiver = self._receivers.get(receiver_id)
        if receiver is None:
            raise ReceiverNotFoundError(receiver_id)
        return receiver
