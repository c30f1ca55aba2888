"""
Alert Router - alarm reporting and receiver management API

1. Alarm report: dispatch to every matching receiver
2. Receiver CRUD
3. Test send to a single receiver
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Request

from alert_notify.core import bind_context, get_logger
from alert_notify.models import (
    AlarmContent,
    AlarmLevel,
    AlarmReportResponse,
    AlertReceiverCreate,
    AlertReceiverUpdate,
    ChannelType,
    ReceiverTestRequest,
)
from alert_notify.services.alerts import AlertDispatcher, ReceiverStore

logger = get_logger(__name__)
router = APIRouter()


# ============== Dependencies ==============

def get_dispatcher(request: Request) -> AlertDispatcher:
    return request.app.state.dispatcher


def get_store(request: Request) -> ReceiverStore:
    return request.app.state.receiver_store


# ============== Alarm Report ==============

@router.post("/report", response_model=AlarmReportResponse)
async def report_alarm(
    alarm: AlarmContent,
    dispatcher: AlertDispatcher = Depends(get_dispatcher),
) -> AlarmReportResponse:
    """
    Report a fired alarm.

    The alarm is delivered to every enabled receiver whose level and label
    filters accept it. Per-receiver failures are reported in ``results``
    and never fail the request.
    """
    bind_context(alarm_title=alarm.title, alarm_level=alarm.level.name)
    results = await dispatcher.dispatch(alarm)
    sent = sum(1 for r in results if r.success)

    return AlarmReportResponse(
        sent=sent,
        failed=len(results) - sent,
        total=len(results),
        results=[r.to_response() for r in results],
    )


# ============== Receivers ==============

@router.post("/receiver", status_code=201)
async def create_receiver(
    data: AlertReceiverCreate,
    store: ReceiverStore = Depends(get_store),
) -> Dict[str, Any]:
    """Register a new alert receiver."""
    return store.add(data).to_public_dict()


@router.get("/receiver")
async def list_receivers(
    type: Optional[ChannelType] = Query(None, description="Only receivers of this channel type"),
    store: ReceiverStore = Depends(get_store),
) -> List[Dict[str, Any]]:
    """List alert receivers with credentials masked."""
    return [r.to_public_dict() for r in store.list(type)]


@router.post("/receiver/send-test")
async def send_test(
    request: ReceiverTestRequest,
    dispatcher: AlertDispatcher = Depends(get_dispatcher),
    store: ReceiverStore = Depends(get_store),
) -> Dict[str, Any]:
    """
    Send a test alarm to one receiver.

    The receiver's filters and enabled flag are ignored so a configuration
    can be verified before it goes live.
    """
    receiver = store.get(request.receiver_id)
    alarm = AlarmContent(
        title=request.title,
        content=request.content,
        level=AlarmLevel.INFO,
        labels={"test": "true"},
    )
    result = await dispatcher.send_to_receiver(receiver, alarm)

    logger.info(
        "Test alert sent",
        receiver_id=receiver.id,
        channel_type=receiver.type.name,
        success=result.success,
    )

    return {
        "success": result.success,
        "error_code": result.error_code,
        "error": result.error.message if result.error else None,
    }


@router.get("/receiver/{receiver_id}")
async def get_receiver(
    receiver_id: str,
    store: ReceiverStore = Depends(get_store),
) -> Dict[str, Any]:
    """Fetch a single alert receiver."""
    return store.get(receiver_id).to_public_dict()


@router.put("/receiver/{receiver_id}")
async def update_receiver(
    receiver_id: str,
    data: AlertReceiverUpdate,
    store: ReceiverStore = Depends(get_store),
) -> Dict[str, Any]:
    """Update the given fields of an alert receiver."""
    return store.update(receiver_id, data).to_public_dict()


@router.delete("/receiver/{receiver_id}")
async def delete_receiver(
    receiver_id: str,
    store: ReceiverStore = Depends(get_store),
) -> Dict[str, Any]:
    """Delete an alert receiver."""
    store.delete(receiver_id)
    return {"success": True, "id": receiver_id}
