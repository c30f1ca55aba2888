"""
Custom exception hierarchy.

Every exception raised by the notification service derives from
AlertSystemException. Channel strategies normalize every failure into a
single NotificationDeliveryError so callers never need channel-specific
exception handling.
"""
from typing import Optional, Dict, Any
from datetime import datetime, timezone
from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AlertSystemException(Exception):
    """Top-level exception of the notification service"""

    def __init__(
        self,
        message: str,
        error_code: str = "E000",
        details: Optional[Dict[str, Any]] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        cause: Optional[BaseException] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.severity = severity
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the exception into a JSON friendly dict"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None
        }

    def __str__(self):
        return f"[{self.error_code}] {self.message}"

    def __repr__(self):
        return f"{self.__class__.__name__}(code={self.error_code}, message={self.message})"


# ============================================
# Notification exceptions (N001-N099)
# ============================================

class DeliveryFailureKind(str, Enum):
    """Why a delivery attempt failed"""
    RENDERING = "rendering"
    TRANSPORT = "transport"
    PROVIDER_REJECTION = "provider_rejection"
    MALFORMED_RESPONSE = "malformed_response"
    INVALID_RECEIVER = "invalid_receiver"


FAILURE_KIND_CODES: Dict[DeliveryFailureKind, str] = {
    DeliveryFailureKind.RENDERING: "N001",
    DeliveryFailureKind.TRANSPORT: "N002",
    DeliveryFailureKind.PROVIDER_REJECTION: "N003",
    DeliveryFailureKind.MALFORMED_RESPONSE: "N004",
    DeliveryFailureKind.INVALID_RECEIVER: "N005",
}


class NotificationException(AlertSystemException):
    """Notification related exception"""
    pass


class NotificationDeliveryError(NotificationException):
    """
    A single delivery attempt failed.

    The message is prefixed with the channel tag, e.g.
    ``[WeWork Notify Error] invalid key``.
    """
    def __init__(
        self,
        channel_tag: str,
        reason: str,
        kind: DeliveryFailureKind = DeliveryFailureKind.TRANSPORT,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None
    ):
        super().__init__(
            message=f"[{channel_tag}] {reason}",
            error_code=FAILURE_KIND_CODES[kind],
            details={
                "channel": channel_tag,
                "kind": kind.value,
                "status_code": status_code,
            },
            severity=ErrorSeverity.HIGH,
            cause=cause
        )
        self.channel_tag = channel_tag
        self.reason = reason
        self.kind = kind
        self.status_code = status_code


# ============================================
# Template exceptions (T001-T099)
# ============================================

class TemplateRenderError(AlertSystemException):
    """Template missing or alarm fields incompatible with it"""
    def __init__(self, template_name: str, reason: str, cause: Optional[BaseException] = None):
        super().__init__(
            message=f"Failed to render template '{template_name}': {reason}",
            error_code="T001",
            details={"template": template_name, "reason": reason},
            severity=ErrorSeverity.MEDIUM,
            cause=cause
        )
        self.template_name = template_name


# ============================================
# Receiver exceptions (R001-R099)
# ============================================

class ReceiverException(AlertSystemException):
    """Receiver configuration related exception"""
    pass


class UnsupportedChannelError(ReceiverException):
    """No strategy is registered for the channel type"""
    def __init__(self, channel_type: int):
        super().__init__(
            message=f"No notification strategy registered for channel type {channel_type}",
            error_code="R001",
            details={"channel_type": channel_type},
            severity=ErrorSeverity.MEDIUM
        )
        self.channel_type = channel_type


class ReceiverNotFoundError(ReceiverException):
    """Receiver id is not known"""
    def __init__(self, receiver_id: str):
        super().__init__(
            message=f"Alert receiver not found: {receiver_id}",
            error_code="R002",
            details={"receiver_id": receiver_id},
            severity=ErrorSeverity.LOW
        )
        self.receiver_id = receiver_id


ERROR_CODE_MAPPING = {
    "N001": NotificationDeliveryError,
    "N002": NotificationDeliveryError,
    "N003": NotificationDeliveryError,
    "N004": NotificationDeliveryError,
    "N005": NotificationDeliveryError,
    "T001": TemplateRenderError,
    "R001": UnsupportedChannelError,
    "R002": ReceiverNotFoundError,
}


def get_exception_class(error_code: str) -> type:
    """Look up the exception class for an error code"""
    return ERROR_CODE_MAPPING.get(error_code, AlertSystemException)


__all__ = [
    # Base
    "AlertSystemException",
    "ErrorSeverity",
    # Notification
    "DeliveryFailureKind",
    "FAILURE_KIND_CODES",
    "NotificationException",
    "NotificationDeliveryError",
    # Template
    "TemplateRenderError",
    # Receiver
    "ReceiverException",
    "UnsupportedChannelError",
    "ReceiverNotFoundError",
    # Utilities
    "ERROR_CODE_MAPPING",
    "get_exception_class",
]
