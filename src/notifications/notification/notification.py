"""Outgoing order notification records and their delivery outcome."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum


class NotificationType(Enum):
    ORDER_CONFIRMATION = "OrderConfirmation"
    ORDER_CANCELLATION = "OrderCancellation"
    ORDER_STATUS_UPDATE = "OrderStatusUpdate"


class NotificationChannel(Enum):
    EMAIL = "Email"


class NotificationStatus(Enum):
    SENT = "Sent"
    FAILED = "Failed"


@dataclass
class Notification:
    notification_type: str
    channel: str
    recipient: str
    subject: str
    body: str
    order_id: str
    status: str | None = None
    message_id: str | None = None
    failure_reason: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def mark_sent(self, message_id: str | None) -> None:
        self.status = NotificationStatus.SENT.value
        self.message_id = message_id

    def mark_failed(self, reason: str) -> None:
        self.status = NotificationStatus.FAILED.value
        self.failure_reason = reason
