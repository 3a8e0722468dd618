"""Order notification trigger — hands finished order events to the mail channel.

The ordering context only knows ``OrderNotifier``. Delivery is best-effort:
the ordering event handler calls it after the order's Unit of Work has
committed, and logs and ignores whatever goes wrong here.
"""

from abc import ABC, abstractmethod

import structlog

from notifications.channel import get_channel
from notifications.channel.email_port import EmailPort
from notifications.notification.notification import (
    Notification,
    NotificationChannel,
    NotificationType,
)
from notifications.templates import get_template
from shared.config import Settings

logger = structlog.get_logger(__name__)


def _money(amount) -> str:
    return f"{amount or 0:.2f}"


class OrderNotifier(ABC):
    """What the order lifecycle needs from the mail collaborator."""

    @abstractmethod
    def notify_order_created(self, order) -> None: ...

    @abstractmethod
    def notify_order_cancelled(self, order, cancelled_by: str = "customer") -> None: ...

    @abstractmethod
    def notify_order_status_changed(self, order, previous_status: str, admin_message: str | None = None) -> None: ...


class EmailOrderNotifier(OrderNotifier):
    def __init__(self, settings: Settings, channel: EmailPort | None = None):
        self.settings = settings
        self.channel = channel or get_channel(NotificationChannel.EMAIL.value)

    def notify_order_created(self, order) -> Notification:
        context = self._order_context(order)
        context["items"] = [
            {
                "title": item.title,
                "variant_title": item.variant_title,
                "quantity": item.quantity,
                "unit_price": _money(item.unit_price),
            }
            for item in order.sorted_items()
        ]
        return self._send(NotificationType.ORDER_CONFIRMATION.value, order, context)

    def notify_order_cancelled(self, order, cancelled_by: str = "customer") -> Notification:
        context = self._order_context(order)
        context["cancelled_by"] = cancelled_by
        return self._send(NotificationType.ORDER_CANCELLATION.value, order, context)

    def notify_order_status_changed(
        self, order, previous_status: str, admin_message: str | None = None
    ) -> Notification:
        context = self._order_context(order)
        context["previous_status"] = previous_status
        context["admin_message"] = admin_message
        return self._send(NotificationType.ORDER_STATUS_UPDATE.value, order, context)

    def _order_context(self, order) -> dict:
        return {
            "order_id": str(order.id),
            "order_number": order.order_number,
            "status": order.status,
            "subtotal": _money(order.subtotal),
            "shipping_total": _money(order.shipping_total),
            "total": _money(order.total),
            "currency_symbol": self.settings.currency_symbol,
            "store_name": self.settings.store_name,
        }

    def _send(self, notification_type: str, order, context: dict) -> Notification:
        rendered = get_template(notification_type).render(context)
        notification = Notification(
            notification_type=notification_type,
            channel=NotificationChannel.EMAIL.value,
            recipient=order.email,
            subject=rendered["subject"],
            body=rendered["body"],
            order_id=str(order.id),
        )

        result = self.channel.send(
            to=notification.recipient,
            subject=notification.subject,
            body=notification.body,
            sender=self.settings.mail_from,
        )
        if result.get("status") == "sent":
            notification.mark_sent(result.get("message_id"))
            logger.info(
                "Notification sent",
                notification_type=notification_type,
                order_id=str(order.id),
                message_id=notification.message_id,
            )
        else:
            notification.mark_failed(result.get("error") or "Unknown delivery failure")
            logger.warning(
                "Notification delivery failed",
                notification_type=notification_type,
                order_id=str(order.id),
                reason=notification.failure_reason,
            )
        return notification
