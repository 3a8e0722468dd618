"""Order cancellation template — sent when an order is cancelled."""

from notifications.notification.notification import (
    NotificationChannel,
    NotificationType,
)


class OrderCancellationTemplate:
    notification_type = NotificationType.ORDER_CANCELLATION.value
    default_channels = [NotificationChannel.EMAIL.value]

    @staticmethod
    def render(context: dict) -> dict:
        order_number = context.get("order_number", "N/A")
        cancelled_by = context.get("cancelled_by", "customer")
        return {
            "subject": f"Order #{order_number} Cancelled",
            "body": (
                f"Your order #{order_number} has been cancelled.\n\n"
                f"Cancelled by: {cancelled_by}\n\n"
                "If payment was captured, a refund will be processed "
                "separately.\n\n"
                "If you have questions, please contact our support team."
            ),
        }
