"""Order status update template — sent when the back-office moves an order along or writes to the customer."""

from notifications.notification.notification import (
    NotificationChannel,
    NotificationType,
)


class OrderStatusUpdateTemplate:
    notification_type = NotificationType.ORDER_STATUS_UPDATE.value
    default_channels = [NotificationChannel.EMAIL.value]

    @staticmethod
    def render(context: dict) -> dict:
        order_number = context.get("order_number", "N/A")
        status = context.get("status", "updated")
        body = f"Your order #{order_number} status has been updated to:\n\n{status.upper()}\n\n"
        admin_message = context.get("admin_message")
        if admin_message:
            body += f"A message from {context.get('store_name', 'the store')}:\n\n{admin_message}\n\n"
        body += "Track your order status in your account dashboard."
        return {
            "subject": f"Order Update #{order_number}: {status}",
            "body": body,
        }
