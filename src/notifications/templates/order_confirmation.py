"""Order confirmation template — sent when an order is placed."""

from notifications.notification.notification import (
    NotificationChannel,
    NotificationType,
)


class OrderConfirmationTemplate:
    notification_type = NotificationType.ORDER_CONFIRMATION.value
    default_channels = [NotificationChannel.EMAIL.value]

    @staticmethod
    def render(context: dict) -> dict:
        order_number = context.get("order_number", "N/A")
        symbol = context.get("currency_symbol", "$")
        store_name = context.get("store_name", "our store")
        lines = "\n".join(
            f"  {item['title']}{' (' + item['variant_title'] + ')' if item.get('variant_title') else ''}"
            f" x{item['quantity']} @ {symbol}{item['unit_price']}"
            for item in context.get("items", [])
        )
        return {
            "subject": f"Order Confirmation #{order_number}",
            "body": (
                f"Thank you for your order! Order #{order_number} has been placed successfully.\n\n"
                f"Status: {context.get('status', 'pending')}\n\n"
                f"{lines}\n\n"
                f"Subtotal: {symbol}{context.get('subtotal', '0.00')}\n"
                f"Shipping: {symbol}{context.get('shipping_total', '0.00')}\n"
                f"Total: {symbol}{context.get('total', '0.00')}\n\n"
                f"Thank you for shopping with {store_name}!"
            ),
        }
