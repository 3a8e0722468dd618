"""Order event handler — Notifications reacts to Order events.

Listens for OrderPlaced (confirmation), OrderCancelled (cancellation notice)
and OrderStatusChanged (status update, with the back-office message when one
was written). Handlers run after the order's Unit of Work has committed; a
failed email is logged and never undoes the order change that caused it.
"""

import structlog
from protean import handle
from protean.utils.globals import current_domain

from notifications.notifier import EmailOrderNotifier
from ordering.order.events import OrderCancelled, OrderPlaced, OrderStatusChanged
from ordering.order.order import Order
from shared.config import get_settings
from shared.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.event_handler(part_of=Order)
class OrderingEventsHandler:
    """Reacts to Order events to email the customer."""

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        self._deliver("notify_order_created", event.order_id)

    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        self._deliver("notify_order_cancelled", event.order_id, cancelled_by=event.cancelled_by)

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        self._deliver(
            "notify_order_status_changed",
            event.order_id,
            previous_status=event.previous_status,
            admin_message=event.admin_message,
        )

    def _deliver(self, method: str, order_id: str, **kwargs) -> None:
        try:
            order = current_domain.repository_for(Order).get(order_id)
            getattr(EmailOrderNotifier(get_settings()), method)(order, **kwargs)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Order notification failed",
                notification=method,
                order_id=str(order_id),
                error=str(exc),
                error_type=type(exc).__name__,
            )
