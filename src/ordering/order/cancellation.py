"""Order cancellation — commands and handler."""

from protean import handle
from protean.fields import Identifier, String

from ordering.order.lifecycle import OrderLifecycleManager
from ordering.order.order import Order
from shared.domain import storefront


@storefront.command(part_of="Order")
class CancelOrder:
    """Customer self-cancellation, checked against the order's email."""

    order_id = Identifier(required=True)
    requester_email = String(max_length=255)


@storefront.command(part_of="Order")
class AdminCancelOrder:
    order_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        OrderLifecycleManager().cancel_order(command.order_id, command.requester_email)

    @handle(AdminCancelOrder)
    def admin_cancel_order(self, command):
        OrderLifecycleManager().admin_cancel_order(command.order_id)
