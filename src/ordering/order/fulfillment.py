"""Back-office order status updates — command and handler."""

from protean import handle
from protean.fields import Identifier, String, Text

from ordering.order.lifecycle import OrderLifecycleManager
from ordering.order.order import Order
from shared.domain import storefront


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(max_length=20)
    payment_status = String(max_length=30)
    fulfillment_status = String(max_length=20)
    admin_message = Text()


@storefront.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        OrderLifecycleManager().update_status(
            command.order_id,
            status=command.status,
            payment_status=command.payment_status,
            fulfillment_status=command.fulfillment_status,
            admin_message=command.admin_message,
        )
