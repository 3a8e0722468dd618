"""Order deletion — command and handler."""

from protean import handle
from protean.fields import Identifier

from ordering.order.lifecycle import OrderLifecycleManager
from ordering.order.order import Order
from shared.domain import storefront


@storefront.command(part_of="Order")
class DeleteOrder:
    order_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class DeleteOrderHandler:
    @handle(DeleteOrder)
    def delete_order(self, command):
        OrderLifecycleManager().delete_order(command.order_id)
