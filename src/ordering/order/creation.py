"""Order creation — commands and handler."""

import json

from protean import handle
from protean.fields import Dict, Identifier, String, Text

from ordering.order.lifecycle import OrderInput, OrderLifecycleManager, OrderLineInput
from ordering.order.order import Order
from shared.domain import storefront


@storefront.command(part_of="Order")
class CreateOrder:
    email = String(required=True, max_length=255)
    items = Text(required=True)  # JSON: list of {product_id, variant_id, quantity}
    customer_id = Identifier()
    phone = String(max_length=50)
    shipping_address = Dict()
    billing_address = Dict()


@storefront.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        lines = [
            OrderLineInput(
                product_id=item.get("product_id"),
                quantity=item.get("quantity"),
                variant_id=item.get("variant_id"),
            )
            for item in json.loads(command.items)
        ]
        order = OrderLifecycleManager().create_order(
            OrderInput(
                email=command.email,
                items=lines,
                customer_id=command.customer_id,
                phone=command.phone,
                shipping_address=command.shipping_address,
                billing_address=command.billing_address,
            )
        )
        return str(order.id)
