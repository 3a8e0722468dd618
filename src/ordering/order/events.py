"""Domain events for the Order aggregate.

Raised on the aggregate and dispatched after the Unit of Work commits; the
notifications context reacts to them to email the customer.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from shared.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """Stock was reserved and a pending order was recorded."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = Integer(required=True)
    email = String(required=True, max_length=255)
    total = Float(required=True)
    currency = String(max_length=3, default="USD")
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled and its reserved stock returned."""

    __version__ = 1

    order_id = Identifier(required=True)
    cancelled_by = String(required=True, max_length=50)
    reason = String(max_length=50)
    cancelled_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    """A back-office update to the order's status, or a message sent with one."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True, max_length=20)
    status = String(required=True, max_length=20)
    payment_status = String(max_length=30)
    fulfillment_status = String(max_length=20)
    admin_message = Text()
    changed_at = DateTime(required=True)
