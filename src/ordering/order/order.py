"""Order aggregate and the order state machine.

State Machine (6 states):
    PENDING → PROCESSING → SHIPPED → DELIVERED (terminal)
    PENDING | PROCESSING → CANCELLED (terminal)
    PENDING | PROCESSING | SHIPPED → REFUNDED (terminal, admin only)

Refunding is a financial status; it does not put stock back. Cancellation
does, by releasing the order's Reservation, which is why the admin status
update never accepts CANCELLED as a target.

Concurrent writers are serialised by the aggregate version: the second of
two updates to the same order fails at commit with ``ExpectedVersionError``.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Auto, DateTime, Dict, Float, HasMany, Identifier, Integer, String, Text

from ordering.order.events import OrderCancelled, OrderPlaced, OrderStatusChanged
from shared.domain import storefront
from shared.errors import InvalidTransitionError


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PaymentStatus(Enum):
    PENDING = "pending"
    AUTHORIZED = "authorized"
    PAID = "paid"
    PARTIALLY_REFUNDED = "partially_refunded"
    REFUNDED = "refunded"
    VOIDED = "voided"
    FAILED = "failed"


class FulfillmentStatus(Enum):
    UNFULFILLED = "unfulfilled"
    PARTIAL = "partial"
    FULFILLED = "fulfilled"


class CancellationActor(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED, OrderStatus.REFUNDED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED, OrderStatus.REFUNDED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.REFUNDED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.REFUNDED: set(),  # Terminal
}

# States from which cancellation (customer or back-office) is allowed
CANCELLABLE_STATES = frozenset({OrderStatus.PENDING, OrderStatus.PROCESSING})

TERMINAL_STATES = frozenset(status for status, targets in _VALID_TRANSITIONS.items() if not targets)


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in _VALID_TRANSITIONS.get(current, set())


def as_utc(value: datetime) -> datetime:
    """SQLite hands timestamps back without tzinfo; they were stored as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


# ---------------------------------------------------------------------------
# Order numbers
# ---------------------------------------------------------------------------
@storefront.aggregate
class OrderNumber:
    """Sequence emulation: one row per issued order number."""

    id = Auto(identifier=True, increment=True)
    issued_at = DateTime()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """A priced line; prices are copied from the catalogue when the order is placed."""

    position = Integer(default=0)
    product_id = Identifier(required=True)
    variant_id = Identifier()
    title = String(required=True, max_length=255)
    variant_title = String(max_length=255)
    sku = String(max_length=64)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    total_price = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = Integer(required=True, unique=True)
    email = String(required=True, max_length=255)
    phone = String(max_length=50)
    customer_id = Identifier()
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    fulfillment_status = String(choices=FulfillmentStatus, default=FulfillmentStatus.UNFULFILLED.value)
    currency = String(max_length=3, default="USD")
    subtotal = Float(default=0.0)
    shipping_total = Float(default=0.0)
    tax_total = Float(default=0.0)
    total = Float(default=0.0)
    shipping_address = Dict()
    billing_address = Dict()
    reservation_id = Identifier()
    admin_message = Text()
    items = HasMany(OrderItem)
    created_at = DateTime()
    updated_at = DateTime()
    cancelled_at = DateTime()
    shipped_at = DateTime()
    delivered_at = DateTime()

    @classmethod
    def place(cls, order_number, email, items, totals, placed_at, reservation_id=None, **details):
        """A pending order holding ``reservation_id``'s stock."""
        order = cls(
            order_number=order_number,
            email=email,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            fulfillment_status=FulfillmentStatus.UNFULFILLED.value,
            currency=totals.currency,
            subtotal=float(totals.subtotal),
            shipping_total=float(totals.shipping_total),
            tax_total=float(totals.tax_total),
            total=float(totals.total),
            reservation_id=reservation_id,
            created_at=placed_at,
            updated_at=placed_at,
            **details,
        )
        order.add_items(items)
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                email=order.email,
                total=order.total,
                currency=order.currency,
                placed_at=placed_at,
            )
        )
        return order

    @property
    def order_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    @property
    def is_terminal(self) -> bool:
        return self.order_status in TERMINAL_STATES

    def can_transition_to(self, target: OrderStatus) -> bool:
        return can_transition(self.order_status, target)

    def belongs_to(self, email: str | None) -> bool:
        """Ownership is an email match, ignoring case and surrounding whitespace."""
        if not email or not self.email:
            return False
        return self.email.strip().casefold() == email.strip().casefold()

    def sorted_items(self) -> list[OrderItem]:
        return sorted(self.items, key=lambda item: item.position or 0)

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def cancel(self, cancelled_by: CancellationActor, reason: str, now: datetime) -> None:
        if self.order_status not in CANCELLABLE_STATES:
            raise InvalidTransitionError(f"Cannot cancel order in '{self.status}' state")

        self.status = OrderStatus.CANCELLED.value
        self.cancelled_at = now
        self.updated_at = now
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                cancelled_by=cancelled_by.value,
                reason=reason,
                cancelled_at=now,
            )
        )

    def update_status(
        self,
        now: datetime,
        status: OrderStatus | None = None,
        payment_status: PaymentStatus | None = None,
        fulfillment_status: FulfillmentStatus | None = None,
        admin_message: str | None = None,
    ) -> None:
        """Back-office update; the customer hears about it when a status or a message is given."""
        previous = self.order_status

        if status == OrderStatus.CANCELLED:
            raise InvalidTransitionError("Orders are cancelled through cancellation, which returns reserved stock")
        if status is not None and status != previous:
            if self.is_terminal:
                raise InvalidTransitionError(f"Order is {self.status}; its status can no longer change")
            if not self.can_transition_to(status):
                raise InvalidTransitionError(f"Cannot transition order from '{self.status}' to '{status.value}'")

            self.status = status.value
            if status == OrderStatus.SHIPPED:
                self.shipped_at = now
            elif status == OrderStatus.DELIVERED:
                self.delivered_at = now
                if fulfillment_status is None:
                    fulfillment_status = FulfillmentStatus.FULFILLED

        if payment_status is not None:
            self.payment_status = payment_status.value
        if fulfillment_status is not None:
            self.fulfillment_status = fulfillment_status.value
        if admin_message:
            self.admin_message = admin_message
        self.updated_at = now

        if status is not None or admin_message:
            self.raise_(
                OrderStatusChanged(
                    order_id=str(self.id),
                    previous_status=previous.value,
                    status=self.status,
                    payment_status=self.payment_status,
                    fulfillment_status=self.fulfillment_status,
                    admin_message=admin_message,
                    changed_at=now,
                )
            )
