"""Order Lifecycle Manager — the only path that takes stock out of or puts it back into the ledger.

Creation:
    validate_cart (advisory, early user-facing error)
    → one Unit of Work: price the lines, reserve stock, issue an order number,
      add the order and its items with the reservation attached
    → OrderPlaced is dispatched after commit; the customer email is best-effort

Cancellation (customer or back-office) moves the order to CANCELLED and
releases its reservation in the same Unit of Work, so stock comes back
exactly once and only together with the status change. A concurrent writer
to the same order loses at commit on the aggregate version. Admin status
updates never touch the ledger.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import timedelta

import structlog
from protean import use_case
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from catalogue.product.product import Product
from inventory.stock.availability import INSUFFICIENT_STOCK, AvailabilityChecker, CartLine
from inventory.stock.ledger import StockLedger, validate_quantity
from inventory.stock.policy import policy_of
from inventory.stock.stock import Reservation
from ordering.order.order import (
    CancellationActor,
    FulfillmentStatus,
    Order,
    OrderItem,
    OrderNumber,
    OrderStatus,
    PaymentStatus,
    as_utc,
)
from ordering.order.pricing import calculate_totals, resolve_unit_price, to_money
from shared.config import Settings, get_settings
from shared.domain import storefront
from shared.errors import OutOfStockError, UnauthorizedError, WindowExpiredError

logger = structlog.get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass
class OrderLineInput:
    product_id: str
    quantity: int
    variant_id: str | None = None


@dataclass
class OrderInput:
    email: str
    items: Sequence[OrderLineInput] = field(default_factory=list)
    customer_id: str | None = None
    phone: str | None = None
    shipping_address: dict | None = None
    billing_address: dict | None = None


def _parse_status(value, enum_cls, field_name: str):
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError({field_name: [f"Invalid value '{value}'. Expected one of: {allowed}"]}) from None


@storefront.application_service(part_of=Order)
class OrderLifecycleManager:
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    # -------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------
    @use_case
    def create_order(self, order_input: OrderInput) -> Order:
        """Reserve stock and persist a pending order, or raise and leave nothing behind."""
        self._validate_input(order_input)
        self._precheck_cart(order_input.items)

        order = self._build_order(order_input)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order created",
            order_id=order.id,
            order_number=order.order_number,
            reservation_id=order.reservation_id,
            total=order.total,
        )
        return order

    def _validate_input(self, order_input: OrderInput) -> None:
        email = (order_input.email or "").strip()
        if not EMAIL_PATTERN.match(email):
            raise ValidationError({"email": ["A valid email address is required"]})
        if not order_input.items:
            raise ValidationError({"items": ["Order must contain at least one item"]})
        for line in order_input.items:
            if not line.product_id:
                raise ValidationError({"items": ["Every item needs a product"]})
            validate_quantity(line.quantity, field="items")

    def _precheck_cart(self, items: Sequence[OrderLineInput]) -> None:
        validation = AvailabilityChecker().validate_cart(
            [
                CartLine(id=str(index), variant_id=line.variant_id, quantity=line.quantity, product_id=line.product_id)
                for index, line in enumerate(items)
            ]
        )
        if validation.is_valid:
            return

        error = validation.errors[0]
        if error.code != INSUFFICIENT_STOCK:
            raise ValidationError({"items": [error.message]})
        line = items[int(error.item_id)]
        raise OutOfStockError(variant_id=error.variant_id, requested=line.quantity, available=error.available)

    def _build_order(self, order_input: OrderInput) -> Order:
        products = current_domain.repository_for(Product)

        items = []
        to_reserve = []
        for position, line in enumerate(order_input.items):
            product = products.get_or_none(line.product_id)
            if product is None or not product.is_active:
                raise ValidationError({"items": [f"Product {line.product_id} is unavailable"]})

            policy = policy_of(product)
            variant = None
            if line.variant_id:
                variant = product.variant(line.variant_id)
                if variant is None:
                    raise ValidationError({"items": [f"Variant {line.variant_id} does not belong to product {product.id}"]})
            elif policy.draws_on_ledger:
                # Stock is kept per variant; a product-only line must name one unambiguously
                variant = product.sole_variant
                if variant is None:
                    raise ValidationError({"items": [f'Product "{product.title}" requires a variant to be selected']})

            unit_price = resolve_unit_price(product, variant)
            items.append(
                OrderItem(
                    position=position,
                    product_id=product.id,
                    variant_id=variant.id if variant else None,
                    title=product.title,
                    variant_title=variant.title if variant else None,
                    sku=(variant.sku if variant and variant.sku else product.sku),
                    quantity=line.quantity,
                    unit_price=float(unit_price),
                    total_price=float(to_money(unit_price * line.quantity)),
                )
            )
            # Untracked and backorder products never draw on the ledger
            if policy.draws_on_ledger:
                to_reserve.append((variant.id, line.quantity))

        reservation = StockLedger().reserve(to_reserve) if to_reserve else None

        now = current_domain.clock.now()
        number = OrderNumber(issued_at=now)
        current_domain.repository_for(OrderNumber).add(number)

        totals = calculate_totals((to_money(item.total_price) for item in items), self.settings)
        return Order.place(
            order_number=self.settings.order_number_offset + number.id,
            email=order_input.email.strip(),
            items=items,
            totals=totals,
            placed_at=now,
            reservation_id=reservation.id if reservation else None,
            phone=order_input.phone,
            customer_id=order_input.customer_id,
            shipping_address=order_input.shipping_address,
            billing_address=order_input.billing_address or order_input.shipping_address,
        )

    # -------------------------------------------------------------------
    # Cancellation
    # -------------------------------------------------------------------
    @use_case
    def cancel_order(self, order_id: str, requester_email: str) -> Order:
        """Customer self-cancellation: owner only, inside the window, from a cancellable state."""
        order = current_domain.repository_for(Order).get(order_id)

        if not order.belongs_to(requester_email):
            logger.warning("Order cancellation refused: requester does not own order", order_id=order_id)
            raise UnauthorizedError("You are not authorized to cancel this order")

        window = timedelta(hours=self.settings.cancellation_window_hours)
        if current_domain.clock.now() - as_utc(order.created_at) > window:
            raise WindowExpiredError(
                f"Orders can only be cancelled within {self.settings.cancellation_window_hours} hours of placement"
            )

        self._cancel(order, CancellationActor.CUSTOMER, reason="customer_cancelled")
        return order

    @use_case
    def admin_cancel_order(self, order_id: str) -> Order:
        """Back-office cancellation: same status guard and stock release, no ownership or window."""
        order = current_domain.repository_for(Order).get(order_id)
        self._cancel(order, CancellationActor.ADMIN, reason="admin_cancelled")
        return order

    def _cancel(self, order: Order, actor: CancellationActor, reason: str) -> None:
        order.cancel(actor, reason, current_domain.clock.now())
        if order.reservation_id:
            StockLedger().release(order.reservation_id, reason=reason)
        current_domain.repository_for(Order).add(order)

        logger.info("Order cancelled", order_id=order.id, reason=reason, reservation_id=order.reservation_id)

    # -------------------------------------------------------------------
    # Admin status updates
    # -------------------------------------------------------------------
    @use_case
    def update_status(
        self,
        order_id: str,
        status=None,
        payment_status=None,
        fulfillment_status=None,
        admin_message: str | None = None,
    ) -> Order:
        """Move an order along the state machine and/or message the customer; never touches the ledger."""
        target = _parse_status(status, OrderStatus, "status")
        payment = _parse_status(payment_status, PaymentStatus, "payment_status")
        fulfillment = _parse_status(fulfillment_status, FulfillmentStatus, "fulfillment_status")
        admin_message = (admin_message or "").strip() or None
        if target is None and payment is None and fulfillment is None and admin_message is None:
            raise ValidationError({"status": ["Nothing to update"]})

        repo = current_domain.repository_for(Order)
        order = repo.get(order_id)
        previous = order.status
        order.update_status(
            current_domain.clock.now(),
            status=target,
            payment_status=payment,
            fulfillment_status=fulfillment,
            admin_message=admin_message,
        )
        repo.add(order)

        logger.info(
            "Order status updated",
            order_id=order_id,
            previous_status=previous,
            status=order.status,
            payment_status=order.payment_status,
            fulfillment_status=order.fulfillment_status,
        )
        return order

    # -------------------------------------------------------------------
    # Deletion
    # -------------------------------------------------------------------
    @use_case
    def delete_order(self, order_id: str) -> None:
        """Hard delete; an outstanding reservation is released first so no stock leaks."""
        repo = current_domain.repository_for(Order)
        order = repo.get(order_id)
        reservation_id = order.reservation_id
        if reservation_id:
            StockLedger().release(reservation_id, reason="order_deleted")
            reservations = current_domain.repository_for(Reservation)
            reservations.remove(reservations.get(reservation_id))
        repo.remove(order)

        logger.info("Order deleted", order_id=order_id, reservation_id=reservation_id)

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    @use_case
    def get_order(self, order_id: str) -> Order:
        return current_domain.repository_for(Order).get(order_id)

    @use_case
    def list_customer_orders(self, customer_id: str) -> list[Order]:
        return current_domain.repository_for(Order).for_customer(customer_id)
