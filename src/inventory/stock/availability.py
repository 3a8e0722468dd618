"""Availability Checker — read-only stock answers for product pages and carts.

Nothing here mutates the ledger or holds stock. A cart that passes
``validate_cart`` can still lose the race at order creation; the reservation
taken there is the authoritative check.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

import structlog
from protean.utils.globals import current_domain

from catalogue.product.product import Product
from inventory.stock.ledger import StockLedger, validate_quantity
from inventory.stock.policy import StockPolicy, StockPolicyResolver, policy_of

logger = structlog.get_logger(__name__)

# Display-only quantity reported for products that do not track inventory
SENTINEL_AVAILABLE = 9999

PRODUCT_UNAVAILABLE = "Product is unavailable"

# CartError codes
INSUFFICIENT_STOCK = "insufficient_stock"
UNAVAILABLE = "unavailable"
VARIANT_REQUIRED = "variant_required"


@dataclass(frozen=True)
class StockCheck:
    available: int
    is_available: bool


@dataclass(frozen=True)
class CartLine:
    id: str
    variant_id: str | None = None
    quantity: int = 1
    product_id: str | None = None


@dataclass(frozen=True)
class CartError:
    item_id: str
    message: str
    available: int
    code: str = INSUFFICIENT_STOCK
    variant_id: str | None = None


@dataclass(frozen=True)
class CartValidation:
    is_valid: bool
    errors: list[CartError] = field(default_factory=list)


def evaluate(policy: StockPolicy, stock: int, quantity: int) -> StockCheck:
    """Combine a product's policy with its ledger stock for one requested quantity."""
    if not policy.track_inventory:
        return StockCheck(available=SENTINEL_AVAILABLE, is_available=True)
    if policy.allow_backorder:
        return StockCheck(available=stock, is_available=True)
    return StockCheck(available=stock, is_available=stock >= quantity)


def _as_cart_line(item) -> CartLine:
    if isinstance(item, CartLine):
        return item
    if isinstance(item, Mapping):
        return CartLine(
            id=str(item["id"]),
            variant_id=item.get("variant_id") or item.get("variantId"),
            quantity=item.get("quantity", 1),
            product_id=item.get("product_id") or item.get("productId"),
        )
    raise TypeError(f"Unsupported cart line: {item!r}")


class AvailabilityChecker:
    def __init__(self, ledger: StockLedger | None = None, policies: StockPolicyResolver | None = None):
        self.ledger = ledger or StockLedger()
        self.policies = policies or StockPolicyResolver()

    def check_variant(self, variant_id: str, quantity: int) -> StockCheck:
        quantity = validate_quantity(quantity)
        variant = self.policies.resolve_for_variant(variant_id)
        if not variant.policy.track_inventory:
            # Untracked products never touch the ledger
            return evaluate(variant.policy, 0, quantity)
        return evaluate(variant.policy, self.ledger.get_stock(variant_id), quantity)

    def validate_cart(self, items: Iterable) -> CartValidation:
        lines = [self._resolve_line(_as_cart_line(item)) for item in items]
        for line in lines:
            validate_quantity(line.quantity)

        variant_ids = [line.variant_id for line in lines if line.variant_id]
        variants = self.policies.resolve_for_variants(variant_ids)
        tracked = [vid for vid, v in variants.items() if v.policy.track_inventory]
        stock = self.ledger.get_stock_batch(tracked)

        errors = []
        for line in lines:
            if not line.variant_id:
                error = self._check_variantless(line)
                if error is not None:
                    errors.append(error)
                continue

            variant = variants.get(str(line.variant_id))
            if variant is None or not variant.product_active:
                errors.append(CartError(item_id=line.id, message=PRODUCT_UNAVAILABLE, available=0, code=UNAVAILABLE))
                continue

            check = evaluate(variant.policy, stock.get(str(line.variant_id), 0), line.quantity)
            if not check.is_available:
                errors.append(
                    CartError(
                        item_id=line.id,
                        message=f'Insufficient stock for "{variant.product_title}". Available: {check.available}',
                        available=check.available,
                        variant_id=str(line.variant_id),
                    )
                )

        if errors:
            logger.info("Cart validation failed", failed_items=[e.item_id for e in errors])
        return CartValidation(is_valid=not errors, errors=errors)

    def _resolve_line(self, line: CartLine) -> CartLine:
        """A product-only line of a single-variant product stands for that variant."""
        if line.variant_id or not line.product_id:
            return line
        product = current_domain.repository_for(Product).get_or_none(line.product_id)
        if product is None or product.sole_variant is None:
            return line
        return CartLine(
            id=line.id,
            variant_id=str(product.sole_variant.id),
            quantity=line.quantity,
            product_id=line.product_id,
        )

    def _check_variantless(self, line: CartLine) -> CartError | None:
        # Lines that name neither a variant nor a product are not stock-checked
        if not line.product_id:
            return None
        product = current_domain.repository_for(Product).get_or_none(line.product_id)
        if product is None or not product.is_active:
            return CartError(item_id=line.id, message=PRODUCT_UNAVAILABLE, available=0, code=UNAVAILABLE)
        if policy_of(product).draws_on_ledger:
            return CartError(
                item_id=line.id,
                message=f'Select an option for "{product.title}"',
                available=0,
                code=VARIANT_REQUIRED,
            )
        return None
