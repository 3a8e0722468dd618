"""Order pricing — unit prices from the catalogue, totals from store settings.

Prices are locked onto the order items when the order is created; later
catalogue edits never change an existing order.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from catalogue.product.product import Product, Variant
from shared.config import Settings

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def resolve_unit_price(product: Product, variant: Variant | None = None) -> Decimal:
    """A variant's own price wins over the product's; a sale price applies only when it is lower."""
    base = variant.price if variant is not None and variant.price is not None else product.price
    sale = variant.sale_price if variant is not None and variant.sale_price is not None else product.sale_price
    base = to_money(base or 0)
    if sale is not None and Decimal("0") <= to_money(sale) < base:
        return to_money(sale)
    return base


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    shipping_total: Decimal
    tax_total: Decimal
    total: Decimal
    currency: str


def calculate_totals(line_totals: Iterable[Decimal], settings: Settings) -> OrderTotals:
    subtotal = to_money(sum(line_totals, Decimal("0")))
    if subtotal >= to_money(settings.free_shipping_threshold):
        shipping_total = to_money(0)
    else:
        shipping_total = to_money(settings.standard_shipping_price)
    tax_total = to_money(0)
    return OrderTotals(
        subtotal=subtotal,
        shipping_total=shipping_total,
        tax_total=tax_total,
        total=to_money(subtotal + shipping_total + tax_total),
        currency=settings.currency_code,
    )
