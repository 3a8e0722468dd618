"""Product aggregate — the slice of the catalogue the stock core reads.

Products own the stock policy flags (``track_inventory``, ``allow_backorder``)
and the base price; every Variant belongs to exactly one Product and may
override the price. Page content (descriptions, media, SEO) lives elsewhere.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Integer, String

from shared.domain import storefront


class ProductStatus(Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    ARCHIVED = "archived"


@storefront.entity(part_of="Product")
class Variant:
    """A purchasable option of a product; stock is counted per variant."""

    title: String(max_length=255)
    sku: String(max_length=64)
    price: Float(min_value=0.0)
    sale_price: Float(min_value=0.0)
    position: Integer(default=0)


@storefront.aggregate
class Product:
    """Product aggregate root."""

    title: String(required=True, max_length=255)
    sku: String(max_length=64)
    price: Float(default=0.0, min_value=0.0)
    sale_price: Float(min_value=0.0)
    status: String(choices=ProductStatus, default=ProductStatus.ACTIVE.value)
    track_inventory: Boolean(default=True)
    allow_backorder: Boolean(default=False)
    variants: HasMany(Variant)
    created_at: DateTime()

    @classmethod
    def create(
        cls,
        title,
        price=0.0,
        sku=None,
        sale_price=None,
        status=None,
        track_inventory=True,
        allow_backorder=False,
    ):
        return cls(
            title=title,
            price=price,
            sku=sku,
            sale_price=sale_price,
            status=status or ProductStatus.ACTIVE.value,
            track_inventory=track_inventory,
            allow_backorder=allow_backorder,
            created_at=datetime.now(UTC),
        )

    @property
    def is_active(self) -> bool:
        return self.status == ProductStatus.ACTIVE.value

    def add_variant(self, title=None, sku=None, price=None, sale_price=None):
        if sku and any(v.sku == sku for v in self.variants):
            raise ValidationError({"sku": [f"Variant SKU {sku} already exists on this product"]})
        variant = Variant(
            title=title,
            sku=sku,
            price=price,
            sale_price=sale_price,
            position=len(self.variants),
        )
        self.add_variants(variant)
        return variant

    def variant(self, variant_id):
        """The variant with this id, or None when it is not one of this product's."""
        for variant in self.variants:
            if str(variant.id) == str(variant_id):
                return variant
        return None

    @property
    def sole_variant(self):
        """The only variant, for products sold without picking an option."""
        if len(self.variants) == 1:
            return self.variants[0]
        return None
