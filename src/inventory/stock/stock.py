"""Stock Ledger aggregates — where a variant's units are and who holds them.

Stock Level Model:
    available:   units on the shelf at one location that can still be sold
    provisioned: units ever received into that location (less negative adjustments)
    reserved:    units held by outstanding Reservations (not stored; derived from allocations)

Conservation, per variant:  Σ available + Σ outstanding reserved == Σ provisioned

One ``InventoryLevel`` exists per (variant, location) pair; its identity is
derived from the pair so two writers can never create two rows for it.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, HasMany, Identifier, Integer, String

from shared.domain import storefront


def level_id(variant_id, location_id) -> str:
    return f"{variant_id}:{location_id}"


@storefront.aggregate
class StockLocation:
    """A fulfillment source; lower priority is drawn from first."""

    name = String(required=True, max_length=255)
    priority = Integer(default=0)
    created_at = DateTime()


@storefront.aggregate
class InventoryLevel:
    """Units of one variant at one location.

    Quantities change only through conditional UPDATEs issued by the
    repository, never by loading, editing and saving this aggregate.
    """

    id = String(identifier=True, max_length=255)
    variant_id = Identifier(required=True)
    location_id = Identifier(required=True)
    available = Integer(default=0, min_value=0)
    provisioned = Integer(default=0)
    updated_at = DateTime()

    @classmethod
    def open(cls, variant_id, location_id, quantity):
        return cls(
            id=level_id(variant_id, location_id),
            variant_id=str(variant_id),
            location_id=str(location_id),
            available=quantity,
            provisioned=quantity,
            updated_at=datetime.now(UTC),
        )


@storefront.entity(part_of="Reservation")
class Allocation:
    """The slice of one reserved line taken from one location."""

    line_index = Integer(required=True, min_value=0)
    variant_id = Identifier(required=True)
    location_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.aggregate
class Reservation:
    """Units taken out of stock for one order, and exactly where they came from.

    Released at most once; a released Reservation stays on record with its
    allocations so the history of where units went is kept.
    """

    allocations = HasMany(Allocation)
    created_at = DateTime()
    released_at = DateTime()
    release_reason = String(max_length=50)

    @property
    def is_released(self) -> bool:
        return self.released_at is not None

    @property
    def units(self) -> int:
        return sum(allocation.quantity for allocation in self.allocations)
