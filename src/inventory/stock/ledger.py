"""Stock Ledger — the only code that changes available quantities.

Each use case runs in a Unit of Work; when it is called from inside another
one (an order being placed, an order being cancelled) it joins that outer
Unit of Work, so the stock movement commits or rolls back with the caller's
own writes.

``reserve`` draws each line greedily across locations in priority order. A
writer that loses a race on a row re-reads it and tries again with what is
left; if any line cannot be satisfied it raises ``OutOfStockError`` and the
Unit of Work rolls back every deduction already made. Lines are drawn in
variant order, whatever order the caller listed them in, so two carts
holding the same variants always lock rows in the same sequence.

``release`` flips the reservation's ``released_at`` from null with a
compare-and-set; only the caller that wins that flip credits the rows, which
makes a second release of the same record a no-op.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import NamedTuple

import structlog
from protean import use_case
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from inventory.stock.stock import Allocation, InventoryLevel, Reservation, StockLocation
from shared.domain import storefront
from shared.errors import OutOfStockError

logger = structlog.get_logger(__name__)


class ReservationLine(NamedTuple):
    line_index: int
    variant_id: str
    quantity: int


class StockLevel(NamedTuple):
    location_id: str
    location_name: str
    priority: int
    available: int
    provisioned: int


@dataclass(frozen=True)
class StockAudit:
    """Reconciliation snapshot for one variant."""

    variant_id: str
    available: int
    reserved: int
    provisioned: int

    @property
    def is_balanced(self) -> bool:
        return self.available + self.reserved == self.provisioned


def validate_quantity(quantity, field: str = "quantity") -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError({field: ["Quantity must be a whole number"]})
    if quantity <= 0:
        raise ValidationError({field: ["Quantity must be positive"]})
    return quantity


def _normalize_lines(lines: Iterable) -> list[ReservationLine]:
    normalized = []
    for index, (variant_id, quantity) in enumerate(lines):
        if not variant_id:
            raise ValidationError({"variant_id": ["Variant is required for every reserved line"]})
        normalized.append(ReservationLine(index, str(variant_id), validate_quantity(quantity)))
    if not normalized:
        raise ValidationError({"lines": ["At least one line is required"]})
    return normalized


def draw_order(lines: Sequence[ReservationLine]) -> list[ReservationLine]:
    """Lines sorted by variant so concurrent reservations lock rows in one global order."""
    return sorted(lines, key=lambda line: (line.variant_id, line.line_index))


@storefront.application_service(part_of=InventoryLevel)
class StockLedger:
    # -------------------------------------------------------------------
    # Locations
    # -------------------------------------------------------------------
    @use_case
    def create_location(self, name: str, priority: int = 0) -> StockLocation:
        if not name:
            raise ValidationError({"name": ["Location name is required"]})
        location = StockLocation(name=name, priority=priority, created_at=datetime.now(UTC))
        current_domain.repository_for(StockLocation).add(location)
        logger.info("Stock location created", location_id=location.id, name=name, priority=priority)
        return location

    @use_case
    def list_locations(self) -> list[StockLocation]:
        return current_domain.repository_for(StockLocation).in_draw_order()

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    @use_case
    def get_stock(self, variant_id: str) -> int:
        """Total available units for a variant across all locations; 0 when it has no rows."""
        return self._levels().totals([variant_id])[str(variant_id)]

    @use_case
    def get_stock_batch(self, variant_ids: Sequence[str]) -> dict[str, int]:
        """Same as ``get_stock`` for many variants in one query; unknown ids map to 0."""
        ids = list(dict.fromkeys(str(variant_id) for variant_id in variant_ids))
        if not ids:
            return {}
        return self._levels().totals(ids)

    @use_case
    def levels_for(self, variant_id: str) -> list[StockLevel]:
        """Per-location breakdown, in the order ``reserve`` draws from."""
        return [StockLevel(*row) for row in self._levels().breakdown(variant_id)]

    @use_case
    def audit(self, variant_id: str) -> StockAudit:
        available, provisioned = self._levels().sums(variant_id)
        reserved = current_domain.repository_for(Reservation).outstanding_units(variant_id)
        return StockAudit(
            variant_id=str(variant_id),
            available=available,
            reserved=reserved,
            provisioned=provisioned,
        )

    # -------------------------------------------------------------------
    # Provisioning
    # -------------------------------------------------------------------
    @use_case
    def provision(self, variant_id: str, location_id: str, quantity: int) -> None:
        """Receive new units into a location."""
        quantity = validate_quantity(quantity)
        current_domain.repository_for(StockLocation).get(location_id)
        self._levels().credit(variant_id, location_id, quantity, provisioned=True)
        logger.info("Stock provisioned", variant_id=variant_id, location_id=location_id, quantity=quantity)

    @use_case
    def adjust(self, variant_id: str, location_id: str, delta: int, reason: str) -> None:
        """Correct a row after a count or shrinkage; negative deltas never take it below zero."""
        if isinstance(delta, bool) or not isinstance(delta, int) or delta == 0:
            raise ValidationError({"delta": ["Adjustment must be a non-zero whole number"]})
        if not reason:
            raise ValidationError({"reason": ["Reason is required for stock adjustments"]})

        current_domain.repository_for(StockLocation).get(location_id)
        levels = self._levels()
        if delta > 0:
            levels.credit(variant_id, location_id, delta, provisioned=True)
        elif not levels.write_off(variant_id, location_id, -delta):
            available = levels.available_at(variant_id, location_id)
            raise ValidationError(
                {"delta": [f"Adjustment would result in negative stock: {available} available, {delta} requested"]}
            )
        logger.info(
            "Stock adjusted",
            variant_id=variant_id,
            location_id=location_id,
            delta=delta,
            reason=reason,
        )

    # -------------------------------------------------------------------
    # Reservation
    # -------------------------------------------------------------------
    @use_case
    def reserve(self, lines: Iterable) -> Reservation:
        """Take every line out of stock as one unit, or raise ``OutOfStockError`` and take nothing.

        ``lines`` is an iterable of ``(variant_id, quantity)`` pairs. The
        returned Reservation lists the exact ``(variant, location, quantity)``
        splits per line index and commits with whatever else the enclosing
        Unit of Work writes.
        """
        normalized = _normalize_lines(lines)

        allocations = []
        for line in draw_order(normalized):
            for location_id, taken in self._draw(line.variant_id, line.quantity):
                allocations.append(
                    Allocation(
                        line_index=line.line_index,
                        variant_id=line.variant_id,
                        location_id=location_id,
                        quantity=taken,
                    )
                )

        reservation = Reservation(created_at=datetime.now(UTC))
        reservation.add_allocations(sorted(allocations, key=lambda allocation: allocation.line_index))
        current_domain.repository_for(Reservation).add(reservation)

        logger.info(
            "Stock reserved",
            reservation_id=reservation.id,
            lines=[(line.variant_id, line.quantity) for line in normalized],
        )
        return reservation

    @use_case
    def release(self, reservation_id: str, reason: str = "released") -> bool:
        """Put a reservation's units back where they came from.

        Returns True when this call credited the stock and False when the
        reservation had already been released.
        """
        repo = current_domain.repository_for(Reservation)
        reservation = repo.get(reservation_id)
        if reservation.is_released or not repo.claim_release(reservation.id, reason):
            logger.info("Reservation already released", reservation_id=reservation_id)
            return False

        levels = self._levels()
        for allocation in reservation.allocations:
            levels.credit(allocation.variant_id, allocation.location_id, allocation.quantity)

        logger.info(
            "Reservation released",
            reservation_id=reservation_id,
            reason=reason,
            units=reservation.units,
        )
        return True

    # -------------------------------------------------------------------
    # Row primitives
    # -------------------------------------------------------------------
    def _levels(self):
        return current_domain.repository_for(InventoryLevel)

    def _draw(self, variant_id: str, quantity: int) -> list[tuple[str, int]]:
        levels = self._levels()
        remaining = quantity
        taken: list[tuple[str, int]] = []
        for location_id, observed in levels.drawable(variant_id):
            while remaining and observed:
                amount = min(remaining, observed)
                if levels.decrement(variant_id, location_id, amount):
                    taken.append((location_id, amount))
                    remaining -= amount
                    break
                # Lost the row to a concurrent writer; retry with what is left there
                observed = levels.available_at(variant_id, location_id)
            if not remaining:
                break

        if remaining:
            logger.warning(
                "Reservation failed: insufficient stock",
                variant_id=variant_id,
                requested=quantity,
                obtainable=quantity - remaining,
            )
            raise OutOfStockError(variant_id=variant_id, requested=quantity, available=quantity - remaining)
        return taken
