"""Repositories for the Stock Ledger aggregates.

Every quantity change is a single conditional UPDATE on the Unit of Work's
session, for example

    UPDATE inventory_level SET available = available - :n
    WHERE variant_id = :v AND location_id = :l AND available >= :n

A writer that loses a race matches zero rows and learns it from the
rowcount; nothing reads a count, computes in Python and writes it back.
"""

from datetime import UTC, datetime

from protean.utils.globals import current_domain
from sqlalchemy import func, select, update

from inventory.stock.stock import (
    Allocation,
    InventoryLevel,
    Reservation,
    StockLocation,
    level_id,
)
from shared.domain import storefront


def _model(element_cls):
    return current_domain.repository_for(element_cls)._dao.database_model_cls


@storefront.repository(part_of=StockLocation)
class StockLocationRepository:
    def in_draw_order(self) -> list[StockLocation]:
        return self.query.order_by(["priority", "created_at"]).limit(None).all().items


@storefront.repository(part_of=InventoryLevel)
class InventoryLevelRepository:
    def _session(self):
        return self._dao._get_session()

    def drawable(self, variant_id) -> list[tuple[str, int]]:
        """``(location_id, available)`` rows with stock, in the order reservations draw from."""
        level = self._dao.database_model_cls
        location = _model(StockLocation)
        rows = self._session().execute(
            select(level.location_id, level.available)
            .join(location, location.id == level.location_id)
            .where(level.variant_id == str(variant_id), level.available > 0)
            .order_by(location.priority, location.created_at, location.id)
        )
        return [(location_id, int(available)) for location_id, available in rows]

    def breakdown(self, variant_id) -> list[tuple]:
        """``(location_id, name, priority, available, provisioned)`` for every row of a variant."""
        level = self._dao.database_model_cls
        location = _model(StockLocation)
        return list(
            self._session().execute(
                select(
                    level.location_id,
                    location.name,
                    location.priority,
                    level.available,
                    level.provisioned,
                )
                .join(location, location.id == level.location_id)
                .where(level.variant_id == str(variant_id))
                .order_by(location.priority, location.created_at, location.id)
            )
        )

    def available_at(self, variant_id, location_id) -> int:
        level = self._dao.database_model_cls
        available = self._session().scalar(select(level.available).where(level.id == level_id(variant_id, location_id)))
        return int(available or 0)

    def totals(self, variant_ids) -> dict[str, int]:
        level = self._dao.database_model_cls
        ids = [str(variant_id) for variant_id in variant_ids]
        rows = self._session().execute(
            select(level.variant_id, func.sum(level.available))
            .where(level.variant_id.in_(ids))
            .group_by(level.variant_id)
        )
        totals = dict.fromkeys(ids, 0)
        for variant_id, total in rows:
            totals[variant_id] = int(total or 0)
        return totals

    def sums(self, variant_id) -> tuple[int, int]:
        """``(Σ available, Σ provisioned)`` for a variant."""
        level = self._dao.database_model_cls
        available, provisioned = self._session().execute(
            select(
                func.coalesce(func.sum(level.available), 0),
                func.coalesce(func.sum(level.provisioned), 0),
            ).where(level.variant_id == str(variant_id))
        ).one()
        return int(available), int(provisioned)

    def decrement(self, variant_id, location_id, amount: int) -> bool:
        """Take ``amount`` units if the row still has them; False when another writer got there first."""
        level = self._dao.database_model_cls
        result = self._session().execute(
            update(level)
            .where(
                level.id == level_id(variant_id, location_id),
                level.available >= amount,
            )
            .values(available=level.available - amount, updated_at=datetime.now(UTC))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def write_off(self, variant_id, location_id, amount: int) -> bool:
        """Remove ``amount`` units from the shelf and the provisioned count, never below zero."""
        level = self._dao.database_model_cls
        result = self._session().execute(
            update(level)
            .where(
                level.id == level_id(variant_id, location_id),
                level.available >= amount,
            )
            .values(
                available=level.available - amount,
                provisioned=level.provisioned - amount,
                updated_at=datetime.now(UTC),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def credit(self, variant_id, location_id, amount: int, provisioned: bool = False) -> None:
        """Put ``amount`` units on the shelf, opening the row when the variant has none there yet."""
        level = self._dao.database_model_cls
        values = {"available": level.available + amount, "updated_at": datetime.now(UTC)}
        if provisioned:
            values["provisioned"] = level.provisioned + amount
        result = self._session().execute(
            update(level)
            .where(level.id == level_id(variant_id, location_id))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.add(InventoryLevel.open(variant_id, location_id, amount))


@storefront.repository(part_of=Reservation)
class ReservationRepository:
    def claim_release(self, reservation_id, reason: str) -> bool:
        """Flip ``released_at`` from null; only one caller ever wins the flip."""
        reservation = self._dao.database_model_cls
        result = self._dao._get_session().execute(
            update(reservation)
            .where(reservation.id == str(reservation_id), reservation.released_at.is_(None))
            .values(released_at=datetime.now(UTC), release_reason=reason)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def outstanding_units(self, variant_id) -> int:
        """Units of a variant held by reservations that have not been released."""
        reservation = self._dao.database_model_cls
        allocation = _model(Allocation)
        total = self._dao._get_session().scalar(
            select(func.coalesce(func.sum(allocation.quantity), 0))
            .select_from(allocation)
            .join(reservation, reservation.id == allocation.reservation_id)
            .where(allocation.variant_id == str(variant_id), reservation.released_at.is_(None))
        )
        return int(total or 0)

    def remove(self, reservation: Reservation) -> None:
        for allocation in reservation.allocations:
            current_domain.repository_for(Allocation)._dao.delete(allocation)
        self._dao.delete(reservation)
