"""Stock reservation — commands and handler."""

import json

from protean import handle
from protean.fields import Identifier, String, Text

from inventory.stock.ledger import StockLedger
from inventory.stock.stock import InventoryLevel
from shared.domain import storefront


@storefront.command(part_of="InventoryLevel")
class ReserveStock:
    """Take a set of lines out of stock as one unit."""

    lines = Text(required=True)  # JSON: list of [variant_id, quantity]


@storefront.command(part_of="InventoryLevel")
class ReleaseReservation:
    """Return a reservation's units to the locations they came from."""

    reservation_id = Identifier(required=True)
    reason = String(max_length=50, default="released")


@storefront.command_handler(part_of=InventoryLevel)
class ReservationHandler:
    @handle(ReserveStock)
    def reserve_stock(self, command):
        reservation = StockLedger().reserve(json.loads(command.lines))
        return str(reservation.id)

    @handle(ReleaseReservation)
    def release_reservation(self, command):
        return StockLedger().release(command.reservation_id, reason=command.reason)
