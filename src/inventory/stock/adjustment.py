"""Stock adjustment — command and handler."""

from protean import handle
from protean.fields import Identifier, Integer, String

from inventory.stock.ledger import StockLedger
from inventory.stock.stock import InventoryLevel
from shared.domain import storefront


@storefront.command(part_of="InventoryLevel")
class AdjustStock:
    """Correct a location's count after a stock take, shrinkage or a receiving error."""

    variant_id = Identifier(required=True)
    location_id = Identifier(required=True)
    delta = Integer(required=True)
    reason = String(required=True, max_length=50)


@storefront.command_handler(part_of=InventoryLevel)
class AdjustStockHandler:
    @handle(AdjustStock)
    def adjust_stock(self, command):
        StockLedger().adjust(
            command.variant_id,
            command.location_id,
            command.delta,
            command.reason,
        )
