"""Stock locations and receiving — commands and handler."""

from protean import handle
from protean.fields import Identifier, Integer, String

from inventory.stock.ledger import StockLedger
from inventory.stock.stock import InventoryLevel
from shared.domain import storefront


@storefront.command(part_of="InventoryLevel")
class CreateLocation:
    name = String(required=True, max_length=255)
    priority = Integer(default=0)


@storefront.command(part_of="InventoryLevel")
class ProvisionStock:
    """Receive new units of a variant into a location."""

    variant_id = Identifier(required=True)
    location_id = Identifier(required=True)
    quantity = Integer(required=True)


@storefront.command_handler(part_of=InventoryLevel)
class ProvisioningHandler:
    @handle(CreateLocation)
    def create_location(self, command):
        location = StockLedger().create_location(command.name, priority=command.priority)
        return str(location.id)

    @handle(ProvisionStock)
    def provision_stock(self, command):
        StockLedger().provision(command.variant_id, command.location_id, command.quantity)
