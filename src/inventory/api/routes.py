"""FastAPI routes for the Inventory domain — stock levels, locations and availability."""

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain

from inventory.api.schemas import (
    AdjustStockRequest,
    AvailabilityResponse,
    CartErrorSchema,
    CartValidationResponse,
    CreateLocationRequest,
    LevelResponse,
    LocationResponse,
    ProvisionStockRequest,
    StatusResponse,
    StockBatchRequest,
    StockBatchResponse,
    StockResponse,
    ValidateCartRequest,
)
from inventory.stock.adjustment import AdjustStock
from inventory.stock.availability import AvailabilityChecker, CartLine
from inventory.stock.ledger import StockLedger
from inventory.stock.provisioning import CreateLocation, ProvisionStock

# ---------------------------------------------------------------------------
# Inventory Router
# ---------------------------------------------------------------------------
inventory_router = APIRouter(prefix="/inventory", tags=["inventory"])


@inventory_router.post("/locations", status_code=201, response_model=LocationResponse)
async def create_location(body: CreateLocationRequest) -> LocationResponse:
    command = CreateLocation(name=body.name, priority=body.priority)
    location_id = current_domain.process(command, asynchronous=False)
    return LocationResponse(id=location_id, name=body.name, priority=body.priority)


@inventory_router.get("/locations", response_model=list[LocationResponse])
async def list_locations() -> list[LocationResponse]:
    return [
        LocationResponse(id=str(location.id), name=location.name, priority=location.priority)
        for location in StockLedger().list_locations()
    ]


@inventory_router.get("/variants/{variant_id}/stock", response_model=StockResponse)
async def get_stock(variant_id: str) -> StockResponse:
    levels = StockLedger().levels_for(variant_id)
    return StockResponse(
        variant_id=variant_id,
        available=sum(level.available for level in levels),
        levels=[
            LevelResponse(
                location_id=level.location_id,
                location_name=level.location_name,
                available=level.available,
            )
            for level in levels
        ],
    )


@inventory_router.post("/stock/batch", response_model=StockBatchResponse)
async def get_stock_batch(body: StockBatchRequest) -> StockBatchResponse:
    return StockBatchResponse(stock=StockLedger().get_stock_batch(body.variant_ids))


@inventory_router.post("/variants/{variant_id}/provision", response_model=StatusResponse)
async def provision_stock(variant_id: str, body: ProvisionStockRequest) -> StatusResponse:
    command = ProvisionStock(variant_id=variant_id, location_id=body.location_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@inventory_router.post("/variants/{variant_id}/adjust", response_model=StatusResponse)
async def adjust_stock(variant_id: str, body: AdjustStockRequest) -> StatusResponse:
    command = AdjustStock(
        variant_id=variant_id,
        location_id=body.location_id,
        delta=body.delta,
        reason=body.reason,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Availability
# ---------------------------------------------------------------------------
@inventory_router.get("/variants/{variant_id}/availability", response_model=AvailabilityResponse)
async def check_availability(variant_id: str, quantity: int = Query(default=1)) -> AvailabilityResponse:
    check = AvailabilityChecker().check_variant(variant_id, quantity)
    return AvailabilityResponse(variant_id=variant_id, available=check.available, is_available=check.is_available)


@inventory_router.post("/cart/validate", response_model=CartValidationResponse)
async def validate_cart(body: ValidateCartRequest) -> CartValidationResponse:
    result = AvailabilityChecker().validate_cart(
        [
            CartLine(id=item.id, variant_id=item.variant_id, quantity=item.quantity, product_id=item.product_id)
            for item in body.items
        ]
    )
    return CartValidationResponse(
        is_valid=result.is_valid,
        errors=[
            CartErrorSchema(item_id=error.item_id, message=error.message, available=error.available, code=error.code)
            for error in result.errors
        ],
    )
