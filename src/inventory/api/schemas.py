"""Pydantic request/response schemas for the Inventory API.

These are external contracts, kept separate from the ledger's row models.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Location Schemas
# ---------------------------------------------------------------------------
class CreateLocationRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    priority: int = 0


class LocationResponse(BaseModel):
    id: str
    name: str
    priority: int


# ---------------------------------------------------------------------------
# Stock Request Schemas
# ---------------------------------------------------------------------------
class StockBatchRequest(BaseModel):
    variant_ids: list[str]


class ProvisionStockRequest(BaseModel):
    location_id: str
    quantity: int = Field(ge=1)


class AdjustStockRequest(BaseModel):
    location_id: str
    delta: int
    reason: str = Field(min_length=1)


class CartItemSchema(BaseModel):
    id: str
    variant_id: str | None = None
    product_id: str | None = None
    quantity: int = Field(ge=1, default=1)


class ValidateCartRequest(BaseModel):
    items: list[CartItemSchema]


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class LevelResponse(BaseModel):
    location_id: str
    location_name: str
    available: int


class StockResponse(BaseModel):
    variant_id: str
    available: int
    levels: list[LevelResponse] = []


class StockBatchResponse(BaseModel):
    stock: dict[str, int]


class AvailabilityResponse(BaseModel):
    variant_id: str
    available: int
    is_available: bool


class CartErrorSchema(BaseModel):
    item_id: str
    message: str
    available: int
    code: str


class CartValidationResponse(BaseModel):
    is_valid: bool
    errors: list[CartErrorSchema] = []


class StatusResponse(BaseModel):
    status: str = "ok"
