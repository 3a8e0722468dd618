"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- Product Request Schemas ---


class VariantSchema(BaseModel):
    title: str | None = Field(None, max_length=255)
    sku: str | None = Field(None, max_length=64)
    price: float | None = Field(None, ge=0)
    sale_price: float | None = Field(None, ge=0)


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Classic Black T-Shirt",
                    "sku": "TSHIRT-BLK",
                    "price": 25.0,
                    "track_inventory": True,
                    "allow_backorder": False,
                    "variants": [
                        {"title": "M", "sku": "TSHIRT-BLK-M"},
                        {"title": "L", "sku": "TSHIRT-BLK-L"},
                    ],
                }
            ]
        }
    }

    title: str = Field(..., max_length=255)
    sku: str | None = Field(None, max_length=64)
    price: float = Field(0.0, ge=0)
    sale_price: float | None = Field(None, ge=0)
    status: str | None = Field(None, max_length=20)
    track_inventory: bool = True
    allow_backorder: bool = False
    variants: list[VariantSchema] = []


# --- Response Schemas ---


class VariantResponse(BaseModel):
    id: str
    title: str | None = None
    sku: str | None = None
    price: float | None = None
    sale_price: float | None = None


class ProductResponse(BaseModel):
    id: str
    title: str
    sku: str | None = None
    price: float
    sale_price: float | None = None
    status: str
    track_inventory: bool
    allow_backorder: bool
    variants: list[VariantResponse] = []
