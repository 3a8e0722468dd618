"""Pydantic request/response schemas for the Ordering API.

These are external contracts, separate from the Order aggregate.
"""

from datetime import datetime
from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    address1: str
    address2: str | None = None
    city: str
    province: str | None = None
    postal_code: str
    country: str
    phone: str | None = None


class OrderLineSchema(BaseModel):
    product_id: str
    variant_id: str | None = None
    quantity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    email: str
    customer_id: str | None = None
    phone: str | None = None
    shipping_address: AddressSchema | None = None
    billing_address: AddressSchema | None = None
    items: list[OrderLineSchema] = Field(min_length=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "email": "jane@example.com",
                    "shipping_address": {
                        "address1": "123 Main St",
                        "city": "Springfield",
                        "postal_code": "62701",
                        "country": "US",
                    },
                    "items": [{"product_id": "prod-001", "variant_id": "var-001", "quantity": 2}],
                }
            ]
        }
    }


class UpdateStatusRequest(BaseModel):
    status: str | None = None
    payment_status: str | None = None
    fulfillment_status: str | None = None
    admin_message: str | None = Field(default=None, max_length=2000)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderItemResponse(BaseModel):
    id: str
    product_id: str
    variant_id: str | None = None
    title: str
    variant_title: str | None = None
    sku: str | None = None
    quantity: int
    unit_price: float
    total_price: float


class OrderResponse(BaseModel):
    id: str
    order_number: int
    email: str
    customer_id: str | None = None
    status: str
    payment_status: str
    fulfillment_status: str
    currency: str
    subtotal: float
    shipping_total: float
    tax_total: float
    total: float
    shipping_address: dict | None = None
    billing_address: dict | None = None
    admin_message: str | None = None
    created_at: datetime
    cancelled_at: datetime | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None
    items: list[OrderItemResponse] = []

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        return cls(
            id=str(order.id),
            order_number=order.order_number,
            email=order.email,
            customer_id=order.customer_id,
            status=order.status,
            payment_status=order.payment_status,
            fulfillment_status=order.fulfillment_status,
            currency=order.currency,
            subtotal=order.subtotal,
            shipping_total=order.shipping_total,
            tax_total=order.tax_total,
            total=order.total,
            shipping_address=order.shipping_address,
            billing_address=order.billing_address,
            admin_message=order.admin_message,
            created_at=order.created_at,
            cancelled_at=order.cancelled_at,
            shipped_at=order.shipped_at,
            delivered_at=order.delivered_at,
            items=[
                OrderItemResponse(
                    id=str(item.id),
                    product_id=str(item.product_id),
                    variant_id=str(item.variant_id) if item.variant_id else None,
                    title=item.title,
                    variant_title=item.variant_title,
                    sku=item.sku,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    total_price=item.total_price,
                )
                for item in order.sorted_items()
            ],
        )


class StatusResponse(BaseModel):
    status: str = "ok"
