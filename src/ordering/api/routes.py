"""FastAPI routes for the Ordering domain — order placement, cancellation and back-office."""

import json

from fastapi import APIRouter, Header
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    CreateOrderRequest,
    OrderResponse,
    StatusResponse,
    UpdateStatusRequest,
)
from ordering.order.cancellation import AdminCancelOrder, CancelOrder
from ordering.order.creation import CreateOrder
from ordering.order.deletion import DeleteOrder
from ordering.order.fulfillment import UpdateOrderStatus
from ordering.order.lifecycle import OrderLifecycleManager

# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(body: CreateOrderRequest) -> OrderResponse:
    command = CreateOrder(
        email=body.email,
        customer_id=body.customer_id,
        phone=body.phone,
        shipping_address=body.shipping_address.model_dump() if body.shipping_address else None,
        billing_address=body.billing_address.model_dump() if body.billing_address else None,
        items=json.dumps([item.model_dump() for item in body.items]),
    )
    order_id = current_domain.process(command, asynchronous=False)
    return OrderResponse.from_order(OrderLifecycleManager().get_order(order_id))


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return OrderResponse.from_order(OrderLifecycleManager().get_order(order_id))


@order_router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(order_id: str, x_requester_email: str = Header(default="")) -> OrderResponse:
    # The requester email is verified upstream by the identity layer
    current_domain.process(CancelOrder(order_id=order_id, requester_email=x_requester_email), asynchronous=False)
    return OrderResponse.from_order(OrderLifecycleManager().get_order(order_id))


# ---------------------------------------------------------------------------
# Customer Router
# ---------------------------------------------------------------------------
customer_router = APIRouter(prefix="/customers", tags=["orders"])


@customer_router.get("/{customer_id}/orders", response_model=list[OrderResponse])
async def list_customer_orders(customer_id: str) -> list[OrderResponse]:
    return [OrderResponse.from_order(order) for order in OrderLifecycleManager().list_customer_orders(customer_id)]


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_order_router = APIRouter(prefix="/admin/orders", tags=["admin"])


@admin_order_router.post("/{order_id}/cancel", response_model=OrderResponse)
async def admin_cancel_order(order_id: str) -> OrderResponse:
    current_domain.process(AdminCancelOrder(order_id=order_id), asynchronous=False)
    return OrderResponse.from_order(OrderLifecycleManager().get_order(order_id))


@admin_order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(order_id: str, body: UpdateStatusRequest) -> OrderResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        payment_status=body.payment_status,
        fulfillment_status=body.fulfillment_status,
        admin_message=body.admin_message,
    )
    current_domain.process(command, asynchronous=False)
    return OrderResponse.from_order(OrderLifecycleManager().get_order(order_id))


@admin_order_router.delete("/{order_id}", response_model=StatusResponse)
async def delete_order(order_id: str) -> StatusResponse:
    current_domain.process(DeleteOrder(order_id=order_id), asynchronous=False)
    return StatusResponse()
