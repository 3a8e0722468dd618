"""FastAPI endpoints for the Catalogue domain."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from catalogue.api.schemas import CreateProductRequest, ProductResponse, VariantResponse
from catalogue.product.creation import CreateProduct
from catalogue.product.product import Product

product_router = APIRouter(prefix="/products", tags=["products"])


def _product_response(product) -> ProductResponse:
    return ProductResponse(
        id=str(product.id),
        title=product.title,
        sku=product.sku,
        price=product.price,
        sale_price=product.sale_price,
        status=product.status,
        track_inventory=product.track_inventory,
        allow_backorder=product.allow_backorder,
        variants=[
            VariantResponse(
                id=str(variant.id),
                title=variant.title,
                sku=variant.sku,
                price=variant.price,
                sale_price=variant.sale_price,
            )
            for variant in sorted(product.variants, key=lambda variant: variant.position or 0)
        ],
    )


@product_router.post("", status_code=201, response_model=ProductResponse)
async def create_product(body: CreateProductRequest) -> ProductResponse:
    command = CreateProduct(
        title=body.title,
        sku=body.sku,
        price=body.price,
        sale_price=body.sale_price,
        status=body.status,
        track_inventory=body.track_inventory,
        allow_backorder=body.allow_backorder,
        variants=json.dumps([variant.model_dump() for variant in body.variants]),
    )
    product_id = current_domain.process(command, asynchronous=False)
    return _product_response(current_domain.repository_for(Product).get(product_id))


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return _product_response(current_domain.repository_for(Product).get(product_id))
