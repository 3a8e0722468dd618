"""Product creation — command and handler."""

import json

from protean import handle
from protean.fields import Boolean, Float, String, Text
from protean.utils.globals import current_domain

from catalogue.product.product import Product
from shared.domain import storefront


@storefront.command(part_of="Product")
class CreateProduct:
    title = String(required=True, max_length=255)
    sku = String(max_length=64)
    price = Float(default=0.0)
    sale_price = Float()
    status = String(max_length=20)
    track_inventory = Boolean(default=True)
    allow_backorder = Boolean(default=False)
    variants = Text()  # JSON: list of {title, sku, price, sale_price}


@storefront.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            title=command.title,
            price=command.price,
            sku=command.sku,
            sale_price=command.sale_price,
            status=command.status,
            track_inventory=command.track_inventory,
            allow_backorder=command.allow_backorder,
        )
        for variant in json.loads(command.variants) if command.variants else []:
            product.add_variant(
                title=variant.get("title"),
                sku=variant.get("sku"),
                price=variant.get("price"),
                sale_price=variant.get("sale_price"),
            )
        current_domain.repository_for(Product).add(product)
        return str(product.id)
