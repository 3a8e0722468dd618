"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the storefront's validation
rules and match the exact field names expected by the API's Pydantic
request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()


def valid_email() -> str:
    """Generate emails that pass the order email check: one @, no spaces, a dotted domain."""
    local = fake.user_name()[:20]
    domain = fake.free_email_domain()
    return f"{local}.{uuid.uuid4().hex[:4]}@{domain}"


def valid_sku(prefix: str = "LT") -> str:
    suffix = uuid.uuid4().hex[:8].upper()
    return f"{prefix}-{suffix}"


# ---------- Catalogue ----------


def product_data(num_variants: int = 2, track_inventory: bool = True, allow_backorder: bool = False) -> dict:
    """Generate CreateProductRequest payload matching schema field names."""
    sku = valid_sku("PROD")
    word = fake.word().capitalize()
    return {
        "title": f"{word} {fake.word().capitalize()}"[:255],
        "sku": sku,
        "price": round(random.uniform(9.99, 149.99), 2),
        "track_inventory": track_inventory,
        "allow_backorder": allow_backorder,
        "variants": [
            {"title": size, "sku": f"{sku}-{size}"} for size in ["S", "M", "L", "XL"][: max(num_variants, 1)]
        ],
    }


# ---------- Inventory ----------


def location_data(priority: int | None = None) -> dict:
    """Generate CreateLocationRequest payload."""
    return {
        "name": f"{fake.city()} Warehouse {random.randint(1, 99)}"[:100],
        "priority": priority if priority is not None else random.randint(0, 5),
    }


def provision_data(location_id: str, quantity: int | None = None) -> dict:
    return {"location_id": location_id, "quantity": quantity or random.randint(5, 50)}


# ---------- Ordering ----------


def order_address() -> dict:
    """Generate AddressSchema payload for order shipping/billing."""
    return {
        "first_name": fake.first_name()[:100],
        "last_name": fake.last_name()[:100],
        "address1": fake.street_address()[:255],
        "city": fake.city()[:100],
        "province": fake.state_abbr(),
        "postal_code": fake.zipcode()[:20],
        "country": "US",
    }


def order_data(product_id: str, variant_ids: list[str], email: str | None = None, customer_id: str | None = None) -> dict:
    """Generate CreateOrderRequest payload; cart lines are shuffled to mix the draw order."""
    variant_ids = list(variant_ids)
    random.shuffle(variant_ids)
    return {
        "email": email or valid_email(),
        "customer_id": customer_id or f"cust-{uuid.uuid4().hex[:8]}",
        "shipping_address": order_address(),
        "items": [
            {"product_id": product_id, "variant_id": variant_id, "quantity": random.randint(1, 2)}
            for variant_id in variant_ids
        ],
    }


def admin_message() -> str:
    return fake.sentence(nb_words=12)
