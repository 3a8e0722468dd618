"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state — no cross-user sharing.
State tracks entity IDs returned by creation endpoints so follow-up
operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """Tracks one customer's walk from catalogue to cancellation."""

    email: str | None = None
    customer_id: str | None = None
    location_id: str | None = None
    product_id: str | None = None
    variant_ids: list[str] = field(default_factory=list)
    order_id: str | None = None
    current_status: str = "pending"


@dataclass
class BackOfficeState:
    """Tracks an order being moved along by the back office."""

    location_id: str | None = None
    product_id: str | None = None
    variant_id: str | None = None
    order_id: str | None = None
    current_status: str = "pending"
