from protean.utils.globals import current_domain

from ordering.order.order import Order, OrderItem
from shared.domain import storefront


@storefront.repository(part_of=Order)
class OrderRepository:
    def for_customer(self, customer_id) -> list[Order]:
        """Newest first; ties on ``created_at`` fall back to the higher order number."""
        return (
            self.query.filter(customer_id=str(customer_id))
            .order_by(["-created_at", "-order_number"])
            .limit(None)
            .all()
            .items
        )

    def remove(self, order: Order) -> None:
        for item in order.items:
            current_domain.repository_for(OrderItem)._dao.delete(item)
        self._dao.delete(order)
