from ordering.api.routes import admin_order_router, customer_router, order_router

__all__ = ["order_router", "customer_router", "admin_order_router"]
