"""Storefront FastAPI application.

Single-domain web server that processes commands synchronously via HTTP.
Every request runs inside the storefront domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay; STORE_DATABASE_URL selects the database.
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.api import health_router, install_domain_context, register_exception_handlers
from shared.config import get_settings
from shared.domain import storefront
from shared.logging import configure_logging

settings = get_settings()
configure_logging(settings)
storefront.init()

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title=f"{settings.store_name} API",
    description="Storefront stock ledger and order lifecycle",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_domain_context(app)
register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from catalogue.api import product_router  # noqa: E402
from inventory.api import inventory_router  # noqa: E402
from ordering.api import admin_order_router, customer_router, order_router  # noqa: E402

app.include_router(product_router)
app.include_router(inventory_router)
app.include_router(order_router)
app.include_router(customer_router)
app.include_router(admin_order_router)
app.include_router(health_router)


logger.info("Application created", env=settings.env, store=settings.store_name)
