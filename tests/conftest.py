import os
import tempfile
import threading
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture

# The domain reads its database from the environment when it is first imported
os.environ.setdefault(
    "STORE_DATABASE_URL",
    f"sqlite:///{Path(tempfile.mkdtemp(prefix='storefront-')) / 'storefront.db'}",
)


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(scope="session")
def storefront_bed():
    from shared.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield


class FrozenClock:
    """Stub for ``storefront.clock``; time moves only when a test advances it."""

    def __init__(self, current: datetime):
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


@pytest.fixture()
def clock():
    from protean.utils import SystemClock
    from shared.domain import storefront

    frozen = FrozenClock(datetime(2024, 1, 15, 12, 0, tzinfo=UTC))
    storefront.clock = frozen
    yield frozen
    storefront.clock = SystemClock()


@pytest.fixture()
def email_channel():
    """Fresh fake mailbox installed as the email channel for one test."""
    from notifications.channel import register_channel, reset_channels
    from notifications.channel.fake_email import FakeEmailAdapter
    from notifications.notification.notification import NotificationChannel

    channel = FakeEmailAdapter()
    register_channel(NotificationChannel.EMAIL.value, channel)
    yield channel
    reset_channels()


@pytest.fixture()
def ledger():
    from inventory.stock.ledger import StockLedger

    return StockLedger()


@pytest.fixture()
def manager():
    from ordering.order.lifecycle import OrderLifecycleManager

    return OrderLifecycleManager()


@pytest.fixture()
def location(ledger):
    return ledger.create_location("Main Warehouse", priority=0)


@pytest.fixture()
def make_product():
    """Factory: persist a product with its variants and return it."""
    from catalogue.product.product import Product
    from protean.utils.globals import current_domain

    def _make(
        title="Classic Tee",
        price=20.0,
        sale_price=None,
        track_inventory=True,
        allow_backorder=False,
        status="active",
        variants=("Default",),
    ):
        product = Product.create(
            title=title,
            sku=title.upper().replace(" ", "-"),
            price=price,
            sale_price=sale_price,
            status=status,
            track_inventory=track_inventory,
            allow_backorder=allow_backorder,
        )
        for variant in variants:
            fields = variant if isinstance(variant, dict) else {"title": variant}
            product.add_variant(**fields)
        current_domain.repository_for(Product).add(product)
        return product

    return _make


@pytest.fixture()
def in_thread():
    """Wrap a callable so it runs inside its own storefront domain context, as a worker thread needs."""
    from shared.domain import storefront

    def _wrap(fn):
        def _run(*args, **kwargs):
            with storefront.domain_context():
                return fn(*args, **kwargs)

        return _run

    return _wrap


@pytest.fixture()
def client():
    """The storefront routers on a bare FastAPI app, wired the way ``app.py`` wires them."""
    from catalogue.api import product_router
    from fastapi import FastAPI
    from fastapi.testclient import TestClient
    from inventory.api import inventory_router
    from ordering.api import admin_order_router, customer_router, order_router
    from shared.api import health_router, install_domain_context, register_exception_handlers

    app = FastAPI()
    install_domain_context(app)
    register_exception_handlers(app)
    for router in (product_router, inventory_router, order_router, customer_router, admin_order_router, health_router):
        app.include_router(router)
    return TestClient(app)


@pytest.fixture()
def run_concurrently(in_thread):
    """Start every call at the same instant; return one (result, error) pair per call."""

    def _run(*calls):
        barrier = threading.Barrier(len(calls))
        outcomes = [None] * len(calls)

        def worker(index, call):
            barrier.wait()
            try:
                outcomes[index] = (call(), None)
            except Exception as exc:  # noqa: BLE001
                outcomes[index] = (None, exc)

        threads = [threading.Thread(target=in_thread(worker), args=(i, call)) for i, call in enumerate(calls)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=60)
        return outcomes

    return _run
