"""Concurrent checkouts and cancellations against a shared SQLite file database."""

import pytest
from ordering.order.lifecycle import OrderInput, OrderLineInput
from protean.exceptions import ExpectedVersionError
from shared.errors import InvalidTransitionError, OutOfStockError

pytestmark = pytest.mark.slow


@pytest.fixture()
def last_units(make_product, ledger, location):
    product = make_product(title="Limited Print")
    ledger.provision(product.variants[0].id, location.id, 3)
    return product


def _buy(manager, product, email):
    return manager.create_order(
        OrderInput(
            email=email,
            items=[OrderLineInput(product_id=product.id, variant_id=product.variants[0].id, quantity=1)],
        )
    )


class TestCheckoutRace:
    def test_only_available_units_are_sold(self, manager, ledger, last_units, run_concurrently):
        outcomes = run_concurrently(*[lambda i=i: _buy(manager, last_units, f"buyer{i}@example.com") for i in range(6)])

        orders = [result for result, error in outcomes if error is None]
        errors = [error for _, error in outcomes if error is not None]
        assert len(orders) == 3
        assert len(errors) == 3
        assert all(isinstance(error, OutOfStockError) for error in errors)
        assert len({order.order_number for order in orders}) == 3
        assert ledger.get_stock(last_units.variants[0].id) == 0
        assert ledger.audit(last_units.variants[0].id).is_balanced


class TestCancellationRace:
    def test_concurrent_cancels_restock_once(self, manager, ledger, last_units, run_concurrently):
        order = _buy(manager, last_units, "jane@example.com")

        outcomes = run_concurrently(
            lambda: manager.cancel_order(order.id, "jane@example.com"),
            lambda: manager.admin_cancel_order(order.id),
            lambda: manager.cancel_order(order.id, "jane@example.com"),
        )

        successes = [result for result, error in outcomes if error is None]
        errors = [error for _, error in outcomes if error is not None]
        assert len(successes) == 1
        # Losers either read the cancelled order or lose the version check at commit
        assert all(isinstance(error, (InvalidTransitionError, ExpectedVersionError)) for error in errors)
        assert ledger.get_stock(last_units.variants[0].id) == 3
        assert ledger.audit(last_units.variants[0].id).is_balanced
        assert manager.get_order(order.id).status == "cancelled"
