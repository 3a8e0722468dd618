"""Shared BDD fixtures and step definitions for the Inventory domain."""

import pytest
from inventory.stock.stock import Reservation
from ordering.order.lifecycle import OrderInput, OrderLineInput
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, then, when
from shared.errors import OutOfStockError


@pytest.fixture()
def checkout(manager):
    """Place one order for ``quantity`` units, naming the variant unless told not to."""

    def _checkout(product, quantity, email, pick_variant=True):
        variant_id = product.variants[0].id if pick_variant else None
        return manager.create_order(
            OrderInput(
                email=email,
                items=[OrderLineInput(product_id=product.id, variant_id=variant_id, quantity=quantity)],
            )
        )

    return _checkout


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a tracked product "{title}" with {stock:d} units in stock'),
    target_fixture="product",
)
def _(make_product, ledger, location, title, stock):
    product = make_product(title=title)
    ledger.provision(product.variants[0].id, location.id, stock)
    return product


@given(parsers.cfparse('an untracked product "{title}"'), target_fixture="product")
def _(make_product, title):
    return make_product(title=title, track_inventory=False)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(
    parsers.cfparse("{buyers:d} customers each order {quantity:d} units at the same time"),
    target_fixture="outcomes",
)
def _(product, checkout, run_concurrently, buyers, quantity):
    return run_concurrently(
        *[lambda i=i: checkout(product, quantity, f"buyer{i}@example.com") for i in range(buyers)]
    )


@when(
    parsers.cfparse("{buyers:d} customers each order {quantity:d} units without choosing a variant"),
    target_fixture="outcomes",
)
def _(product, checkout, buyers, quantity):
    outcomes = []
    for i in range(buyers):
        try:
            outcomes.append((checkout(product, quantity, f"buyer{i}@example.com", pick_variant=False), None))
        except OutOfStockError as exc:
            outcomes.append((None, exc))
    return outcomes


@when(parsers.cfparse("a customer orders {quantity:d} units"), target_fixture="outcomes")
def _(product, checkout, quantity):
    return [(checkout(product, quantity, "jane@example.com"), None)]


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("{count:d} of the orders are placed"))
def _(outcomes, count):
    assert len([order for order, error in outcomes if error is None]) == count


@then(parsers.cfparse("{count:d} of the checkouts fail as out of stock"))
def _(outcomes, count):
    errors = [error for _, error in outcomes if error is not None]
    assert len(errors) == count
    assert all(isinstance(error, OutOfStockError) for error in errors)


@then(parsers.cfparse("the product has {stock:d} units in stock"))
def _(ledger, product, stock):
    assert ledger.get_stock(product.variants[0].id) == stock


@then("the stock ledger balances")
def _(ledger, product):
    assert ledger.audit(product.variants[0].id).is_balanced


@then("the order holds no reservation")
def _(outcomes):
    [(order, _)] = outcomes
    assert order.reservation_id is None
    assert current_domain.repository_for(Reservation).query.all().total == 0
