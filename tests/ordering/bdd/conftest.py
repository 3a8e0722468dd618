"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.order.lifecycle import OrderInput, OrderLineInput
from pytest_bdd import given, parsers, then, when
from shared.errors import StoreError

OWNER = "jane@example.com"


@pytest.fixture()
def outcome():
    """Container for the result or the refusal of the last order action."""
    return {"order": None, "exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse("a customer ordered {quantity:d} of {stock:d} units in stock"),
    target_fixture="order",
)
def _(manager, make_product, ledger, location, clock, email_channel, quantity, stock):
    product = make_product(title="Classic Tee")
    ledger.provision(product.variants[0].id, location.id, stock)
    return manager.create_order(
        OrderInput(
            email=OWNER,
            items=[OrderLineInput(product_id=product.id, variant_id=product.variants[0].id, quantity=quantity)],
        )
    )


@given("the order was shipped", target_fixture="order")
def _(manager, order):
    manager.update_status(order.id, "processing")
    return manager.update_status(order.id, "shipped")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse("the customer cancels the order {hours:d} hours after placing it"))
def _(manager, clock, order, outcome, hours):
    clock.advance(hours=hours)
    try:
        outcome["order"] = manager.cancel_order(order.id, OWNER)
    except StoreError as exc:
        outcome["exc"] = exc


@when("the customer cancels the order")
def _(manager, order, outcome):
    try:
        outcome["order"] = manager.cancel_order(order.id, OWNER)
    except StoreError as exc:
        outcome["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the cancellation is refused with "{kind}"'))
def _(outcome, kind):
    assert outcome["exc"] is not None, "Expected the cancellation to be refused"
    assert outcome["exc"].kind.value == kind


@then(parsers.cfparse('the order is "{status}"'))
def _(manager, order, status):
    assert manager.get_order(order.id).status == status


@then(parsers.cfparse("{count:d} units are in stock"))
def _(ledger, order, count):
    [item] = order.items
    assert ledger.get_stock(item.variant_id) == count


@then("the customer is emailed about the cancellation")
def _(email_channel, order):
    assert email_channel.sent_emails[-1]["subject"] == f"Order #{order.order_number} Cancelled"
