"""Tests for the order state machine and ownership rules."""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from ordering.order.order import (
    CANCELLABLE_STATES,
    TERMINAL_STATES,
    Order,
    OrderStatus,
    as_utc,
    can_transition,
)


class TestTransitions:
    @pytest.mark.parametrize(
        "current, target",
        [
            (OrderStatus.PENDING, OrderStatus.PROCESSING),
            (OrderStatus.PROCESSING, OrderStatus.SHIPPED),
            (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
            (OrderStatus.PENDING, OrderStatus.CANCELLED),
            (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
            (OrderStatus.PENDING, OrderStatus.REFUNDED),
            (OrderStatus.PROCESSING, OrderStatus.REFUNDED),
            (OrderStatus.SHIPPED, OrderStatus.REFUNDED),
        ],
    )
    def test_allowed(self, current, target):
        assert can_transition(current, target)

    @pytest.mark.parametrize(
        "current, target",
        [
            (OrderStatus.PENDING, OrderStatus.SHIPPED),
            (OrderStatus.PENDING, OrderStatus.DELIVERED),
            (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
            (OrderStatus.SHIPPED, OrderStatus.PROCESSING),
            (OrderStatus.DELIVERED, OrderStatus.REFUNDED),
        ],
    )
    def test_rejected(self, current, target):
        assert not can_transition(current, target)

    @pytest.mark.parametrize("terminal", [OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.REFUNDED])
    def test_terminal_states_have_no_exit(self, terminal):
        assert terminal in TERMINAL_STATES
        assert not any(can_transition(terminal, target) for target in OrderStatus)

    def test_only_pending_and_processing_are_cancellable(self):
        assert CANCELLABLE_STATES == {OrderStatus.PENDING, OrderStatus.PROCESSING}


class TestOrderRecord:
    def test_status_helpers(self):
        order = Order(order_number=1001, email="jane@example.com", status="shipped")
        assert order.order_status == OrderStatus.SHIPPED
        assert not order.is_terminal
        assert order.can_transition_to(OrderStatus.DELIVERED)
        assert not order.can_transition_to(OrderStatus.CANCELLED)

    @pytest.mark.parametrize("status", ["delivered", "cancelled", "refunded"])
    def test_terminal_orders(self, status):
        assert Order(order_number=1001, email="jane@example.com", status=status).is_terminal

    def test_ownership_ignores_case_and_whitespace(self):
        order = Order(order_number=1001, email="Jane.Doe@Example.com")
        assert order.belongs_to("  jane.doe@example.COM ")

    def test_ownership_rejects_other_or_missing_email(self):
        order = Order(order_number=1001, email="jane@example.com")
        assert not order.belongs_to("john@example.com")
        assert not order.belongs_to("")
        assert not order.belongs_to(None)


class TestAsUtc:
    def test_naive_values_are_treated_as_utc(self):
        assert as_utc(datetime(2024, 1, 1, 12, 0)) == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def test_aware_values_are_converted(self):
        value = datetime(2024, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        assert as_utc(value) == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
