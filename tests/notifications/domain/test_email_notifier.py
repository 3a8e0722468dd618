"""Tests for the email order notifier and the fake email channel."""

import pytest
from notifications.channel import get_channel, register_channel, reset_channels
from notifications.channel.fake_email import EmailDeliveryError, FakeEmailAdapter
from notifications.notification.notification import NotificationStatus
from notifications.notifier import EmailOrderNotifier
from ordering.order.order import Order, OrderItem
from shared.config import Settings


@pytest.fixture()
def channel():
    return FakeEmailAdapter()


@pytest.fixture()
def email_notifier(channel):
    return EmailOrderNotifier(Settings(_env_file=None, store_name="Tailex Store"), channel=channel)


@pytest.fixture()
def order():
    order = Order(
        id="ord-001",
        order_number=1001,
        email="jane@example.com",
        status="pending",
        subtotal=40.0,
        shipping_total=9.99,
        total=49.99,
    )
    order.add_items(
        OrderItem(
            product_id="prod-001",
            title="Classic Tee",
            variant_title=None,
            quantity=2,
            unit_price=20.0,
            total_price=40.0,
        )
    )
    return order


class TestEmailOrderNotifier:
    def test_order_created(self, email_notifier, channel, order):
        notification = email_notifier.notify_order_created(order)

        assert notification.status == NotificationStatus.SENT.value
        assert notification.message_id == channel.sent_emails[0]["message_id"]
        [email] = channel.sent_emails
        assert email["to"] == "jane@example.com"
        assert email["sender"] == "orders@tailex.store"
        assert "Classic Tee x2 @ $20.00" in email["body"]

    def test_order_cancelled(self, email_notifier, channel, order):
        order.status = "cancelled"
        email_notifier.notify_order_cancelled(order, cancelled_by="admin")
        assert channel.sent_emails[0]["subject"] == "Order #1001 Cancelled"

    def test_status_changed(self, email_notifier, channel, order):
        order.status = "shipped"
        notification = email_notifier.notify_order_status_changed(order, previous_status="processing")
        assert notification.subject == "Order Update #1001: shipped"
        assert "A message from" not in channel.sent_emails[0]["body"]

    def test_status_changed_with_admin_message(self, email_notifier, channel, order):
        order.status = "processing"

        email_notifier.notify_order_status_changed(
            order, previous_status="pending", admin_message="Your engraving is being cut today."
        )

        body = channel.sent_emails[0]["body"]
        assert "A message from Tailex Store:" in body
        assert "Your engraving is being cut today." in body

    def test_money_renders_floats_as_cents(self, email_notifier, channel, order):
        order.total = 49.9
        email_notifier.notify_order_created(order)
        assert "$49.90" in channel.sent_emails[0]["body"]

    def test_failed_delivery_is_recorded(self, email_notifier, channel, order):
        channel.configure(should_succeed=False, failure_reason="Mailbox full")

        notification = email_notifier.notify_order_created(order)

        assert notification.status == NotificationStatus.FAILED.value
        assert notification.failure_reason == "Mailbox full"
        assert channel.sent_emails == []

    def test_transport_errors_propagate(self, email_notifier, channel, order):
        channel.configure(should_raise=True)
        with pytest.raises(EmailDeliveryError):
            email_notifier.notify_order_created(order)


class TestChannelRegistry:
    def setup_method(self):
        reset_channels()

    def teardown_method(self):
        reset_channels()

    def test_email_channel_is_a_singleton(self):
        assert get_channel("Email") is get_channel("Email")
        assert isinstance(get_channel("Email"), FakeEmailAdapter)

    def test_register_custom_adapter(self):
        adapter = FakeEmailAdapter()
        register_channel("Email", adapter)
        assert get_channel() is adapter

    def test_unknown_channel(self):
        with pytest.raises(ValueError):
            get_channel("Pigeon")

    def test_fake_reset(self):
        adapter = FakeEmailAdapter()
        adapter.configure(should_succeed=False)
        adapter.reset()
        assert adapter.send(to="a@example.com", subject="s", body="b")["status"] == "sent"
