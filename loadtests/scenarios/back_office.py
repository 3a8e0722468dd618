"""Back-office load test scenarios.

Moves freshly placed orders along the state machine with admin messages,
and checks that a shipped order refuses customer cancellation.
"""

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import admin_message, order_data, valid_email
from loadtests.helpers.response import error_kind, extract_error_detail
from loadtests.helpers.state import ShopperState
from loadtests.scenarios.checkout import _create_stocked_product


class FulfillmentJourney(SequentialTaskSet):
    """Place order -> Processing (with message) -> Shipped -> Refused cancel -> Delivered."""

    def on_start(self):
        self.state = ShopperState(email=valid_email())

    @task
    def place_order(self):
        if not _create_stocked_product(self.client, self.state, num_variants=1):
            self.interrupt()
        payload = order_data(self.state.product_id, self.state.variant_ids, email=self.state.email)
        with self.client.post("/orders", json=payload, catch_response=True, name="POST /orders") as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["id"]
            else:
                resp.failure(f"Place order failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    def _update(self, body: dict, label: str):
        with self.client.put(
            f"/admin/orders/{self.state.order_id}/status",
            json=body,
            catch_response=True,
            name="PUT /admin/orders/{id}/status",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = resp.json()["status"]
            else:
                resp.failure(f"{label} failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def start_processing(self):
        self._update({"status": "processing", "admin_message": admin_message()}, "Processing")

    @task
    def record_payment(self):
        self._update({"payment_status": "paid"}, "Payment update")

    @task
    def ship(self):
        self._update({"status": "shipped", "fulfillment_status": "fulfilled"}, "Ship")

    @task
    def customer_cancel_is_refused(self):
        with self.client.post(
            f"/orders/{self.state.order_id}/cancel",
            headers={"X-Requester-Email": self.state.email},
            catch_response=True,
            name="POST /orders/{id}/cancel [shipped]",
        ) as resp:
            if resp.status_code == 409 and error_kind(resp) == "INVALID_TRANSITION":
                resp.success()
            else:
                resp.failure(f"Shipped order was not protected: {resp.status_code} — {resp.text[:200]}")

    @task
    def deliver(self):
        self._update({"status": "delivered"}, "Deliver")

    @task
    def done(self):
        self.interrupt()


class BackOfficeUser(HttpUser):
    tasks = [FulfillmentJourney]
    wait_time = between(1, 3)
