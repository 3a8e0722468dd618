"""Checkout load test scenarios.

Two stateful SequentialTaskSet journeys: a shopper who places an order and
cancels it inside the window, and a flash sale where a burst of checkouts goes
after a handful of units on a single product.
"""

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import location_data, order_data, product_data, provision_data, valid_email
from loadtests.helpers.response import error_kind, extract_error_detail
from loadtests.helpers.state import ShopperState


def _create_stocked_product(client, state: ShopperState, quantity: int | None = None, num_variants: int = 2) -> bool:
    """Location -> Product -> Provision each variant. Returns False on the first failure."""
    with client.post(
        "/inventory/locations",
        json=location_data(),
        catch_response=True,
        name="POST /inventory/locations",
    ) as resp:
        if resp.status_code != 201:
            resp.failure(f"Create location failed: {resp.status_code} — {extract_error_detail(resp)}")
            return False
        state.location_id = resp.json()["id"]

    with client.post(
        "/products",
        json=product_data(num_variants=num_variants),
        catch_response=True,
        name="POST /products",
    ) as resp:
        if resp.status_code != 201:
            resp.failure(f"Create product failed: {resp.status_code} — {extract_error_detail(resp)}")
            return False
        product = resp.json()
        state.product_id = product["id"]
        state.variant_ids = [variant["id"] for variant in product["variants"]]

    for variant_id in state.variant_ids:
        with client.post(
            f"/inventory/variants/{variant_id}/provision",
            json=provision_data(state.location_id, quantity),
            catch_response=True,
            name="POST /inventory/variants/{id}/provision",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Provision failed: {resp.status_code} — {extract_error_detail(resp)}")
                return False
    return True


class PlaceAndCancelJourney(SequentialTaskSet):
    """Stock a product -> Validate cart -> Place order -> View -> Cancel -> Check stock.

    Models a customer who changes their mind shortly after checkout.
    Every cancelled order must put its units back.
    """

    def on_start(self):
        self.state = ShopperState(email=valid_email())

    @task
    def stock_product(self):
        if not _create_stocked_product(self.client, self.state):
            self.interrupt()

    @task
    def validate_cart(self):
        items = [
            {"id": str(index), "variant_id": variant_id, "quantity": 1}
            for index, variant_id in enumerate(self.state.variant_ids)
        ]
        with self.client.post(
            "/inventory/cart/validate",
            json={"items": items},
            catch_response=True,
            name="POST /inventory/cart/validate",
        ) as resp:
            if resp.status_code != 200 or not resp.json()["is_valid"]:
                resp.failure(f"Cart rejected: {resp.status_code} — {resp.text[:200]}")
                self.interrupt()

    @task
    def place_order(self):
        payload = order_data(self.state.product_id, self.state.variant_ids, email=self.state.email)
        with self.client.post("/orders", json=payload, catch_response=True, name="POST /orders") as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["id"]
                self.state.customer_id = payload["customer_id"]
            else:
                resp.failure(f"Place order failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def view_order(self):
        self.client.get(f"/orders/{self.state.order_id}", name="GET /orders/{id}")

    @task
    def list_my_orders(self):
        self.client.get(f"/customers/{self.state.customer_id}/orders", name="GET /customers/{id}/orders")

    @task
    def cancel_order(self):
        with self.client.post(
            f"/orders/{self.state.order_id}/cancel",
            headers={"X-Requester-Email": self.state.email},
            catch_response=True,
            name="POST /orders/{id}/cancel",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = "cancelled"
            else:
                resp.failure(f"Cancel failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def check_stock_returned(self):
        for variant_id in self.state.variant_ids:
            with self.client.get(
                f"/inventory/variants/{variant_id}/stock",
                catch_response=True,
                name="GET /inventory/variants/{id}/stock",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Stock read failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class ShopperUser(HttpUser):
    tasks = [PlaceAndCancelJourney]
    wait_time = between(0.5, 2)


class FlashSaleJourney(SequentialTaskSet):
    """Every user stocks 3 units of a single-variant product, then hammers checkout for them.

    The first three orders win; the rest must fail with 409 OUT_OF_STOCK and
    are counted as successes. Anything else is a failure.
    """

    UNITS = 3
    ATTEMPTS = 6

    def on_start(self):
        self.state = ShopperState()

    @task
    def stock_product(self):
        if not _create_stocked_product(self.client, self.state, quantity=self.UNITS, num_variants=1):
            self.interrupt()

    @task
    def rush_checkout(self):
        placed = 0
        for _ in range(self.ATTEMPTS):
            payload = {
                "email": valid_email(),
                "items": [{"product_id": self.state.product_id, "quantity": 1}],
            }
            with self.client.post("/orders", json=payload, catch_response=True, name="POST /orders [flash]") as resp:
                if resp.status_code == 201:
                    placed += 1
                elif resp.status_code == 409 and error_kind(resp) == "OUT_OF_STOCK":
                    resp.success()
                else:
                    resp.failure(f"Flash checkout failed: {resp.status_code} — {extract_error_detail(resp)}")
        if placed > self.UNITS:
            self.user.environment.events.request.fire(
                request_type="CHECK",
                name="oversold",
                response_time=0,
                response_length=0,
                response=None,
                exception=AssertionError(f"{placed} orders for {self.UNITS} units"),
            )

    @task
    def done(self):
        self.interrupt()


class FlashSaleUser(HttpUser):
    tasks = [FlashSaleJourney]
    wait_time = between(0.1, 0.5)
