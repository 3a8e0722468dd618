"""Application tests for resolving stock policies from the catalogue."""

import pytest
from inventory.stock.policy import StockPolicy, StockPolicyResolver
from protean.exceptions import ObjectNotFoundError


@pytest.fixture()
def policies():
    return StockPolicyResolver()


class TestResolve:
    def test_default_product_is_tracked(self, policies, make_product):
        product = make_product()
        assert policies.resolve(product.id) == StockPolicy(track_inventory=True, allow_backorder=False)

    def test_untracked_product(self, policies, make_product):
        product = make_product(track_inventory=False)
        assert policies.resolve(product.id).track_inventory is False

    def test_backorder_product(self, policies, make_product):
        product = make_product(allow_backorder=True)
        assert policies.resolve(product.id).allow_backorder is True

    def test_unknown_product(self, policies):
        with pytest.raises(ObjectNotFoundError):
            policies.resolve("missing")


class TestResolveForVariant:
    def test_variant_carries_product_policy(self, policies, make_product):
        product = make_product(title="Hoodie", allow_backorder=True, variants=("S", "M"))
        resolved = policies.resolve_for_variant(product.variants[1].id)
        assert resolved.product_id == str(product.id)
        assert resolved.product_title == "Hoodie"
        assert resolved.product_active is True
        assert resolved.policy.allow_backorder is True

    def test_unknown_variant(self, policies):
        with pytest.raises(ObjectNotFoundError):
            policies.resolve_for_variant("missing")

    def test_batch_omits_unknown_variants(self, policies, make_product):
        product = make_product(variants=("S", "M"))
        ids = [str(v.id) for v in product.variants]
        resolved = policies.resolve_for_variants([*ids, "missing"])
        assert set(resolved) == set(ids)

    def test_draft_product_is_not_active(self, policies, make_product):
        product = make_product(status="draft")
        assert policies.resolve_for_variant(product.variants[0].id).product_active is False
