"""Stock Policy Resolver — per-product rules deciding whether the ledger is consulted."""

from collections.abc import Sequence
from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from catalogue.product.product import Product, Variant


@dataclass(frozen=True)
class StockPolicy:
    track_inventory: bool = True
    allow_backorder: bool = False

    @property
    def draws_on_ledger(self) -> bool:
        """Only tracked products sold without backorder take units out of stock."""
        return self.track_inventory and not self.allow_backorder


@dataclass(frozen=True)
class VariantPolicy:
    """A variant's owning product together with that product's stock policy."""

    variant_id: str
    product_id: str
    product_title: str
    product_active: bool
    policy: StockPolicy


def policy_of(product: Product) -> StockPolicy:
    return StockPolicy(
        track_inventory=bool(product.track_inventory),
        allow_backorder=bool(product.allow_backorder),
    )


class StockPolicyResolver:
    def resolve(self, product_id: str) -> StockPolicy:
        return policy_of(current_domain.repository_for(Product).get(product_id))

    def resolve_for_variant(self, variant_id: str) -> VariantPolicy:
        policies = self.resolve_for_variants([variant_id])
        if str(variant_id) not in policies:
            raise ObjectNotFoundError(f"Variant {variant_id} not found")
        return policies[str(variant_id)]

    def resolve_for_variants(self, variant_ids: Sequence[str]) -> dict[str, VariantPolicy]:
        """Batch lookup; variants that do not exist are simply absent from the result."""
        ids = list(dict.fromkeys(str(variant_id) for variant_id in variant_ids if variant_id))
        if not ids:
            return {}

        variants = current_domain.repository_for(Variant).query.filter(id__in=ids).limit(None).all().items
        if not variants:
            return {}
        product_ids = list({str(variant.product_id) for variant in variants})
        products = {
            str(product.id): product
            for product in current_domain.repository_for(Product)
            .query.filter(id__in=product_ids)
            .limit(None)
            .all()
            .items
        }

        policies = {}
        for variant in variants:
            product = products.get(str(variant.product_id))
            if product is None:
                continue
            policies[str(variant.id)] = VariantPolicy(
                variant_id=str(variant.id),
                product_id=str(product.id),
                product_title=product.title,
                product_active=product.is_active,
                policy=policy_of(product),
            )
        return policies
