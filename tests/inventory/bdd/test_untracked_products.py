"""BDD tests for products that do not track inventory."""

from pytest_bdd import scenarios

scenarios("features/untracked_products.feature")
