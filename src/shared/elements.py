"""Registers every storefront element with the domain.

``storefront.init()`` traverses only the ``shared`` package, where the
domain is defined; importing the element modules here brings the catalogue,
inventory, ordering and notifications elements along with it.
"""

import catalogue.product.creation  # noqa: F401
import catalogue.product.product  # noqa: F401
import inventory.stock.adjustment  # noqa: F401
import inventory.stock.ledger  # noqa: F401
import inventory.stock.provisioning  # noqa: F401
import inventory.stock.repository  # noqa: F401
import inventory.stock.reservation  # noqa: F401
import inventory.stock.stock  # noqa: F401
import notifications.notification.ordering_events  # noqa: F401
import ordering.order.cancellation  # noqa: F401
import ordering.order.creation  # noqa: F401
import ordering.order.deletion  # noqa: F401
import ordering.order.events  # noqa: F401
import ordering.order.fulfillment  # noqa: F401
import ordering.order.lifecycle  # noqa: F401
import ordering.order.order  # noqa: F401
import ordering.order.repository  # noqa: F401
