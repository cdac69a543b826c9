"""Storefront bounded context: Catalog, Shopping Cart and Checkout.

Holds the cart/order domain engine of a catalog-and-checkout client: pricing,
cart mutation, checkout validation, order building and order status
progression. The REST backend is reached through the gateway port.
"""

import structlog
from protean.domain import Domain

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)
