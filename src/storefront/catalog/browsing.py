"""Catalog browsing: product listing, search, categories and favorites.

Keeps the last fetched product list for one session. Favorites are a
client-side preference: toggling one replaces the product with a copy
carrying the new flag, and the set of favorite ids is re-applied whenever the
list is fetched again.
"""

import structlog

from storefront.catalog.product import Product, with_favorite
from storefront.gateway.port import StoreGateway

logger = structlog.get_logger(__name__)


class Catalog:
    def __init__(self, gateway: StoreGateway) -> None:
        self.gateway = gateway
        self._products: dict[int, Product] = {}
        self._favorite_ids: set[int] = set()

    def _mark(self, product: Product) -> Product:
        is_favorite = product.product_id in self._favorite_ids
        if bool(product.is_favorite) == is_favorite:
            return product
        return with_favorite(product, is_favorite)

    def refresh(self) -> list[Product]:
        """Fetch the full product list, replacing what was held before."""
        products = [self._mark(p) for p in self.gateway.list_products()]
        self._products = {p.product_id: p for p in products}
        logger.debug("Catalog refreshed", product_count=len(products))
        return products

    def products(self) -> list[Product]:
        return list(self._products.values())

    def search(self, query: str) -> list[Product]:
        """Products whose title contains ``query``, ignoring case. A blank query matches all."""
        needle = (query or "").strip().casefold()
        if not needle:
            return self.products()
        return [p for p in self._products.values() if needle in (p.title or "").casefold()]

    def categories(self) -> list[str]:
        return self.gateway.list_categories()

    def by_category(self, category: str) -> list[Product]:
        products = [self._mark(p) for p in self.gateway.list_products_by_category(category)]
        for product in products:
            self._products[product.product_id] = product
        return products

    def find(self, product_id: int) -> Product:
        """Cached product, or the backend's copy when not yet fetched."""
        if product_id not in self._products:
            self._products[product_id] = self._mark(self.gateway.get_product(product_id))
        return self._products[product_id]

    def toggle_favorite(self, product_id: int) -> Product:
        if product_id in self._favorite_ids:
            self._favorite_ids.discard(product_id)
        else:
            self._favorite_ids.add(product_id)

        product = self._mark(self.find(product_id))
        self._products[product_id] = product
        return product

    def favorites(self) -> list[Product]:
        return [p for p in self._products.values() if p.product_id in self._favorite_ids]
