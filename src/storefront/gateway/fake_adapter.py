"""In-memory store gateway for development and testing.

Behaves like the FakeStore REST API without any network calls: the backend
assigns cart and order ids, stores only product ids and quantities for carts,
and reports order statuses that tests can move forward. It can be told to
fail, either as an unreachable service or as a rejecting one, and records
every call it receives.
"""

from datetime import UTC, datetime, timedelta
from itertools import count

from storefront.catalog.product import Product
from storefront.gateway.port import (
    CartLine,
    PlacementResult,
    RemoteCart,
    RemoteRejected,
    RemoteUnavailable,
    StoreGateway,
)
from storefront.order.status import OrderStatus

DELIVERY_DAYS = 5


class FakeStoreGateway(StoreGateway):
    """Configurable in-memory product/cart service."""

    def __init__(self, products: list[Product] | None = None) -> None:
        self.products: dict[int, Product] = {p.product_id: p for p in products or []}
        self.carts: dict[int, RemoteCart] = {}
        self.orders: dict[str, dict] = {}
        self.calls: list[dict] = []
        self.failure: str | None = None
        self.failure_reason: str = "Service unavailable"
        self._cart_ids = count(1)
        self._order_ids = count(1)

    # -------------------------------------------------------------------
    # Test controls
    # -------------------------------------------------------------------
    def configure(self, failure: str | None = None, failure_reason: str = "Service unavailable") -> None:
        """Make every following call fail.

        ``failure`` is ``"unavailable"`` (network error), ``"rejected"``
        (non-2xx response) or ``None`` to succeed again.
        """
        self.failure = failure
        self.failure_reason = failure_reason

    def add_product(self, product: Product) -> None:
        self.products[product.product_id] = product

    def set_order_status(self, order_id: str, status: OrderStatus | str) -> None:
        self.orders[order_id]["status"] = status.value if isinstance(status, OrderStatus) else status

    def calls_to(self, method: str) -> list[dict]:
        return [call for call in self.calls if call["method"] == method]

    def _record(self, method: str, **kwargs) -> None:
        self.calls.append({"method": method, **kwargs})
        if self.failure == "unavailable":
            raise RemoteUnavailable(f"{method} failed: {self.failure_reason}", detail=self.failure_reason)
        if self.failure == "rejected":
            raise RemoteRejected(f"{method} rejected: {self.failure_reason}", status_code=500, detail=self.failure_reason)

    def _not_found(self, what: str) -> RemoteRejected:
        return RemoteRejected(f"{what} not found", status_code=404, detail=what)

    # -------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------
    def list_products(self) -> list[Product]:
        self._record("list_products")
        return list(self.products.values())

    def get_product(self, product_id: int) -> Product:
        self._record("get_product", product_id=product_id)
        if product_id not in self.products:
            raise self._not_found(f"Product {product_id}")
        return self.products[product_id]

    def list_categories(self) -> list[str]:
        self._record("list_categories")
        return sorted({p.category for p in self.products.values() if p.category})

    def list_products_by_category(self, category: str) -> list[Product]:
        self._record("list_products_by_category", category=category)
        return [p for p in self.products.values() if p.category == category]

    # -------------------------------------------------------------------
    # Carts
    # -------------------------------------------------------------------
    def list_carts(self) -> list[RemoteCart]:
        self._record("list_carts")
        return list(self.carts.values())

    def get_cart(self, cart_id: int) -> RemoteCart:
        self._record("get_cart", cart_id=cart_id)
        if cart_id not in self.carts:
            raise self._not_found(f"Cart {cart_id}")
        return self.carts[cart_id]

    def list_carts_for_user(self, user_id: int) -> list[RemoteCart]:
        self._record("list_carts_for_user", user_id=user_id)
        return [c for c in self.carts.values() if c.user_id == user_id]

    def create_cart(self, user_id: int, lines: list[CartLine]) -> RemoteCart:
        self._record("create_cart", user_id=user_id, lines=list(lines))
        cart = RemoteCart(
            cart_id=next(self._cart_ids),
            user_id=user_id,
            date=datetime.now(UTC),
            lines=tuple(lines),
        )
        self.carts[cart.cart_id] = cart
        return cart

    def update_cart(self, cart_id: int, lines: list[CartLine], user_id: int | None = None) -> RemoteCart:
        self._record("update_cart", cart_id=cart_id, lines=list(lines), user_id=user_id)
        if cart_id not in self.carts:
            raise self._not_found(f"Cart {cart_id}")
        existing = self.carts[cart_id]
        cart = RemoteCart(
            cart_id=cart_id,
            user_id=user_id if user_id is not None else existing.user_id,
            date=datetime.now(UTC),
            lines=tuple(lines),
        )
        self.carts[cart_id] = cart
        return cart

    def delete_cart(self, cart_id: int) -> None:
        self._record("delete_cart", cart_id=cart_id)
        if cart_id not in self.carts:
            raise self._not_found(f"Cart {cart_id}")
        del self.carts[cart_id]

    # -------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------
    def place_order(self, order) -> PlacementResult:
        self._record("place_order", order_id=str(order.id), total=order.total)
        order_id = f"ord-{next(self._order_ids):05d}"
        self.orders[order_id] = {"status": OrderStatus.PENDING.value, "total": order.total}
        return PlacementResult(
            order_id=order_id,
            estimated_delivery=datetime.now(UTC) + timedelta(days=DELIVERY_DAYS),
        )

    def get_order_status(self, order_id: str) -> str:
        self._record("get_order_status", order_id=order_id)
        if order_id not in self.orders:
            raise self._not_found(f"Order {order_id}")
        return self.orders[order_id]["status"]
