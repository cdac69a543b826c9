"""Store gateway port (abstract interface).

Defines the contract the cart/order core requires from the remote
product/cart service. Adapters own the transport: they bound every call with
a timeout and surface failures as ``RemoteUnavailable`` or
``RemoteRejected``. The core never retries on its own.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

from storefront.catalog.product import Product


class RemoteGatewayError(Exception):
    """Base class for failures reported by the remote service."""

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.detail = detail


class RemoteUnavailable(RemoteGatewayError):
    """The service could not be reached (connection error, timeout)."""


class RemoteRejected(RemoteGatewayError):
    """The service answered with a non-2xx status, or with a body that could not be decoded.

    ``status_code`` is ``None`` for undecodable bodies.
    """

    def __init__(self, message: str, status_code: int | None, detail: str | None = None) -> None:
        super().__init__(message, detail)
        self.status_code = status_code


class CartOutOfSync(RemoteGatewayError):
    """The backend stored a cart write but its answer could not be applied locally.

    The local cart keeps the change and the backend cart id; a later sync or
    refresh brings the two back in step.
    """


@dataclass(frozen=True)
class CartLine:
    """A cart line as the backend knows it: product reference and quantity only."""

    product_id: int
    quantity: int


@dataclass(frozen=True)
class RemoteCart:
    """A cart resource as returned by the backend."""

    cart_id: int
    user_id: int
    date: datetime | None = None
    lines: tuple[CartLine, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PlacementResult:
    """Outcome of a successful order placement."""

    order_id: str
    estimated_delivery: datetime | None = None


class StoreGateway(ABC):
    """Abstract remote product/cart service."""

    # Catalog
    @abstractmethod
    def list_products(self) -> list[Product]: ...

    @abstractmethod
    def get_product(self, product_id: int) -> Product: ...

    @abstractmethod
    def list_categories(self) -> list[str]: ...

    @abstractmethod
    def list_products_by_category(self, category: str) -> list[Product]: ...

    # Carts
    @abstractmethod
    def list_carts(self) -> list[RemoteCart]: ...

    @abstractmethod
    def get_cart(self, cart_id: int) -> RemoteCart: ...

    @abstractmethod
    def list_carts_for_user(self, user_id: int) -> list[RemoteCart]: ...

    @abstractmethod
    def create_cart(self, user_id: int, lines: list[CartLine]) -> RemoteCart:
        """Persist a new cart; the backend assigns its id."""
        ...

    @abstractmethod
    def update_cart(self, cart_id: int, lines: list[CartLine], user_id: int | None = None) -> RemoteCart:
        """Replace the lines of an existing cart and return the stored state."""
        ...

    @abstractmethod
    def delete_cart(self, cart_id: int) -> None: ...

    # Orders
    @abstractmethod
    def place_order(self, order) -> PlacementResult:
        """Submit a built order. The backend assigns its id."""
        ...

    @abstractmethod
    def get_order_status(self, order_id: str) -> str:
        """Return the backend's current status value for a placed order."""
        ...
