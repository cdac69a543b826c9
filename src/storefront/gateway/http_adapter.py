"""REST adapter for the FakeStore-compatible product/cart service.

Every call is bounded by the configured timeout. Connection problems and
timeouts surface as ``RemoteUnavailable``; non-2xx responses and payloads
that cannot be decoded surface as ``RemoteRejected`` with the status code
and response body.
"""

from typing import Any
from urllib.parse import quote

import requests
import structlog
from protean.exceptions import ValidationError

from storefront.catalog.product import Product
from storefront.config import GatewaySettings
from storefront.gateway.port import (
    CartLine,
    PlacementResult,
    RemoteCart,
    RemoteRejected,
    RemoteUnavailable,
    StoreGateway,
)
from storefront.gateway.wire import (
    cart_request,
    order_to_wire,
    parse_date,
    product_from_wire,
    remote_cart_from_wire,
)

logger = structlog.get_logger(__name__)

_DECODE_ERRORS = (KeyError, TypeError, ValueError, ValidationError)


class HttpStoreGateway(StoreGateway):
    """Talks to the backend over HTTP with a shared ``requests.Session``."""

    def __init__(self, settings: GatewaySettings, session: requests.Session | None = None) -> None:
        self.settings = settings
        self.session = session or requests.Session()
        self.session.headers.setdefault("Accept", "application/json")

    def _url(self, path: str) -> str:
        return f"{self.settings.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, payload: dict | None = None) -> Any:
        url = self._url(path)
        try:
            response = self.session.request(method, url, json=payload, timeout=self.settings.timeout)
        except requests.RequestException as exc:
            logger.warning("Store gateway unreachable", method=method, url=url, error=str(exc))
            raise RemoteUnavailable(f"{method} {url} failed", detail=str(exc)) from exc

        if not response.ok:
            logger.warning("Store gateway rejected request", method=method, url=url, status_code=response.status_code)
            raise RemoteRejected(
                f"{method} {url} returned {response.status_code}",
                status_code=response.status_code,
                detail=response.text,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteRejected(
                f"{method} {url} returned a non-JSON body",
                status_code=response.status_code,
                detail=response.text,
            ) from exc

    def _decode(self, decoder, data, what: str):
        if data is None:
            raise RemoteRejected(f"Empty {what} payload", status_code=None)
        try:
            return decoder(data)
        except _DECODE_ERRORS as exc:
            raise RemoteRejected(f"Malformed {what} payload", status_code=None, detail=str(exc)) from exc

    # -------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------
    def list_products(self) -> list[Product]:
        return [self._decode(product_from_wire, p, "product") for p in self._request("GET", "products") or []]

    def get_product(self, product_id: int) -> Product:
        return self._decode(product_from_wire, self._request("GET", f"products/{product_id}"), "product")

    def list_categories(self) -> list[str]:
        return [str(c) for c in self._request("GET", "products/categories") or []]

    def list_products_by_category(self, category: str) -> list[Product]:
        data = self._request("GET", f"products/category/{quote(category)}") or []
        return [self._decode(product_from_wire, p, "product") for p in data]

    # -------------------------------------------------------------------
    # Carts
    # -------------------------------------------------------------------
    def list_carts(self) -> list[RemoteCart]:
        return [self._decode(remote_cart_from_wire, c, "cart") for c in self._request("GET", "carts") or []]

    def get_cart(self, cart_id: int) -> RemoteCart:
        return self._decode(remote_cart_from_wire, self._request("GET", f"carts/{cart_id}"), "cart")

    def list_carts_for_user(self, user_id: int) -> list[RemoteCart]:
        data = self._request("GET", f"carts/user/{user_id}") or []
        return [self._decode(remote_cart_from_wire, c, "cart") for c in data]

    def create_cart(self, user_id: int, lines: list[CartLine]) -> RemoteCart:
        data = self._request("POST", "carts", cart_request(user_id, lines))
        return self._decode(remote_cart_from_wire, data, "cart")

    def update_cart(self, cart_id: int, lines: list[CartLine], user_id: int | None = None) -> RemoteCart:
        payload = cart_request(user_id, lines)
        if user_id is None:
            payload.pop("userId")
        data = self._request("PUT", f"carts/{cart_id}", payload)
        return self._decode(remote_cart_from_wire, data, "cart")

    def delete_cart(self, cart_id: int) -> None:
        self._request("DELETE", f"carts/{cart_id}")

    # -------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------
    def place_order(self, order) -> PlacementResult:
        data = self._request("POST", self.settings.orders_path, order_to_wire(order))

        def decode(body):
            return PlacementResult(
                order_id=str(body["id"]),
                estimated_delivery=parse_date(body.get("estimatedDelivery")),
            )

        return self._decode(decode, data, "order")

    def get_order_status(self, order_id: str) -> str:
        data = self._request("GET", f"{self.settings.orders_path}/{order_id}")
        return self._decode(lambda body: str(body["status"]), data, "order")
