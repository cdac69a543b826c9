"""Shopping session: one user's cart, kept in step with the backend.

The session owns its Cart explicitly; nothing about the current cart lives in
module state, so any number of sessions can coexist.

Mutations are optimistic: they are applied to the local cart first, then the
cart is pushed to the backend. If the push fails, the cart is rolled back to
its state before the mutation and the gateway error is re-raised unchanged.
If the backend stored the push but its answer cannot be applied (a product
it returned cannot be looked up), the local change is kept together with the
backend cart id and ``CartOutOfSync`` is raised instead.
When the push succeeds the backend's answer replaces the local lines
wholesale (last writer wins); product snapshots and size/color selections,
which the backend does not store, are carried over from the local lines.
"""

from datetime import UTC, datetime

import structlog

from storefront.cart.cart import DEFAULT_USER_ID, Cart
from storefront.cart.hydration import hydrate_cart, hydrate_lines
from storefront.catalog.browsing import Catalog
from storefront.gateway import get_gateway
from storefront.gateway.port import CartOutOfSync, RemoteCart, RemoteGatewayError, StoreGateway
from storefront.shared.pricing import CartTotals

logger = structlog.get_logger(__name__)

_EPOCH = datetime.min.replace(tzinfo=UTC)


class ShoppingSession:
    def __init__(
        self,
        gateway: StoreGateway | None = None,
        cart: Cart | None = None,
        user_id: int = DEFAULT_USER_ID,
        catalog: Catalog | None = None,
        auto_sync: bool = True,
    ) -> None:
        self.gateway = gateway or get_gateway()
        self.cart = cart if cart is not None else Cart.create(user_id=user_id)
        self.catalog = catalog or Catalog(self.gateway)
        self.auto_sync = auto_sync
        self.last_order = None
        self.log = logger.bind(user_id=self.cart.user_id, cart_id=str(self.cart.id))

    # -------------------------------------------------------------------
    # Starting a session
    # -------------------------------------------------------------------
    @classmethod
    def load(cls, cart_id: int, gateway: StoreGateway | None = None, **kwargs) -> "ShoppingSession":
        """Start from a cart stored on the backend."""
        gateway = gateway or get_gateway()
        catalog = kwargs.pop("catalog", None) or Catalog(gateway)
        cart = hydrate_cart(gateway.get_cart(cart_id), catalog.find)
        return cls(gateway=gateway, cart=cart, catalog=catalog, **kwargs)

    @classmethod
    def resume(cls, user_id: int, gateway: StoreGateway | None = None, **kwargs) -> "ShoppingSession":
        """Continue the user's most recent backend cart, or start an empty one."""
        gateway = gateway or get_gateway()
        carts = gateway.list_carts_for_user(user_id)
        if not carts:
            return cls(gateway=gateway, user_id=user_id, **kwargs)

        latest = max(carts, key=lambda c: (c.date or _EPOCH, c.cart_id))
        catalog = kwargs.pop("catalog", None) or Catalog(gateway)
        cart = hydrate_cart(latest, catalog.find)
        return cls(gateway=gateway, cart=cart, catalog=catalog, **kwargs)

    # -------------------------------------------------------------------
    # Cart mutations
    # -------------------------------------------------------------------
    def add_item(self, product, quantity=1, size=None, color=None):
        return self._mutate(self.cart.add_item, product, quantity, size, color)

    def set_quantity(self, product_id, quantity, size=None, color=None):
        self._mutate(self.cart.set_quantity, product_id, quantity, size, color)

    def remove_item(self, product_id, size=None, color=None) -> bool:
        if self.cart.find_item(product_id, size, color) is None:
            return False
        return self._mutate(self.cart.remove_item, product_id, size, color)

    def clear(self):
        self._mutate(self.cart.clear)

    def _mutate(self, operation, *args):
        before = self.cart.snapshot()
        result = operation(*args)

        if self.auto_sync:
            try:
                self.sync()
            except CartOutOfSync:
                raise
            except RemoteGatewayError as exc:
                self.cart.restore(before)
                self.log.warning(
                    "Cart sync failed, local change rolled back",
                    operation=operation.__name__,
                    error=str(exc),
                    detail=exc.detail,
                )
                raise
        return result

    # -------------------------------------------------------------------
    # Backend synchronisation
    # -------------------------------------------------------------------
    def sync(self) -> Cart:
        """Push the local cart to the backend and adopt the stored result."""
        lines = self.cart.to_cart_lines()
        if self.cart.is_persisted:
            remote = self.gateway.update_cart(self.cart.remote_id, lines, user_id=self.cart.user_id)
        else:
            remote = self.gateway.create_cart(self.cart.user_id, lines)

        try:
            self._adopt(remote)
        except RemoteGatewayError as exc:
            self.cart.remote_id = remote.cart_id
            self.log.warning(
                "Cart stored but backend answer not applied",
                remote_id=remote.cart_id,
                error=str(exc),
            )
            raise CartOutOfSync(f"Cart {remote.cart_id} stored but could not be reconciled", detail=str(exc)) from exc

        self.log.info("Cart synced", remote_id=remote.cart_id, line_count=len(remote.lines))
        return self.cart

    def refresh(self) -> Cart:
        """Replace the local cart with the backend's current copy."""
        if self.cart.is_persisted:
            self._adopt(self.gateway.get_cart(self.cart.remote_id))
        return self.cart

    def _adopt(self, remote: RemoteCart):
        lines = hydrate_lines(remote.lines, self.catalog.find, self.cart.snapshot().lines)
        self.cart.replace_with(remote.cart_id, lines)

    # -------------------------------------------------------------------
    # Ending a cart
    # -------------------------------------------------------------------
    def abandon(self):
        """Drop the cart: delete the backend copy first, then empty the local one."""
        if self.cart.is_persisted:
            self.gateway.delete_cart(self.cart.remote_id)
        self.cart.clear()
        self.cart.detach()
        self.log.info("Cart abandoned")

    def complete_checkout(self):
        """Empty the cart after the backend accepted an order for it.

        The local lines go first so the order cannot be placed twice. The
        backend cart is deleted next; if that fails the error propagates and
        the cart stays attached, so the next sync overwrites the backend copy.
        """
        self.cart.clear()
        if self.cart.is_persisted:
            try:
                self.gateway.delete_cart(self.cart.remote_id)
            except RemoteGatewayError as exc:
                self.log.warning(
                    "Backend cart not deleted after checkout",
                    remote_id=self.cart.remote_id,
                    error=str(exc),
                    detail=exc.detail,
                )
                raise
        self.cart.detach()

    def totals(self) -> CartTotals:
        return self.cart.snapshot_totals()
