"""Cart aggregate: the lines selected during one shopping session.

The cart is the local source of truth for a session. Lines are kept in
insertion order and are identified by product id plus selected size/color;
adding an existing combination tops up its quantity instead of adding a
second line. Totals are never stored: ``snapshot_totals()`` derives them from
the current lines on every call.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from protean.fields import DateTime, HasMany, Integer, String, ValueObject

from storefront.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
    CartReconciled,
)
from storefront.catalog.product import Product
from storefront.domain import storefront
from storefront.gateway.port import CartLine
from storefront.shared.errors import InvalidQuantity, ItemNotFound
from storefront.shared.pricing import CartTotals, compute_totals

DEFAULT_USER_ID = 1


def _variant(value):
    """Blank size/color values mean "no selection"."""
    return value or None


@dataclass(frozen=True)
class LineSnapshot:
    product: Product
    quantity: int
    selected_size: str | None = None
    selected_color: str | None = None


@dataclass(frozen=True)
class CartSnapshot:
    """Point-in-time copy of a cart's contents, used to roll back failed syncs."""

    remote_id: int
    lines: tuple[LineSnapshot, ...] = field(default_factory=tuple)
    updated_at: datetime | None = None
    event_count: int = 0


@storefront.entity(part_of="Cart")
class CartItem:
    """One product/quantity/variant combination, holding the product as it was when added."""

    product = ValueObject(Product, required=True)
    quantity = Integer(required=True, min_value=1)
    selected_size = String(max_length=50)
    selected_color = String(max_length=50)
    added_at = DateTime()

    @property
    def product_id(self) -> int:
        return self.product.product_id

    @property
    def unit_price(self) -> float:
        return self.product.price

    def matches(self, product_id, size=None, color=None) -> bool:
        return (
            self.product.product_id == product_id
            and _variant(self.selected_size) == _variant(size)
            and _variant(self.selected_color) == _variant(color)
        )


@storefront.aggregate
class Cart:
    remote_id = Integer(default=0)  # 0 until the backend has stored the cart
    user_id = Integer(default=DEFAULT_USER_ID)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id=DEFAULT_USER_ID, remote_id=0, created_at=None):
        now = datetime.now(UTC)
        return cls(
            remote_id=remote_id,
            user_id=user_id,
            created_at=created_at or now,
            updated_at=now,
        )

    @property
    def is_empty(self) -> bool:
        return len(self.items) == 0

    @property
    def is_persisted(self) -> bool:
        return bool(self.remote_id)

    def find_item(self, product_id, size=None, color=None):
        return next((i for i in self.items if i.matches(product_id, size, color)), None)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product, quantity=1, size=None, color=None):
        """Add ``quantity`` of ``product`` (or top up the matching line)."""
        if quantity < 1:
            raise InvalidQuantity({"quantity": [f"Quantity must be at least 1, got {quantity}"]})

        now = datetime.now(UTC)
        existing = self.find_item(product.product_id, size, color)

        if existing:
            existing.quantity += quantity
            item = existing
        else:
            item = CartItem(
                product=product,
                quantity=quantity,
                selected_size=_variant(size),
                selected_color=_variant(color),
                added_at=now,
            )
            self.add_items(item)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=str(item.id),
                product_id=product.product_id,
                selected_size=_variant(size),
                selected_color=_variant(color),
                quantity=quantity,
            )
        )
        return item

    def set_quantity(self, product_id, quantity, size=None, color=None):
        """Set the quantity of an existing line.

        A quantity below 1 removes the line, exactly as ``remove_item`` would.
        The line must exist either way.
        """
        item = self.find_item(product_id, size, color)
        if item is None:
            raise ItemNotFound({"item": [f"No cart line for product {product_id} (size={size}, color={color})"]})

        if quantity < 1:
            self.remove_item(product_id, size, color)
            return

        previous_quantity = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item.id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, product_id, size=None, color=None) -> bool:
        """Remove the matching line. Removing an absent line is a no-op."""
        item = self.find_item(product_id, size, color)
        if item is None:
            return False

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                item_id=str(item.id),
                product_id=product_id,
            )
        )
        return True

    def clear(self):
        """Remove every line."""
        removed = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(cart_id=str(self.id), items_removed=removed))

    # -------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------
    def snapshot_totals(self) -> CartTotals:
        return compute_totals(self.items)

    def to_cart_lines(self) -> list[CartLine]:
        return [CartLine(product_id=i.product_id, quantity=i.quantity) for i in self.items]

    # -------------------------------------------------------------------
    # Snapshots and reconciliation
    # -------------------------------------------------------------------
    def snapshot(self) -> CartSnapshot:
        return CartSnapshot(
            remote_id=self.remote_id,
            lines=tuple(
                LineSnapshot(
                    product=i.product,
                    quantity=i.quantity,
                    selected_size=i.selected_size,
                    selected_color=i.selected_color,
                )
                for i in self.items
            ),
            updated_at=self.updated_at,
            event_count=len(self._events),
        )

    def restore(self, snapshot: CartSnapshot):
        """Put the cart back exactly as it was when ``snapshot`` was taken.

        Events raised since the snapshot are discarded with the changes.
        """
        self._replace_lines(snapshot.lines)
        self.remote_id = snapshot.remote_id
        self.updated_at = snapshot.updated_at
        del self._events[snapshot.event_count :]

    def replace_with(self, remote_id, lines):
        """Adopt the backend's view of the cart wholesale (no field-level merge)."""
        now = datetime.now(UTC)
        self._replace_lines(lines)
        self.remote_id = remote_id
        self.updated_at = now

        self.raise_(
            CartReconciled(
                cart_id=str(self.id),
                remote_id=remote_id,
                line_count=len(self.items),
                reconciled_at=now,
            )
        )

    def detach(self):
        """Forget the remote cart this cart was stored as."""
        self.remote_id = 0

    def _replace_lines(self, lines):
        for item in list(self.items):
            self.remove_items(item)
        for line in lines:
            self.add_items(
                CartItem(
                    product=line.product,
                    quantity=line.quantity,
                    selected_size=_variant(line.selected_size),
                    selected_color=_variant(line.selected_color),
                    added_at=self.updated_at,
                )
            )
