"""Domain events for the Cart aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Cart")
class CartItemAdded:
    """A product was added to the cart (or its existing line was topped up)."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Integer(required=True)
    selected_size = String(max_length=50)
    selected_color = String(max_length=50)
    quantity = Integer(required=True)


@storefront.event(part_of="Cart")
class CartQuantityUpdated:
    """The quantity of a cart line was changed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="Cart")
class CartItemRemoved:
    """A line was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Integer(required=True)


@storefront.event(part_of="Cart")
class CartCleared:
    """All lines were removed, after checkout or on abandonment."""

    __version__ = 1

    cart_id = Identifier(required=True)
    items_removed = Integer(required=True)


@storefront.event(part_of="Cart")
class CartReconciled:
    """Local cart state was replaced by the state the backend returned."""

    __version__ = 1

    cart_id = Identifier(required=True)
    remote_id = Integer(required=True)
    line_count = Integer(required=True)
    reconciled_at = DateTime(required=True)
