"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderCreated:
    """An order was built from a cart and awaits placement with the backend."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Integer(required=True)
    item_count = Integer(required=True)
    subtotal = Float(required=True)
    tax = Float(required=True)
    shipping_cost = Float(required=True)
    total = Float(required=True)
    created_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderPlaced:
    """The backend accepted the order and assigned it an id."""

    __version__ = 1

    order_id = Identifier(required=True)
    remote_id = String(required=True, max_length=255)
    estimated_delivery = DateTime()
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    """The order moved to a new status."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True, max_length=50)
    new_status = String(required=True, max_length=50)
    changed_at = DateTime(required=True)
