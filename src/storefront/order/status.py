"""Order status machine.

    PENDING → CONFIRMED → PROCESSING → SHIPPED → DELIVERED
    CANCELLED (from PENDING, CONFIRMED, PROCESSING)

Transitions are requested from outside (the backend reporting a state
change); this module only accepts or rejects them.
"""

from enum import Enum

from storefront.shared.errors import IllegalStatusTransition


class OrderStatus(Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_DISPLAY_NAMES = {
    OrderStatus.PENDING: "Order Pending",
    OrderStatus.CONFIRMED: "Order Confirmed",
    OrderStatus.PROCESSING: "Processing",
    OrderStatus.SHIPPED: "Shipped",
    OrderStatus.DELIVERED: "Delivered",
    OrderStatus.CANCELLED: "Cancelled",
}


def parse_status(value: "OrderStatus | str") -> OrderStatus:
    """Accept an ``OrderStatus``, its value (``"Shipped"``) or its name (``"SHIPPED"``)."""
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        pass
    try:
        return OrderStatus[str(value).upper()]
    except KeyError:
        raise IllegalStatusTransition({"status": [f"Unknown order status: {value!r}"]}) from None


def allowed_transitions(current: OrderStatus) -> frozenset[OrderStatus]:
    return frozenset(_VALID_TRANSITIONS[current])


def is_terminal(status: OrderStatus) -> bool:
    return not _VALID_TRANSITIONS[status]


def transition(current: OrderStatus, target: OrderStatus) -> OrderStatus:
    """Return ``target`` if the move is legal, else raise ``IllegalStatusTransition``."""
    if target not in _VALID_TRANSITIONS[current]:
        raise IllegalStatusTransition({"status": [f"Cannot transition from {current.value} to {target.value}"]})
    return target


def status_display_name(status: OrderStatus) -> str:
    return _DISPLAY_NAMES[status]
