"""Applying backend-reported order status changes."""

import structlog
from protean.exceptions import ValidationError

from storefront.gateway.port import StoreGateway
from storefront.order.order import Order
from storefront.order.status import OrderStatus, parse_status

logger = structlog.get_logger(__name__)


def track_order(order: Order, gateway: StoreGateway) -> bool:
    """Pull the order's status from the backend and apply it.

    Returns ``True`` when the status changed. A reported status that cannot
    be reached from the current one raises ``IllegalStatusTransition``.
    """
    if not order.is_placed:
        raise ValidationError({"remote_id": ["Order has not been placed yet"]})

    reported = parse_status(gateway.get_order_status(order.remote_id))
    current = OrderStatus(order.status)
    if reported == current:
        return False

    order.transition_to(reported)
    logger.info(
        "Order status updated",
        remote_id=order.remote_id,
        previous_status=current.value,
        new_status=reported.value,
    )
    return True
