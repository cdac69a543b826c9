"""Two-phase checkout: build the order locally, then place it with the backend.

The cart is cleared only once the backend has accepted the order. If placing
fails or times out the gateway error propagates and the cart is left exactly
as it was, so the whole checkout can be retried.

Once placed, the order is kept on the session as ``last_order`` before the
backend cart is deleted. A failed delete still raises, but the local cart is
already empty, so a retried checkout stops at ``EmptyCart`` instead of
placing the order twice.
"""

import structlog

from storefront.gateway.port import RemoteGatewayError
from storefront.order.builder import build_order
from storefront.order.order import Address, Order, PaymentMethod

logger = structlog.get_logger(__name__)


def checkout(session, address: Address, payment_method: PaymentMethod) -> Order:
    order = build_order(session.cart, address, payment_method)
    log = logger.bind(user_id=order.user_id, order_id=str(order.id), total=order.total)

    try:
        placement = session.gateway.place_order(order)
    except RemoteGatewayError as exc:
        log.warning("Order placement failed, cart kept for retry", error=str(exc), detail=exc.detail)
        raise

    order.record_placement(placement.order_id, placement.estimated_delivery)
    session.last_order = order
    log.info("Order placed", remote_id=order.remote_id)

    session.complete_checkout()
    return order
