"""Re-hydration of backend carts into Cart aggregates.

The backend references products by id only, but pricing needs the full
product. Hydration fills each line from a local snapshot where one exists
(keeping the price and the size/color chosen when it was added) and asks a
product lookup for the rest.
"""

from collections import defaultdict, deque
from collections.abc import Callable, Iterable
from datetime import UTC, datetime

import structlog

from storefront.cart.cart import Cart, CartSnapshot, LineSnapshot
from storefront.catalog.product import Product
from storefront.gateway.port import CartLine, RemoteCart

logger = structlog.get_logger(__name__)

ProductLookup = Callable[[int], Product]


def hydrate_lines(
    remote_lines: Iterable[CartLine],
    lookup: ProductLookup,
    local_lines: Iterable[LineSnapshot] = (),
) -> list[LineSnapshot]:
    """Turn backend lines into full lines.

    Local lines are matched to backend lines of the same product in order.
    Backend lines that end up with the same product and variant are merged.
    """
    pending = defaultdict(deque)
    for line in local_lines:
        pending[line.product.product_id].append(line)

    merged: dict[tuple, LineSnapshot] = {}
    for remote in remote_lines:
        if remote.quantity < 1:
            logger.warning(
                "Skipping backend cart line with invalid quantity",
                product_id=remote.product_id,
                quantity=remote.quantity,
            )
            continue

        local = pending[remote.product_id].popleft() if pending[remote.product_id] else None
        product = local.product if local else lookup(remote.product_id)
        size = local.selected_size if local else None
        color = local.selected_color if local else None

        key = (remote.product_id, size, color)
        if key in merged:
            previous = merged[key]
            merged[key] = LineSnapshot(
                product=previous.product,
                quantity=previous.quantity + remote.quantity,
                selected_size=size,
                selected_color=color,
            )
        else:
            merged[key] = LineSnapshot(product=product, quantity=remote.quantity, selected_size=size, selected_color=color)

    return list(merged.values())


def hydrate_cart(remote_cart: RemoteCart, lookup: ProductLookup) -> Cart:
    """Build a local Cart from a backend cart."""
    cart = Cart.create(
        user_id=remote_cart.user_id,
        remote_id=remote_cart.cart_id,
        created_at=remote_cart.date,
    )
    cart.restore(
        CartSnapshot(
            remote_id=remote_cart.cart_id,
            lines=tuple(hydrate_lines(remote_cart.lines, lookup)),
            updated_at=remote_cart.date or datetime.now(UTC),
        )
    )
    return cart


def to_remote_cart(cart: Cart) -> RemoteCart:
    """The backend's view of ``cart``: id, owner, date and product/quantity pairs."""
    return RemoteCart(
        cart_id=cart.remote_id,
        user_id=cart.user_id,
        date=cart.updated_at,
        lines=tuple(cart.to_cart_lines()),
    )
