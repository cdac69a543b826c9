"""Storefront command-line client.

Browses the catalog and inspects backend carts through the configured store
gateway (``STOREFRONT_GATEWAY=http`` to reach a real backend).

Logs go to stderr; set LOG_FILE to keep them in a file as well.

Usage:
    python -m storefront.cli [-v] products [--category CATEGORY]
    python -m storefront.cli search QUERY
    python -m storefront.cli categories
    python -m storefront.cli cart CART_ID
    python -m storefront.cli carts --user USER_ID
"""

import argparse
import sys

from storefront.gateway.port import RemoteGatewayError
from storefront.shared.formatting import format_price
from storefront.utils.logging import add_context, configure_logging, get_logger

logger = get_logger(__name__)


def _print_products(products):
    for product in products:
        marker = "*" if product.is_favorite else " "
        print(f"{marker} {product.product_id:>4}  {format_price(product.price):>10}  {product.title}")


def _print_session(session):
    cart = session.cart
    print(f"Cart {cart.remote_id} (user {cart.user_id})")
    for item in cart.items:
        variant = ", ".join(v for v in (item.selected_size, item.selected_color) if v)
        suffix = f" [{variant}]" if variant else ""
        print(f"  {item.quantity} x {item.product.title}{suffix}  {format_price(item.unit_price * item.quantity)}")
    totals = session.totals()
    print(f"  Items:    {totals.total_items}")
    print(f"  Subtotal: {format_price(totals.subtotal)}")
    print(f"  Tax:      {format_price(totals.tax)}")
    print(f"  Total:    {format_price(totals.total)}")


def run(args) -> int:
    from storefront.cart.session import ShoppingSession
    from storefront.catalog.browsing import Catalog
    from storefront.gateway import get_gateway

    gateway = get_gateway()

    if args.command == "products":
        catalog = Catalog(gateway)
        _print_products(catalog.by_category(args.category) if args.category else catalog.refresh())
    elif args.command == "search":
        catalog = Catalog(gateway)
        catalog.refresh()
        _print_products(catalog.search(args.query))
    elif args.command == "categories":
        for category in gateway.list_categories():
            print(category)
    elif args.command == "cart":
        _print_session(ShoppingSession.load(args.cart_id, gateway=gateway, auto_sync=False))
    elif args.command == "carts":
        for remote in gateway.list_carts_for_user(args.user):
            date = remote.date.date().isoformat() if remote.date else "-"
            print(f"{remote.cart_id:>4}  {date}  {len(remote.lines)} line(s)")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="Storefront catalog and cart client")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug detail to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    products_parser = subparsers.add_parser("products", help="List products")
    products_parser.add_argument("--category", help="Only products in this category")

    search_parser = subparsers.add_parser("search", help="Search products by title")
    search_parser.add_argument("query")

    subparsers.add_parser("categories", help="List categories")

    cart_parser = subparsers.add_parser("cart", help="Show a backend cart with totals")
    cart_parser.add_argument("cart_id", type=int)

    carts_parser = subparsers.add_parser("carts", help="List a user's backend carts")
    carts_parser.add_argument("--user", type=int, required=True)

    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose)
    add_context(command=args.command)

    from storefront.domain import storefront

    storefront.init()
    with storefront.domain_context():
        try:
            return run(args)
        except RemoteGatewayError as exc:
            logger.error("Store gateway request failed", error=str(exc), detail=exc.detail)
            print(f"error: {exc}", file=sys.stderr)
            return 1


if __name__ == "__main__":
    sys.exit(main())
