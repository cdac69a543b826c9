"""JSON wire representation of products, carts and orders.

Product::

    {"id": 1, "title": "...", "price": 109.95, "description": "...",
     "category": "...", "image": "https://...", "rating": {"rate": 3.9, "count": 120}}

Cart::

    {"id": 5, "userId": 1, "date": "2020-03-02T00:00:00.000Z",
     "products": [{"productId": 1, "quantity": 4}]}
"""

from datetime import UTC, datetime
from typing import Any

from storefront.catalog.product import Product, Rating
from storefront.gateway.port import CartLine, RemoteCart


def product_from_wire(data: dict[str, Any]) -> Product:
    rating = data.get("rating") or {}
    return Product(
        product_id=int(data["id"]),
        title=data["title"],
        price=float(data.get("price") or 0.0),
        description=data.get("description") or "",
        category=data.get("category") or "",
        image=data.get("image") or "",
        rating=Rating(
            rate=float(rating.get("rate") or 0.0),
            count=int(rating.get("count") or 0),
        ),
    )


def product_to_wire(product: Product) -> dict[str, Any]:
    rating = product.rating
    return {
        "id": product.product_id,
        "title": product.title,
        "price": product.price,
        "description": product.description or "",
        "category": product.category or "",
        "image": product.image or "",
        "rating": {
            "rate": rating.rate if rating else 0.0,
            "count": rating.count if rating else 0,
        },
    }


def parse_date(value: str | None) -> datetime | None:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def format_date(value: datetime | None) -> str:
    return (value or datetime.now(UTC)).isoformat()


def lines_to_wire(lines: list[CartLine]) -> list[dict[str, int]]:
    return [{"productId": line.product_id, "quantity": line.quantity} for line in lines]


def cart_request(user_id: int | None, lines: list[CartLine], date: datetime | None = None) -> dict[str, Any]:
    return {
        "userId": user_id,
        "date": format_date(date),
        "products": lines_to_wire(lines),
    }


def remote_cart_from_wire(data: dict[str, Any]) -> RemoteCart:
    return RemoteCart(
        cart_id=int(data.get("id") or 0),
        user_id=int(data.get("userId") or 0),
        date=parse_date(data.get("date")),
        lines=tuple(
            CartLine(product_id=int(line["productId"]), quantity=int(line["quantity"]))
            for line in data.get("products") or []
        ),
    )


def remote_cart_to_wire(cart: RemoteCart) -> dict[str, Any]:
    return {"id": cart.cart_id, **cart_request(cart.user_id, list(cart.lines), cart.date)}


def order_to_wire(order) -> dict[str, Any]:
    address = order.shipping_address
    return {
        "userId": order.user_id,
        "date": format_date(order.created_at),
        "status": order.status,
        "products": [
            {
                "productId": item.product_id,
                "title": item.product_name,
                "price": item.unit_price,
                "quantity": item.quantity,
                "size": item.selected_size,
                "color": item.selected_color,
            }
            for item in order.items
        ],
        "shippingAddress": {
            "firstName": address.first_name,
            "lastName": address.last_name,
            "addressLine1": address.address_line1,
            "addressLine2": address.address_line2,
            "city": address.city,
            "state": address.state,
            "zipCode": address.zip_code,
            "country": address.country,
            "phoneNumber": address.phone_number,
        },
        "paymentType": order.payment_method.payment_type,
        "subtotal": order.subtotal,
        "tax": order.tax,
        "shippingCost": order.shipping_cost,
        "total": order.total,
    }
