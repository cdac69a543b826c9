"""Order builder: turns a validated cart into a PENDING order snapshot.

Purely local: no network, no changes to the cart. The cart is cleared by the
checkout flow only after the backend has accepted the order.
"""

from storefront.cart.cart import Cart
from storefront.checkout.validation import validate_address, validate_payment_method
from storefront.order.order import Address, Order, PaymentMethod
from storefront.shared.errors import EmptyCart, InvalidAddress, InvalidPayment
from storefront.shared.pricing import DEFAULT_SHIPPING_COST, compute_subtotal, compute_tax, compute_total


def build_order(
    cart: Cart,
    address: Address,
    payment_method: PaymentMethod,
    shipping_cost: float = DEFAULT_SHIPPING_COST,
) -> Order:
    if cart.is_empty:
        raise EmptyCart({"cart": ["Cannot check out an empty cart"]})
    if not validate_address(address):
        raise InvalidAddress({"shipping_address": ["Shipping address is incomplete"]})
    if not validate_payment_method(payment_method):
        raise InvalidPayment({"payment_method": ["Payment details are incomplete or invalid"]})

    items_data = [
        {
            "product_id": item.product_id,
            "product_name": item.product.title,
            "product_image": item.product.image,
            "unit_price": item.unit_price,
            "quantity": item.quantity,
            "selected_size": item.selected_size,
            "selected_color": item.selected_color,
        }
        for item in cart.items
    ]

    subtotal = compute_subtotal(cart.items)
    tax = compute_tax(subtotal)

    return Order.create(
        user_id=cart.user_id,
        items_data=items_data,
        shipping_address=address,
        payment_method=payment_method,
        subtotal=subtotal,
        tax=tax,
        shipping_cost=shipping_cost,
        total=compute_total(subtotal, tax, shipping_cost),
    )
