"""Error kinds raised by the cart/order domain engine.

All of them are local, recoverable conditions. They extend protean's
exceptions so that ``exc.messages`` carries field-keyed reasons, like every
other validation failure in the domain. Remote failures are defined with the
gateway port.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class InvalidQuantity(ValidationError):
    """A line quantity below 1 was requested."""


class ItemNotFound(ObjectNotFoundError):
    """No cart line matches the product/size/color combination."""


class CheckoutError(ValidationError):
    """The cart, address or payment method is not eligible for checkout."""


class EmptyCart(CheckoutError):
    pass


class InvalidAddress(CheckoutError):
    pass


class InvalidPayment(CheckoutError):
    pass


class IllegalStatusTransition(ValidationError):
    """The requested order status change is not allowed from the current status."""
