"""Checkout eligibility predicates for addresses and payment methods.

They answer only whether the input is acceptable, never why; callers that
need per-field messages wrap them with their own diagnostics. Wallet
payments (PayPal, Apple Pay, Google Pay) are accepted without field checks.
"""

from storefront.order.order import Address, PaymentMethod, PaymentType

MIN_CARD_NUMBER_LENGTH = 13
MIN_EXPIRY_YEAR = 2024
CVV_LENGTHS = (3, 4)


def _is_blank(value) -> bool:
    return not value or not str(value).strip()


def validate_address(address: Address | None) -> bool:
    """First/last name, first address line, city, state and zip are required."""
    if address is None:
        return False
    required = (
        address.first_name,
        address.last_name,
        address.address_line1,
        address.city,
        address.state,
        address.zip_code,
    )
    return not any(_is_blank(value) for value in required)


def _card_details_complete(payment_method: PaymentMethod) -> bool:
    card_number = payment_method.card_number or ""
    cvv = payment_method.cvv or ""
    month = payment_method.expiry_month or 0
    year = payment_method.expiry_year or 0
    return (
        len(card_number) >= MIN_CARD_NUMBER_LENGTH
        and 1 <= month <= 12
        and year >= MIN_EXPIRY_YEAR
        and len(cvv) in CVV_LENGTHS
        and not _is_blank(payment_method.card_holder_name)
    )


def _wallet(payment_method: PaymentMethod) -> bool:
    return True


_PAYMENT_RULES = {
    PaymentType.CREDIT_CARD: _card_details_complete,
    PaymentType.PAYPAL: _wallet,
    PaymentType.APPLE_PAY: _wallet,
    PaymentType.GOOGLE_PAY: _wallet,
}


def validate_payment_method(payment_method: PaymentMethod | None) -> bool:
    if payment_method is None:
        return False
    payment_type = PaymentType(payment_method.payment_type or PaymentType.CREDIT_CARD.value)
    return _PAYMENT_RULES[payment_type](payment_method)
