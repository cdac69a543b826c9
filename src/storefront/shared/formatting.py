"""Display helpers for amounts, names and card numbers."""


def format_price(amount: float, symbol: str = "$") -> str:
    """Render an amount in US currency style, e.g. ``$1,234.50`` or ``-$3.00``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def full_name(address) -> str:
    return f"{address.first_name or ''} {address.last_name or ''}".strip()


def masked_card_number(payment_method) -> str:
    """Show only the last four digits; numbers shorter than four are returned as-is."""
    number = payment_method.card_number or ""
    if len(number) >= 4:
        return f"**** **** **** {number[-4:]}"
    return number
