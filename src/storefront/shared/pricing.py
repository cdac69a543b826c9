"""Pricing: subtotal, tax and total computation over line items.

Pure functions with no rounding: amounts are plain floats and rounding to
currency precision happens when they are formatted for display.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

TAX_RATE = 0.08
DEFAULT_SHIPPING_COST = 9.99


class PricedLine(Protocol):
    unit_price: float
    quantity: int


@dataclass(frozen=True)
class CartTotals:
    """Totals derived from a cart's lines at one point in time."""

    subtotal: float = 0.0
    tax: float = 0.0
    total: float = 0.0
    total_items: int = 0


def line_total(unit_price: float, quantity: int) -> float:
    return unit_price * quantity


def compute_subtotal(items: Iterable[PricedLine]) -> float:
    return sum((line_total(item.unit_price, item.quantity) for item in items), 0.0)


def compute_tax(subtotal: float, rate: float = TAX_RATE) -> float:
    return subtotal * rate


def compute_total(subtotal: float, tax: float, *extra_costs: float) -> float:
    """Sum the subtotal, tax and any extra costs (shipping, fees)."""
    total = subtotal + tax
    for cost in extra_costs:
        total += cost
    return total


def compute_totals(items: Iterable[PricedLine], rate: float = TAX_RATE) -> CartTotals:
    items = list(items)
    subtotal = compute_subtotal(items)
    tax = compute_tax(subtotal, rate)
    return CartTotals(
        subtotal=subtotal,
        tax=tax,
        total=compute_total(subtotal, tax),
        total_items=sum(item.quantity for item in items),
    )
