"""Shared BDD fixtures and step definitions for the storefront."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from storefront.gateway.port import RemoteGatewayError


@pytest.fixture()
def error():
    """Container for the error raised by the last action, if any."""
    return {"exc": None}


@pytest.fixture()
def attempt(error):
    """Run an action, recording a domain or gateway error instead of raising it."""

    def _attempt(action, *args, **kwargs):
        try:
            return action(*args, **kwargs)
        except (ValidationError, RemoteGatewayError) as exc:
            error["exc"] = exc
            return None

    return _attempt


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an empty cart", target_fixture="session")
def empty_cart(session):
    assert session.cart.is_empty
    return session


@given(parsers.cfparse("the cart holds {qty:d} of product {product_id:d}"), target_fixture="session")
def cart_holding(session, gateway, qty, product_id):
    session.add_item(gateway.products[product_id], qty)
    session.cart._events.clear()
    return session


@given("the backend is unavailable")
def backend_unavailable(gateway):
    gateway.configure(failure="unavailable", failure_reason="connection refused")


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart has {count:d} line"))
def cart_has_one_line(session, count):
    assert len(session.cart.items) == count


@then(parsers.cfparse("the cart has {count:d} lines"))
def cart_has_n_lines(session, count):
    assert len(session.cart.items) == count


@then("the cart is empty")
def cart_is_empty(session):
    assert session.cart.is_empty
    assert session.totals().total == 0.0


@then(parsers.cfparse("the line for product {product_id:d} has quantity {qty:d}"))
def line_quantity(session, product_id, qty):
    assert session.cart.find_item(product_id).quantity == qty


@then("the backend holds no carts")
def backend_holds_no_carts(gateway):
    assert gateway.carts == {}
