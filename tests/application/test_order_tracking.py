"""Tests for applying backend-reported order statuses."""

import pytest
from protean.exceptions import ValidationError
from storefront.cart.cart import Cart
from storefront.checkout.checkout import checkout
from storefront.order.builder import build_order
from storefront.order.status import OrderStatus
from storefront.order.tracking import track_order
from storefront.shared.errors import IllegalStatusTransition


@pytest.fixture()
def placed_order(session, products, valid_address, valid_card):
    session.add_item(products[0])
    return checkout(session, valid_address, valid_card)


class TestTrackOrder:
    def test_unchanged_status(self, placed_order, gateway):
        assert track_order(placed_order, gateway) is False
        assert placed_order.status == OrderStatus.PENDING.value

    def test_applies_reported_status(self, placed_order, gateway):
        gateway.set_order_status(placed_order.remote_id, OrderStatus.CONFIRMED)

        assert track_order(placed_order, gateway) is True
        assert placed_order.status == OrderStatus.CONFIRMED.value

    def test_follows_the_order_through_its_lifecycle(self, placed_order, gateway):
        for status in ("Confirmed", "Processing", "Shipped", "Delivered"):
            gateway.set_order_status(placed_order.remote_id, status)
            track_order(placed_order, gateway)
        assert placed_order.status == OrderStatus.DELIVERED.value

    def test_illegal_jump_is_rejected(self, placed_order, gateway):
        gateway.set_order_status(placed_order.remote_id, OrderStatus.DELIVERED)

        with pytest.raises(IllegalStatusTransition):
            track_order(placed_order, gateway)
        assert placed_order.status == OrderStatus.PENDING.value

    def test_unplaced_order_cannot_be_tracked(self, make_product, gateway, valid_address, valid_card):
        cart = Cart.create()
        cart.add_item(make_product(1))
        order = build_order(cart, valid_address, valid_card)

        with pytest.raises(ValidationError):
            track_order(order, gateway)
        assert gateway.calls_to("get_order_status") == []
