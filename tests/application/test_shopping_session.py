"""Tests for ShoppingSession: optimistic sync, rollback and reconciliation."""

import pytest
from storefront.cart.cart import Cart
from storefront.cart.session import ShoppingSession
from storefront.gateway.port import CartLine, CartOutOfSync, RemoteCart, RemoteRejected, RemoteUnavailable
from storefront.shared.errors import InvalidQuantity, ItemNotFound


def _lines(cart):
    return [(i.product_id, i.quantity, i.selected_size, i.selected_color) for i in cart.items]


class TestOptimisticSync:
    def test_first_mutation_creates_the_backend_cart(self, session, gateway, products):
        session.add_item(products[0], 2)

        assert len(gateway.calls_to("create_cart")) == 1
        assert session.cart.is_persisted
        stored = gateway.carts[session.cart.remote_id]
        assert stored.lines == (CartLine(product_id=1, quantity=2),)

    def test_later_mutations_update_the_backend_cart(self, session, gateway, products):
        session.add_item(products[0])
        session.add_item(products[1], 3)
        session.set_quantity(1, 4)

        assert len(gateway.calls_to("create_cart")) == 1
        assert len(gateway.calls_to("update_cart")) == 2
        stored = gateway.carts[session.cart.remote_id]
        assert stored.lines == (CartLine(1, 4), CartLine(2, 3))

    def test_variants_survive_reconciliation(self, session, products):
        session.add_item(products[1], 1, size="M", color="red")
        session.add_item(products[1], 2, size="L")

        assert _lines(session.cart) == [(2, 1, "M", "red"), (2, 2, "L", None)]

    def test_prices_come_from_the_local_snapshot(self, session, gateway, products, make_product):
        session.add_item(products[0], 1)
        gateway.add_product(make_product(1, 1.0))  # Repriced after the add

        session.add_item(products[2], 1)

        assert session.cart.find_item(1).unit_price == 109.95

    def test_without_auto_sync_nothing_is_sent(self, gateway, products):
        session = ShoppingSession(gateway=gateway, auto_sync=False)
        session.add_item(products[0])

        assert gateway.calls_to("create_cart") == []
        assert not session.cart.is_persisted

        session.sync()
        assert session.cart.is_persisted

    def test_removing_absent_line_does_not_call_backend(self, session, gateway):
        assert session.remove_item(99) is False
        assert gateway.calls == []

    def test_invalid_quantity_is_raised_before_any_call(self, session, gateway, products):
        with pytest.raises(InvalidQuantity):
            session.add_item(products[0], 0)
        assert gateway.calls == []

    def test_unknown_line_is_raised_before_any_call(self, session, gateway):
        with pytest.raises(ItemNotFound):
            session.set_quantity(5, 2)
        assert gateway.calls == []


class TestRollback:
    def test_failed_add_restores_previous_lines(self, session, gateway, products):
        session.add_item(products[0], 2)
        gateway.configure(failure="unavailable", failure_reason="timed out")

        with pytest.raises(RemoteUnavailable) as exc:
            session.add_item(products[1], 1)

        assert exc.value.detail == "timed out"
        assert _lines(session.cart) == [(1, 2, None, None)]

    def test_failed_quantity_change_is_undone(self, session, gateway, products):
        session.add_item(products[0], 2)
        gateway.configure(failure="rejected")

        with pytest.raises(RemoteRejected):
            session.set_quantity(1, 7)

        assert session.cart.find_item(1).quantity == 2

    def test_failed_remove_is_undone(self, session, gateway, products):
        session.add_item(products[0])
        gateway.configure(failure="rejected")

        with pytest.raises(RemoteRejected):
            session.remove_item(1)

        assert not session.cart.is_empty

    def test_failed_first_sync_leaves_cart_unpersisted(self, session, gateway, products):
        gateway.configure(failure="unavailable")

        with pytest.raises(RemoteUnavailable):
            session.add_item(products[0])

        assert session.cart.is_empty
        assert not session.cart.is_persisted

    def test_totals_after_rollback_match_before(self, session, gateway, products):
        session.add_item(products[0], 1)
        before = session.totals()
        gateway.configure(failure="unavailable")

        with pytest.raises(RemoteUnavailable):
            session.clear()

        assert session.totals() == before

    def test_failed_add_leaves_no_events_behind(self, session, gateway, products):
        session.add_item(products[0], 2)
        events_before = list(session.cart._events)
        gateway.configure(failure="unavailable")

        with pytest.raises(RemoteUnavailable):
            session.add_item(products[1], 1)

        assert session.cart._events == events_before
        assert not any(getattr(e, "product_id", None) == 2 for e in session.cart._events)


class TestServerAuthority:
    def test_backend_answer_replaces_local_lines(self, session, gateway, products, monkeypatch):
        session.add_item(products[0], 1)
        original_update = gateway.update_cart

        def server_adjusts(cart_id, lines, user_id=None):
            original_update(cart_id, lines, user_id=user_id)
            adjusted = RemoteCart(cart_id=cart_id, user_id=user_id, lines=(CartLine(1, 1), CartLine(3, 2)))
            gateway.carts[cart_id] = adjusted
            return adjusted

        monkeypatch.setattr(gateway, "update_cart", server_adjusts)
        session.add_item(products[0], 1)

        assert [(i.product_id, i.quantity) for i in session.cart.items] == [(1, 1), (3, 2)]
        assert session.cart.find_item(3).unit_price == 55.99

    def test_refresh_adopts_backend_copy(self, session, gateway, products):
        session.add_item(products[0], 1)
        remote_id = session.cart.remote_id
        gateway.carts[remote_id] = RemoteCart(cart_id=remote_id, user_id=1, lines=(CartLine(9, 3),))

        session.refresh()

        assert [(i.product_id, i.quantity) for i in session.cart.items] == [(9, 3)]

    def test_unresolvable_answer_to_first_sync_keeps_backend_cart(self, session, gateway, products, monkeypatch):
        original_create = gateway.create_cart

        def stores_unknown_product(user_id, lines):
            created = original_create(user_id, lines)
            stored = RemoteCart(cart_id=created.cart_id, user_id=user_id, lines=(*created.lines, CartLine(777, 1)))
            gateway.carts[created.cart_id] = stored
            return stored

        monkeypatch.setattr(gateway, "create_cart", stores_unknown_product)

        with pytest.raises(CartOutOfSync) as exc:
            session.add_item(products[0], 1)

        assert "777" in exc.value.detail
        assert session.cart.remote_id in gateway.carts
        assert _lines(session.cart) == [(1, 1, None, None)]

        session.add_item(products[1], 1)

        assert len(gateway.calls_to("create_cart")) == 1
        assert len(gateway.calls_to("update_cart")) == 1
        assert gateway.carts[session.cart.remote_id].lines == (CartLine(1, 1), CartLine(2, 1))

    def test_unresolvable_answer_to_update_keeps_local_change(self, session, gateway, products, monkeypatch):
        session.add_item(products[0], 1)
        remote_id = session.cart.remote_id
        original_update = gateway.update_cart

        def stores_unknown_product(cart_id, lines, user_id=None):
            updated = original_update(cart_id, lines, user_id=user_id)
            stored = RemoteCart(cart_id=cart_id, user_id=updated.user_id, lines=(*updated.lines, CartLine(777, 1)))
            gateway.carts[cart_id] = stored
            return stored

        monkeypatch.setattr(gateway, "update_cart", stores_unknown_product)

        with pytest.raises(CartOutOfSync):
            session.add_item(products[1], 2)

        assert session.cart.remote_id == remote_id
        assert _lines(session.cart) == [(1, 1, None, None), (2, 2, None, None)]

    def test_refresh_of_unpersisted_cart_is_noop(self, session, gateway):
        session.refresh()
        assert gateway.calls == []


class TestSessionLifecycle:
    def test_load_hydrates_backend_cart(self, gateway):
        remote = gateway.create_cart(5, [CartLine(1, 2), CartLine(14, 1)])

        session = ShoppingSession.load(remote.cart_id, gateway=gateway)

        assert session.cart.remote_id == remote.cart_id
        assert session.cart.user_id == 5
        assert session.totals().subtotal == pytest.approx(2 * 109.95 + 999.99)

    def test_resume_picks_latest_cart(self, gateway):
        gateway.create_cart(3, [CartLine(1, 1)])
        latest = gateway.create_cart(3, [CartLine(2, 4)])
        gateway.create_cart(8, [CartLine(9, 1)])

        session = ShoppingSession.resume(3, gateway=gateway)

        assert session.cart.remote_id == latest.cart_id
        assert [(i.product_id, i.quantity) for i in session.cart.items] == [(2, 4)]

    def test_resume_without_carts_starts_empty(self, gateway):
        session = ShoppingSession.resume(42, gateway=gateway)
        assert session.cart.is_empty
        assert session.cart.user_id == 42
        assert not session.cart.is_persisted

    def test_abandon_deletes_backend_cart(self, session, gateway, products):
        session.add_item(products[0])
        remote_id = session.cart.remote_id

        session.abandon()

        assert remote_id not in gateway.carts
        assert session.cart.is_empty
        assert not session.cart.is_persisted

    def test_failed_abandon_keeps_cart(self, session, gateway, products):
        session.add_item(products[0])
        gateway.configure(failure="unavailable")

        with pytest.raises(RemoteUnavailable):
            session.abandon()

        assert not session.cart.is_empty
        assert session.cart.is_persisted

    def test_sessions_do_not_share_carts(self, gateway, products):
        first = ShoppingSession(gateway=gateway, user_id=1)
        second = ShoppingSession(gateway=gateway, user_id=2)

        first.add_item(products[0])

        assert second.cart.is_empty
        assert first.cart.remote_id != second.cart.remote_id

    def test_explicit_cart_is_used(self, gateway):
        cart = Cart.create(user_id=9)
        session = ShoppingSession(gateway=gateway, cart=cart)
        assert session.cart is cart
