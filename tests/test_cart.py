"""Tests for the cart and session storage."""
import pytest

from storefront.errors import NotFoundError
from storefront.models import CartItem, compute_order_totals
from storefront.session_store import SessionStorage


class TestCartStore:
    def test_totals_and_count(self, cart):
        assert cart.total == 3499 + 2 * 599
        assert cart.count == 3

    def test_same_product_and_size_merges(self, cart):
        cart.add_item(CartItem(product_id=1, name="Classic Denim Jacket", price=3499, quantity=2, selected_size="M"))
        assert len(cart.items) == 2
        assert cart.count == 5

    def test_different_size_is_new_line(self, cart):
        cart.add_item(CartItem(product_id=1, name="Classic Denim Jacket", price=3499, selected_size="L"))
        assert len(cart.items) == 3

    def test_update_quantity_to_zero_removes(self, cart):
        cart.update_quantity(3, "S", 0)
        assert [item.product_id for item in cart.items] == [1]

    def test_update_quantity_unknown_line(self, cart):
        with pytest.raises(NotFoundError):
            cart.update_quantity(1, "XS", 2)

    def test_remove_item(self, cart):
        cart.remove_item(1)
        assert cart.count == 2

    def test_remove_missing_item_raises(self, cart):
        with pytest.raises(NotFoundError):
            cart.remove_item(99)

    def test_items_returns_copy(self, cart):
        cart.items.clear()
        assert cart.count == 3

    def test_checkout_lifecycle(self, cart):
        totals = compute_order_totals(cart.total)
        cart.start_checkout(totals)
        assert cart.is_checking_out
        assert cart.checkout_totals == totals

        cart.complete_checkout()
        assert cart.count == 0
        assert cart.checkout_totals is None
        assert not cart.is_checking_out


class TestSessionStorage:
    def test_set_get_remove(self):
        storage = SessionStorage()
        storage.set_item("lastOrder", "{}")
        assert storage.get_item("lastOrder") == "{}"
        assert "lastOrder" in storage
        storage.remove_item("lastOrder")
        assert storage.get_item("lastOrder") is None
        assert len(storage) == 0

    def test_rejects_unserialized_values(self):
        storage = SessionStorage()
        with pytest.raises(TypeError):
            storage.set_item("lastOrder", {"orderId": "ORDER_1"})

    def test_write_replaces_previous_value(self):
        storage = SessionStorage()
        storage.set_item("lastOrder", "first")
        storage.set_item("lastOrder", "second")
        assert storage.get_item("lastOrder") == "second"
        assert len(storage) == 1
