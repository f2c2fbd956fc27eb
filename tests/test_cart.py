"""
Tests for the cart.

Tests cover:
- Adding products (increment vs append, first-add order)
- Quantity updates and removal
- Subtotal, tax and total arithmetic
- JSON snapshot persistence
"""

from decimal import Decimal

import pytest

from apps.pos.cart import Cart
from apps.pos.catalog import Product


class TestCartMutations:
    """Test adding, updating and removing cart lines."""

    def test_add_new_product_appends_line_with_quantity_one(self, widget):
        cart = Cart()
        cart.add_item(widget)

        assert len(cart) == 1
        assert cart.get_item("p1").quantity == 1

    def test_add_existing_product_increments_quantity(self, widget):
        """Adding the same product n times gives one line with quantity n."""
        cart = Cart()
        for _ in range(4):
            cart.add_item(widget)

        assert len(cart) == 1
        assert cart.get_item("p1").quantity == 4

    def test_lines_keep_first_add_order(self, widget, gadget):
        cart = Cart()
        cart.add_item(gadget)
        cart.add_item(widget)
        cart.add_item(gadget)

        assert [item.product.id for item in cart] == ["p2", "p1"]

    def test_add_ignores_stock(self, gadget):
        """Out-of-stock products can still be added."""
        cart = Cart()
        cart.add_item(gadget)
        cart.add_item(gadget)

        assert cart.get_item("p2").quantity == 2

    def test_update_quantity_sets_value(self, widget):
        cart = Cart()
        cart.add_item(widget)
        cart.update_quantity("p1", 7)

        assert cart.get_item("p1").quantity == 7

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_update_quantity_to_zero_or_less_removes_line(self, widget, gadget, quantity):
        cart = Cart()
        cart.add_item(widget)
        cart.add_item(gadget)
        cart.update_quantity("p1", quantity)

        assert cart.get_item("p1") is None
        assert [item.product.id for item in cart] == ["p2"]

    def test_update_unknown_product_is_noop(self, widget):
        cart = Cart()
        cart.add_item(widget)
        cart.update_quantity("missing", 3)

        assert cart.to_snapshot() == [{"product": widget.to_dict(), "quantity": 1}]

    def test_remove_item(self, widget, gadget):
        cart = Cart()
        cart.add_item(widget)
        cart.add_item(gadget)
        cart.remove_item("p1")
        cart.remove_item("missing")

        assert [item.product.id for item in cart] == ["p2"]

    def test_clear_empties_cart(self, widget):
        cart = Cart()
        cart.add_item(widget)
        cart.clear()

        assert cart.is_empty
        assert cart.item_count == 0


class TestCartTotals:
    """Test cart arithmetic."""

    def test_empty_cart_totals_are_zero(self):
        cart = Cart(tax_rate=Decimal("0.08"))

        assert cart.subtotal == 0
        assert cart.tax == 0
        assert cart.total == 0

    def test_worked_example(self, widget, gadget):
        """Widget x2 at 10.00 and Gadget x1 at 5.50 with 8% tax."""
        cart = Cart(tax_rate=Decimal("0.08"))
        cart.add_item(widget)
        cart.add_item(widget)
        cart.add_item(gadget)

        assert cart.subtotal == Decimal("25.50")
        assert cart.tax == Decimal("2.04")
        assert cart.total == Decimal("27.54")
        assert cart.item_count == 3

    def test_total_is_subtotal_plus_tax(self, widget):
        cart = Cart(tax_rate=Decimal("0.08"))
        cart.add_item(widget)
        cart.update_quantity("p1", 3)

        assert cart.total == cart.subtotal + cart.tax

    def test_no_intermediate_rounding(self):
        """Fractional cents are kept until display."""
        cheap = Product(id="x", name="Sticker", sku="STK", price=Decimal("0.99"))
        cart = Cart(tax_rate=Decimal("0.08"))
        cart.add_item(cheap)

        assert cart.tax == Decimal("0.0792")
        assert cart.total == Decimal("1.0692")

    def test_line_total(self, widget):
        cart = Cart()
        item = cart.add_item(widget)
        cart.add_item(widget)

        assert item.line_total == Decimal("20.00")


class TestCartSnapshot:
    """Test JSON snapshot persistence."""

    def test_snapshot_roundtrip_keeps_order_and_quantities(self, widget, gadget):
        cart = Cart(tax_rate=Decimal("0.08"))
        cart.add_item(gadget)
        cart.add_item(widget)
        cart.add_item(widget)

        restored = Cart.from_snapshot(cart.to_snapshot(), tax_rate=Decimal("0.08"))

        assert [(item.product, item.quantity) for item in restored] == [
            (gadget, 1),
            (widget, 2),
        ]
        assert restored.total == cart.total

    def test_from_empty_snapshot(self):
        assert Cart.from_snapshot(None).is_empty
