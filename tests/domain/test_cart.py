"""Unit tests for the storefront cart."""

import pytest

from arcoffee.domain.exceptions import ValidationError
from arcoffee.domain.model.cart import Cart, CartLine
from arcoffee.domain.model.product import Option, OptionGroup, Product
from arcoffee.domain.model.value_objects import Money

LARGE = Option("opt-large", OptionGroup.SIZE, "Large", Money(3000))
REGULAR = Option("opt-regular", OptionGroup.SIZE, "Regular", Money(0))
LESS_ICE = Option("opt-less-ice", OptionGroup.ICE, "Less Ice", Money(0))
SHOT = Option("opt-shot", OptionGroup.ADDON, "Extra Shot", Money(5000))
BOBA = Option("opt-boba", OptionGroup.ADDON, "Boba", Money(2000))

LATTE = Product(
    "p-latte", "Caffe Latte", Money(18000),
    options=(LARGE, REGULAR, LESS_ICE, SHOT, BOBA),
)
AMERICANO = Product("p-americano", "Americano", Money(15000))


class TestCartLine:

    def test_subtotal(self):
        line = CartLine(LATTE, 2, (LARGE, SHOT))
        assert line.subtotal == Money(52000)

    def test_two_sizes_rejected(self):
        with pytest.raises(ValidationError, match="Only one 'size' option"):
            CartLine(LATTE, 1, (LARGE, REGULAR))

    def test_many_addons_allowed(self):
        line = CartLine(LATTE, 1, (SHOT, BOBA, LARGE, LESS_ICE))
        assert line.subtotal == Money(28000)

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            CartLine(LATTE, 0)

    def test_option_not_offered_rejected(self):
        stranger = Option("opt-x", OptionGroup.ADDON, "Cheese Foam", Money(6000))
        with pytest.raises(ValidationError, match="not offered"):
            CartLine(LATTE, 1, (stranger,))


class TestCart:

    def test_total(self):
        cart = Cart()
        cart.add(AMERICANO)
        cart.add(LATTE, 3, [SHOT])
        assert cart.total == Money(15000 + 23000 * 3)
        assert cart.item_count == 4

    def test_identical_selection_merges(self):
        cart = Cart()
        cart.add(LATTE, 1, [LARGE, SHOT])
        cart.add(LATTE, 2, [SHOT, LARGE])
        assert len(cart.lines) == 1
        assert cart.lines[0].quantity == 3

    def test_different_notes_do_not_merge(self):
        cart = Cart()
        cart.add(LATTE, 1, notes="less sugar")
        cart.add(LATTE, 1)
        assert len(cart.lines) == 2

    def test_update_quantity_to_zero_removes_line(self):
        cart = Cart()
        cart.add(AMERICANO, 2)
        cart.update_quantity(0, 0)
        assert cart.is_empty

    def test_remove_unknown_line_rejected(self):
        with pytest.raises(ValidationError, match="No cart line"):
            Cart().remove(0)

    def test_unavailable_product_rejected(self):
        sold_out = Product("p-sold", "Affogato", Money(25000), is_available=False)
        with pytest.raises(ValidationError, match="unavailable"):
            Cart().add(sold_out)
