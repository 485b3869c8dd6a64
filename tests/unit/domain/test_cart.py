from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from dinecore.domain.cart.entities import DEFAULT_CATEGORY, Cart, CartItem
from dinecore.domain.common.ids import MenuItemId
from dinecore.domain.common.money import Money


def _ramen() -> CartItem:
    return CartItem(item_id=MenuItemId("itm_ramen"), name="Tonkotsu Ramen", unit_price=Money.of(350))


def _gyoza() -> CartItem:
    return CartItem(item_id=MenuItemId("itm_gyoza"), name="Gyoza", unit_price=Money.of(180))


def test_adding_the_same_item_twice_bumps_quantity() -> None:
    cart = Cart().add_item(_ramen()).add_item(_ramen())
    assert len(cart.items) == 1
    assert cart.items[0].quantity == 2
    assert cart.subtotal == Money.of(700)


def test_subtotal_and_count_across_items() -> None:
    cart = Cart().add_item(_ramen()).add_item(_gyoza())
    cart = cart.update_quantity(MenuItemId("itm_gyoza"), 3)
    assert cart.item_count == 4
    assert cart.subtotal == Money.of(350 + 540)
    assert cart.items[0].category == DEFAULT_CATEGORY


def test_quantity_zero_removes_the_item() -> None:
    cart = Cart().add_item(_ramen()).add_item(_gyoza())
    cart = cart.update_quantity(MenuItemId("itm_ramen"), 0)
    assert [item.name for item in cart.items] == ["Gyoza"]


def test_operations_never_mutate_the_original() -> None:
    cart = Cart().add_item(_ramen())
    cleared = cart.clear()
    assert cleared.is_empty
    assert not cart.is_empty
    assert cart.remove_item(MenuItemId("itm_missing")) == cart
