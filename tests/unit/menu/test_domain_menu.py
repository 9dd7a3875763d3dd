from __future__ import annotations

import pytest

from rpos.domain.common.ids import MenuItemId
from rpos.domain.menu.entities import AddOn, MenuItem, Size


def test_menu_item_requires_base_price_or_priced_size() -> None:
    with pytest.raises(ValueError, match="base price or at least one size"):
        MenuItem(item_id=MenuItemId("itm_1"), name="Water", category="Drinks", price=0.0)


def test_menu_item_with_only_sizes_is_valid() -> None:
    item = MenuItem(
        item_id=MenuItemId("itm_1"),
        name="Latte",
        category="Drinks",
        price=0.0,
        sizes=(Size("Regular", 3.5), Size("Large", 4.25)),
    )

    assert item.has_sizes
    assert item.display_price() == 3.5
    assert item.find_size("Large") == Size("Large", 4.25)
    assert item.find_size("Huge") is None
    assert item.find_size(None) is None


def test_display_price_without_sizes_is_base_price() -> None:
    item = MenuItem(item_id=MenuItemId("itm_1"), name="Fries", category="Sides", price=3.5)
    assert item.display_price() == 3.5


def test_menu_item_rejects_negative_base_price() -> None:
    with pytest.raises(ValueError):
        MenuItem(item_id=MenuItemId("itm_1"), name="Fries", category="Sides", price=-1.0)


def test_size_and_add_on_prices_must_be_positive() -> None:
    with pytest.raises(ValueError):
        Size("Small", 0.0)
    with pytest.raises(ValueError):
        AddOn("Cheese", -0.5)


def test_menu_item_rejects_duplicate_option_names() -> None:
    with pytest.raises(ValueError, match="size names"):
        MenuItem(
            item_id=MenuItemId("itm_1"),
            name="Burger",
            category="Mains",
            price=5.0,
            sizes=(Size("Small", 5.0), Size("Small", 6.0)),
        )
    with pytest.raises(ValueError, match="add-on names"):
        MenuItem(
            item_id=MenuItemId("itm_1"),
            name="Burger",
            category="Mains",
            price=5.0,
            add_ons=(AddOn("Cheese", 1.0), AddOn("Cheese", 1.5)),
        )


def test_menu_item_requires_name_and_category() -> None:
    with pytest.raises(ValueError, match="name"):
        MenuItem(item_id=MenuItemId("itm_1"), name=" ", category="Mains", price=5.0)
    with pytest.raises(ValueError, match="category"):
        MenuItem(item_id=MenuItemId("itm_1"), name="Burger", category="", price=5.0)
