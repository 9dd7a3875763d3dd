from __future__ import annotations

from rpos.application.dto.responses import MenuItemResponse, MenuResponse, PricedOptionResponse
from rpos.domain.menu.entities import MenuItem


def to_menu_item_response(item: MenuItem) -> MenuItemResponse:
    return MenuItemResponse(
        itemId=str(item.item_id),
        name=item.name,
        category=item.category,
        price=item.price,
        displayPrice=item.display_price(),
        description=item.description,
        sizes=[PricedOptionResponse(name=size.name, price=size.price) for size in item.sizes],
        addOns=[
            PricedOptionResponse(name=add_on.name, price=add_on.price) for add_on in item.add_ons
        ],
    )


def to_menu_response(items: list[MenuItem]) -> MenuResponse:
    categories = list(dict.fromkeys(item.category for item in items))
    return MenuResponse(
        categories=categories,
        items=[to_menu_item_response(item) for item in items],
    )
