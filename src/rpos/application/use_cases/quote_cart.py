from __future__ import annotations

from rpos.application.dto.requests import CartRequest
from rpos.application.dto.responses import CartQuoteResponse
from rpos.application.errors import InvalidOrderLineError, UnknownMenuItemError
from rpos.application.mappers.order_mapper import to_cart_quote_response
from rpos.application.ports.repositories import MenuRepository
from rpos.domain.common.ids import MenuItemId
from rpos.domain.menu.entities import MenuItem
from rpos.domain.order.cart import Cart


def build_cart(menu_repository: MenuRepository, request_dto: CartRequest) -> Cart:
    """Compose a cart from configured menu lines followed by custom lines.

    Prices are captured from the current menu at this moment.
    """
    cart = Cart()
    menu_items: dict[str, MenuItem] = {}
    for request_line in request_dto.lines:
        menu_item = menu_items.get(request_line.menu_item_id)
        if menu_item is None:
            menu_item = menu_repository.get(MenuItemId(request_line.menu_item_id))
            if menu_item is None:
                raise UnknownMenuItemError(
                    f"menu item {request_line.menu_item_id} does not exist",
                    details={"menuItemId": request_line.menu_item_id},
                )
            menu_items[request_line.menu_item_id] = menu_item

        try:
            cart.add_configured(
                menu_item,
                size=request_line.size,
                add_ons=request_line.add_ons,
                quantity=request_line.quantity,
            )
        except ValueError as exc:
            raise InvalidOrderLineError(
                str(exc),
                details={"menuItemId": request_line.menu_item_id},
            ) from exc

    for custom in request_dto.custom_items:
        try:
            cart.add_custom_item(custom.name, custom.price, custom.quantity)
        except ValueError as exc:
            raise InvalidOrderLineError(str(exc)) from exc

    return cart


class QuoteCart:
    def __init__(self, menu_repository: MenuRepository) -> None:
        self._menu_repository = menu_repository

    def execute(self, request_dto: CartRequest) -> CartQuoteResponse:
        return to_cart_quote_response(build_cart(self._menu_repository, request_dto))
