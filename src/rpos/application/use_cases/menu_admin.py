from __future__ import annotations

import logging
from uuid import uuid4

from rpos.application.dto.requests import MenuItemRequest
from rpos.application.dto.responses import MenuItemResponse, MenuResponse
from rpos.application.errors import InvalidMenuItemError, MenuItemNotFoundError
from rpos.application.mappers.menu_mapper import to_menu_item_response, to_menu_response
from rpos.application.ports.repositories import MenuRepository
from rpos.application.use_cases.context import SessionContext
from rpos.domain.common.ids import MenuItemId
from rpos.domain.menu.entities import AddOn, MenuItem, Size

logger = logging.getLogger(__name__)


def _to_menu_item(item_id: MenuItemId, request_dto: MenuItemRequest) -> MenuItem:
    try:
        return MenuItem(
            item_id=item_id,
            name=request_dto.name.strip(),
            category=request_dto.category.strip(),
            price=request_dto.price,
            description=(request_dto.description or "").strip() or None,
            sizes=tuple(
                Size(name=size.name.strip(), price=size.price) for size in request_dto.sizes
            ),
            add_ons=tuple(
                AddOn(name=add_on.name.strip(), price=add_on.price)
                for add_on in request_dto.add_ons
            ),
        )
    except ValueError as exc:
        raise InvalidMenuItemError(str(exc)) from exc


class ListMenu:
    def __init__(self, menu_repository: MenuRepository) -> None:
        self._menu_repository = menu_repository

    def execute(self, category: str | None = None) -> MenuResponse:
        items = self._menu_repository.list_items()
        response = to_menu_response(items)
        if category and category != "All":
            response.items = [item for item in response.items if item.category == category]
        return response


class CreateMenuItem:
    def __init__(self, menu_repository: MenuRepository) -> None:
        self._menu_repository = menu_repository

    def execute(self, request_dto: MenuItemRequest, session: SessionContext) -> MenuItemResponse:
        session.require_admin("creating a menu item")
        item = _to_menu_item(MenuItemId(f"itm_{uuid4().hex[:12]}"), request_dto)
        self._menu_repository.add(item)
        logger.info("menu_item_created", extra={"menu_item_id": str(item.item_id)})
        return to_menu_item_response(item)


class UpdateMenuItem:
    def __init__(self, menu_repository: MenuRepository) -> None:
        self._menu_repository = menu_repository

    def execute(
        self,
        item_id: MenuItemId,
        request_dto: MenuItemRequest,
        session: SessionContext,
    ) -> MenuItemResponse:
        session.require_admin("editing a menu item")
        item = _to_menu_item(item_id, request_dto)
        if not self._menu_repository.update(item):
            raise MenuItemNotFoundError(f"menu item {item_id} not found")
        logger.info("menu_item_updated", extra={"menu_item_id": str(item_id)})
        return to_menu_item_response(item)


class DeleteMenuItem:
    def __init__(self, menu_repository: MenuRepository) -> None:
        self._menu_repository = menu_repository

    def execute(self, item_id: MenuItemId, session: SessionContext) -> None:
        session.require_admin("deleting a menu item")
        if not self._menu_repository.delete(item_id):
            raise MenuItemNotFoundError(f"menu item {item_id} not found")
        logger.info("menu_item_deleted", extra={"menu_item_id": str(item_id)})
