from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from rpos.api.dependencies import current_session
from rpos.application.dto.requests import MenuItemRequest
from rpos.application.dto.responses import MenuItemResponse, MenuResponse
from rpos.application.use_cases.context import SessionContext
from rpos.application.use_cases.menu_admin import (
    CreateMenuItem,
    DeleteMenuItem,
    ListMenu,
    UpdateMenuItem,
)
from rpos.domain.common.ids import MenuItemId
from rpos.infrastructure.db.repositories.menu_repo import SqlAlchemyMenuRepository

router = APIRouter()


@router.get("/v1/menu", response_model=MenuResponse)
def get_menu(category: str | None = Query(default=None)) -> MenuResponse:
    return ListMenu(menu_repository=SqlAlchemyMenuRepository()).execute(category=category)


@router.post(
    "/v1/menu/items",
    response_model=MenuItemResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_menu_item(
    request_dto: MenuItemRequest,
    session: SessionContext = Depends(current_session),
) -> MenuItemResponse:
    use_case = CreateMenuItem(menu_repository=SqlAlchemyMenuRepository())
    return use_case.execute(request_dto=request_dto, session=session)


@router.put("/v1/menu/items/{item_id}", response_model=MenuItemResponse)
def update_menu_item(
    item_id: str,
    request_dto: MenuItemRequest,
    session: SessionContext = Depends(current_session),
) -> MenuItemResponse:
    use_case = UpdateMenuItem(menu_repository=SqlAlchemyMenuRepository())
    return use_case.execute(item_id=MenuItemId(item_id), request_dto=request_dto, session=session)


@router.delete("/v1/menu/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu_item(
    item_id: str,
    session: SessionContext = Depends(current_session),
) -> None:
    DeleteMenuItem(menu_repository=SqlAlchemyMenuRepository()).execute(
        item_id=MenuItemId(item_id),
        session=session,
    )
