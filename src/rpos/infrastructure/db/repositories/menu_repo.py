from __future__ import annotations

from typing import Any

from sqlalchemy import Engine, delete, select
from sqlalchemy.orm import Session

from rpos.application.ports.repositories import MenuRepository
from rpos.domain.common.ids import MenuItemId
from rpos.domain.menu.entities import AddOn, MenuItem, Size
from rpos.infrastructure.db.models.menu import MenuItemModel
from rpos.infrastructure.db.session import get_engine, persistence_errors


class SqlAlchemyMenuRepository(MenuRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def list_items(self) -> list[MenuItem]:
        statement = select(MenuItemModel).order_by(MenuItemModel.category, MenuItemModel.name)
        with persistence_errors("menu_list"), Session(self._engine) as session:
            models = list(session.execute(statement).scalars().all())
        return [self._to_domain(model) for model in models]

    def get(self, item_id: MenuItemId) -> MenuItem | None:
        with persistence_errors("menu_get"), Session(self._engine) as session:
            model = session.get(MenuItemModel, str(item_id))
        if model is None:
            return None
        return self._to_domain(model)

    def add(self, item: MenuItem) -> None:
        with persistence_errors("menu_add"), Session(self._engine) as session:
            session.add(self._to_model(item))
            session.commit()

    def update(self, item: MenuItem) -> bool:
        with persistence_errors("menu_update"), Session(self._engine) as session:
            model = session.get(MenuItemModel, str(item.item_id))
            if model is None:
                return False
            model.name = item.name
            model.category = item.category
            model.price = item.price
            model.description = item.description
            model.sizes = _options_to_json(item.sizes)
            model.add_ons = _options_to_json(item.add_ons)
            session.commit()
        return True

    def delete(self, item_id: MenuItemId) -> bool:
        statement = delete(MenuItemModel).where(MenuItemModel.id == str(item_id))
        with persistence_errors("menu_delete"), Session(self._engine) as session:
            result = session.execute(statement)
            session.commit()
        return result.rowcount == 1

    def _to_model(self, item: MenuItem) -> MenuItemModel:
        return MenuItemModel(
            id=str(item.item_id),
            name=item.name,
            category=item.category,
            price=item.price,
            description=item.description,
            sizes=_options_to_json(item.sizes),
            add_ons=_options_to_json(item.add_ons),
        )

    def _to_domain(self, model: MenuItemModel) -> MenuItem:
        return MenuItem(
            item_id=MenuItemId(model.id),
            name=model.name,
            category=model.category,
            price=float(model.price or 0.0),
            description=model.description,
            sizes=tuple(
                Size(name=raw["name"], price=float(raw["price"])) for raw in model.sizes or []
            ),
            add_ons=tuple(
                AddOn(name=raw["name"], price=float(raw["price"])) for raw in model.add_ons or []
            ),
        )


def _options_to_json(options: tuple[Size, ...] | tuple[AddOn, ...]) -> list[dict[str, Any]]:
    return [{"name": option.name, "price": option.price} for option in options]
