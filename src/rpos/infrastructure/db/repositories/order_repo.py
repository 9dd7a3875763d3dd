from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Engine, delete, select, update
from sqlalchemy.orm import Session

from rpos.application.ports.repositories import (
    OptimisticConcurrencyError,
    OrderRepository,
    TableOccupiedError,
)
from rpos.domain.common.ids import MenuItemId, OrderId, TableId
from rpos.domain.order.entities import Order, OrderLine, OrderStatus, OrderType
from rpos.domain.table.entities import TableStatus
from rpos.infrastructure.db.models.order import OrderModel
from rpos.infrastructure.db.models.table import TableModel
from rpos.infrastructure.db.session import get_engine, persistence_errors


class SqlAlchemyOrderRepository(OrderRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def add(self, order: Order, occupy_table_id: TableId | None = None) -> None:
        """Insert the order, occupying its table in the same transaction.

        The table update only matches an Available row, so two terminals
        racing for one table cannot both succeed.
        """
        with persistence_errors("order_add"), Session(self._engine) as session:
            if occupy_table_id is not None:
                result = session.execute(
                    update(TableModel)
                    .where(
                        TableModel.id == str(occupy_table_id),
                        TableModel.status == TableStatus.AVAILABLE.value,
                    )
                    .values(status=TableStatus.OCCUPIED.value)
                )
                if result.rowcount != 1:
                    session.rollback()
                    raise TableOccupiedError(f"table {occupy_table_id} is no longer available")
            session.add(self._to_model(order))
            session.commit()

    def get(self, order_id: OrderId) -> Order | None:
        with persistence_errors("order_get"), Session(self._engine) as session:
            model = session.get(OrderModel, str(order_id))
        if model is None:
            return None
        return self._to_domain(model)

    def update_lines_with_version(
        self,
        order_id: OrderId,
        lines: list[OrderLine],
        total: float,
        expected_version: int,
    ) -> Order:
        statement = (
            update(OrderModel)
            .where(
                OrderModel.id == str(order_id),
                OrderModel.version == expected_version,
                OrderModel.status == OrderStatus.PENDING.value,
            )
            .values(
                lines=_lines_to_json(lines),
                total=total,
                version=OrderModel.version + 1,
            )
        )
        with persistence_errors("order_update_lines"), Session(self._engine) as session:
            result = session.execute(statement)
            if result.rowcount != 1:
                session.rollback()
                raise OptimisticConcurrencyError(f"order {order_id} version conflict")
            session.commit()

        return self._reload(order_id)

    def update_status_with_version(
        self,
        order_id: OrderId,
        new_status: OrderStatus,
        expected_version: int,
        completed_at: datetime | None = None,
        release_table_id: TableId | None = None,
    ) -> Order:
        statement = (
            update(OrderModel)
            .where(
                OrderModel.id == str(order_id),
                OrderModel.version == expected_version,
                OrderModel.status == OrderStatus.PENDING.value,
            )
            .values(
                status=new_status.value,
                completed_at=completed_at,
                version=OrderModel.version + 1,
            )
        )
        with persistence_errors("order_update_status"), Session(self._engine) as session:
            result = session.execute(statement)
            if result.rowcount != 1:
                session.rollback()
                raise OptimisticConcurrencyError(f"order {order_id} version conflict")
            if release_table_id is not None:
                session.execute(
                    update(TableModel)
                    .where(TableModel.id == str(release_table_id))
                    .values(status=TableStatus.AVAILABLE.value)
                )
            session.commit()

        return self._reload(order_id)

    def delete(self, order_id: OrderId) -> bool:
        statement = delete(OrderModel).where(OrderModel.id == str(order_id))
        with persistence_errors("order_delete"), Session(self._engine) as session:
            result = session.execute(statement)
            session.commit()
        return result.rowcount == 1

    def list_created_since(self, start: datetime) -> list[Order]:
        statement = (
            select(OrderModel)
            .where(OrderModel.created_at >= _as_utc(start))
            .order_by(OrderModel.created_at.asc(), OrderModel.id.asc())
        )
        with persistence_errors("order_list"), Session(self._engine) as session:
            models = list(session.execute(statement).scalars().all())
        return [self._to_domain(model) for model in models]

    def find_pending_for_table(self, table_id: TableId) -> Order | None:
        statement = (
            select(OrderModel)
            .where(
                OrderModel.table_id == str(table_id),
                OrderModel.status == OrderStatus.PENDING.value,
            )
            .order_by(OrderModel.created_at.desc())
            .limit(1)
        )
        with persistence_errors("order_find_pending"), Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def _reload(self, order_id: OrderId) -> Order:
        updated = self.get(order_id)
        if updated is None:
            raise RuntimeError(f"order {order_id} not found after update")
        return updated

    def _to_model(self, order: Order) -> OrderModel:
        return OrderModel(
            id=str(order.order_id),
            order_type=order.order_type.value,
            table_id=str(order.table_id) if order.table_id else None,
            status=order.status.value,
            lines=_lines_to_json(order.lines),
            total=order.total,
            created_at=_as_utc(order.created_at),
            completed_at=_as_utc(order.completed_at) if order.completed_at else None,
            version=order.version,
        )

    def _to_domain(self, model: OrderModel) -> Order:
        lines = [
            OrderLine(
                menu_item_id=MenuItemId(raw["menuItemId"]),
                name=raw["name"],
                price=float(raw["price"]),
                quantity=int(raw["quantity"]),
                size=raw.get("size"),
                add_ons=tuple(raw.get("addOns") or ()),
            )
            for raw in model.lines
        ]
        return Order(
            order_id=OrderId(model.id),
            order_type=OrderType(model.order_type),
            status=OrderStatus(model.status),
            lines=lines,
            total=float(model.total),
            created_at=_from_db(model.created_at),
            table_id=TableId(model.table_id) if model.table_id else None,
            completed_at=_from_db(model.completed_at) if model.completed_at else None,
            version=model.version,
        )


def _lines_to_json(lines: list[OrderLine]) -> list[dict[str, Any]]:
    return [
        {
            "menuItemId": str(line.menu_item_id),
            "name": line.name,
            "price": line.price,
            "quantity": line.quantity,
            "size": line.size,
            "addOns": list(line.add_ons),
        }
        for line in lines
    ]


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _from_db(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
