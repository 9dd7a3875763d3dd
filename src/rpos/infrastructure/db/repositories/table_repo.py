from __future__ import annotations

from sqlalchemy import Engine, delete, select
from sqlalchemy.orm import Session

from rpos.application.ports.repositories import TableRepository
from rpos.domain.common.ids import TableId
from rpos.domain.table.entities import Table, TableStatus
from rpos.infrastructure.db.models.table import TableModel
from rpos.infrastructure.db.session import get_engine, persistence_errors


class SqlAlchemyTableRepository(TableRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def list_all(self) -> list[Table]:
        statement = select(TableModel).order_by(TableModel.table_number, TableModel.id)
        with persistence_errors("table_list"), Session(self._engine) as session:
            models = list(session.execute(statement).scalars().all())
        return [self._to_domain(model) for model in models]

    def get(self, table_id: TableId) -> Table | None:
        with persistence_errors("table_get"), Session(self._engine) as session:
            model = session.get(TableModel, str(table_id))
        if model is None:
            return None
        return self._to_domain(model)

    def add(self, table: Table) -> None:
        model = TableModel(
            id=str(table.table_id),
            table_number=table.table_number,
            capacity=table.capacity,
            status=table.status.value,
        )
        with persistence_errors("table_add"), Session(self._engine) as session:
            session.add(model)
            session.commit()

    def delete(self, table_id: TableId) -> bool:
        statement = delete(TableModel).where(TableModel.id == str(table_id))
        with persistence_errors("table_delete"), Session(self._engine) as session:
            result = session.execute(statement)
            session.commit()
        return result.rowcount == 1

    def _to_domain(self, model: TableModel) -> Table:
        return Table(
            table_id=TableId(model.id),
            table_number=model.table_number,
            capacity=model.capacity,
            status=TableStatus(model.status),
        )
