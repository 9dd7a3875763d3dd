from __future__ import annotations

import logging
from uuid import uuid4

from rpos.application.dto.requests import CreateTableRequest
from rpos.application.dto.responses import OrderResponse, TableListResponse, TableResponse
from rpos.application.errors import (
    InvalidTableError,
    OpenOrderNotFoundError,
    TableInUseError,
    TableNotFoundError,
)
from rpos.application.mappers.order_mapper import to_order_response
from rpos.application.mappers.table_mapper import to_table_response
from rpos.application.ports.repositories import OrderRepository, TableRepository
from rpos.application.use_cases.context import SessionContext
from rpos.domain.common.ids import TableId
from rpos.domain.table.entities import Table, TableStatus

logger = logging.getLogger(__name__)


class ListTables:
    def __init__(self, table_repository: TableRepository) -> None:
        self._table_repository = table_repository

    def execute(self) -> TableListResponse:
        tables = sorted(self._table_repository.list_all(), key=lambda table: table.table_number)
        return TableListResponse(tables=[to_table_response(table) for table in tables])


class CreateTable:
    def __init__(self, table_repository: TableRepository) -> None:
        self._table_repository = table_repository

    def execute(self, request_dto: CreateTableRequest, session: SessionContext) -> TableResponse:
        session.require_admin("adding a table")
        try:
            table = Table(
                table_id=TableId(f"tbl_{uuid4().hex[:12]}"),
                table_number=request_dto.table_number,
                capacity=request_dto.capacity,
                status=TableStatus.AVAILABLE,
            )
        except ValueError as exc:
            raise InvalidTableError(str(exc)) from exc

        taken = {existing.table_number for existing in self._table_repository.list_all()}
        if table.table_number in taken:
            raise InvalidTableError(f"table number {table.table_number} already exists")

        self._table_repository.add(table)
        logger.info(
            "table_created",
            extra={"table_id": str(table.table_id), "table_number": table.table_number},
        )
        return to_table_response(table)


class DeleteTable:
    def __init__(
        self,
        table_repository: TableRepository,
        order_repository: OrderRepository,
    ) -> None:
        self._table_repository = table_repository
        self._order_repository = order_repository

    def execute(self, table_id: TableId, session: SessionContext) -> None:
        session.require_admin("deleting a table")
        table = self._table_repository.get(table_id)
        if table is None:
            raise TableNotFoundError(f"table {table_id} not found")

        pending = self._order_repository.find_pending_for_table(table_id)
        if pending is not None:
            raise TableInUseError(
                f"table {table.table_number} has a pending order",
                details={"orderId": str(pending.order_id)},
            )

        self._table_repository.delete(table_id)
        logger.info("table_deleted", extra={"table_id": str(table_id)})


class GetTableOrder:
    """The pending order currently seated at a table."""

    def __init__(
        self,
        table_repository: TableRepository,
        order_repository: OrderRepository,
    ) -> None:
        self._table_repository = table_repository
        self._order_repository = order_repository

    def execute(self, table_id: TableId) -> OrderResponse:
        table = self._table_repository.get(table_id)
        if table is None:
            raise TableNotFoundError(f"table {table_id} not found")
        order = self._order_repository.find_pending_for_table(table_id)
        if order is None:
            raise OpenOrderNotFoundError(f"table {table.table_number} has no open order")
        return to_order_response(order)
