from __future__ import annotations

from fastapi import APIRouter, Depends, status

from rpos.api.dependencies import current_session
from rpos.application.dto.requests import CreateTableRequest
from rpos.application.dto.responses import OrderResponse, TableListResponse, TableResponse
from rpos.application.use_cases.context import SessionContext
from rpos.application.use_cases.table_admin import (
    CreateTable,
    DeleteTable,
    GetTableOrder,
    ListTables,
)
from rpos.domain.common.ids import TableId
from rpos.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository
from rpos.infrastructure.db.repositories.table_repo import SqlAlchemyTableRepository

router = APIRouter()


@router.get("/v1/tables", response_model=TableListResponse)
def list_tables() -> TableListResponse:
    return ListTables(table_repository=SqlAlchemyTableRepository()).execute()


@router.post("/v1/tables", response_model=TableResponse, status_code=status.HTTP_201_CREATED)
def create_table(
    request_dto: CreateTableRequest,
    session: SessionContext = Depends(current_session),
) -> TableResponse:
    use_case = CreateTable(table_repository=SqlAlchemyTableRepository())
    return use_case.execute(request_dto=request_dto, session=session)


@router.delete("/v1/tables/{table_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_table(
    table_id: str,
    session: SessionContext = Depends(current_session),
) -> None:
    use_case = DeleteTable(
        table_repository=SqlAlchemyTableRepository(),
        order_repository=SqlAlchemyOrderRepository(),
    )
    use_case.execute(table_id=TableId(table_id), session=session)


@router.get("/v1/tables/{table_id}/order", response_model=OrderResponse)
def get_table_order(table_id: str) -> OrderResponse:
    use_case = GetTableOrder(
        table_repository=SqlAlchemyTableRepository(),
        order_repository=SqlAlchemyOrderRepository(),
    )
    return use_case.execute(table_id=TableId(table_id))
