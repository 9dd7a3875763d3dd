from __future__ import annotations

from rpos.application.dto.responses import TableResponse
from rpos.domain.table.entities import Table


def to_table_response(table: Table) -> TableResponse:
    return TableResponse(
        tableId=str(table.table_id),
        tableNumber=table.table_number,
        capacity=table.capacity,
        status=table.status.value,
        label=table.label,
    )
