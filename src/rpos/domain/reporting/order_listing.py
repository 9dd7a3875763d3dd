from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from rpos.domain.common.ids import OrderId, TableId
from rpos.domain.common.money import sum_amounts
from rpos.domain.order.entities import Order, OrderStatus, OrderType

NO_TABLE_LABEL = "-"


class StatusFilter(str, Enum):
    ALL = "All"
    PENDING = "Pending"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


@dataclass(frozen=True)
class OrderRow:
    sequence: int
    order_id: OrderId
    display_at: datetime
    order_type: OrderType
    table_number: int | None
    item_count: int
    total: float
    status: OrderStatus

    @property
    def table_label(self) -> str:
        if self.table_number is None:
            return NO_TABLE_LABEL
        return f"Table {self.table_number}"


@dataclass(frozen=True)
class OrderListingReport:
    rows: tuple[OrderRow, ...]
    grand_total: float

    def remove_row(self, order_id: OrderId) -> OrderListingReport:
        remaining = [row for row in self.rows if row.order_id != order_id]
        return _listing(remaining)


def _matches_search(row: OrderRow, term: str) -> bool:
    if row.table_number is None:
        return False
    return term in row.table_label.lower() or term in str(row.table_number)


def _listing(rows: list[OrderRow]) -> OrderListingReport:
    numbered = tuple(replace(row, sequence=index) for index, row in enumerate(rows, start=1))
    return OrderListingReport(
        rows=numbered,
        grand_total=sum_amounts(row.total for row in numbered),
    )


def build_order_listing(
    orders: Iterable[Order],
    table_numbers: Mapping[TableId, int],
    status: StatusFilter = StatusFilter.COMPLETED,
    search: str | None = None,
) -> OrderListingReport:
    rows = [
        OrderRow(
            sequence=0,
            order_id=order.order_id,
            display_at=order.display_at,
            order_type=order.order_type,
            table_number=table_numbers.get(order.table_id) if order.table_id else None,
            item_count=order.item_count,
            total=order.total,
            status=order.status,
        )
        for order in orders
    ]

    if status != StatusFilter.ALL:
        rows = [row for row in rows if row.status.value == status.value]

    term = (search or "").strip().lower()
    if term:
        rows = [row for row in rows if _matches_search(row, term)]

    rows.sort(key=lambda row: (row.display_at, str(row.order_id)), reverse=True)
    return _listing(rows)
