from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from rpos.domain.common.money import sum_amounts
from rpos.domain.order.entities import Order, OrderStatus
from rpos.domain.table.entities import Table, TableStatus


@dataclass(frozen=True)
class DashboardSummary:
    orders_today: int
    revenue_today: float
    occupancy_percent: int | None


def summarize_day(orders: Iterable[Order], tables: Iterable[Table]) -> DashboardSummary:
    day_orders = list(orders)
    all_tables = list(tables)
    revenue = sum_amounts(
        order.total for order in day_orders if order.status == OrderStatus.COMPLETED
    )
    occupancy: int | None = None
    if all_tables:
        occupied = sum(1 for table in all_tables if table.status == TableStatus.OCCUPIED)
        occupancy = round(occupied * 100 / len(all_tables))
    return DashboardSummary(
        orders_today=len(day_orders),
        revenue_today=revenue,
        occupancy_percent=occupancy,
    )
