from __future__ import annotations

from datetime import datetime, timezone

from prometheus_client import Counter, Histogram

from rpos.domain.order.entities import Order, OrderStatus
from rpos.domain.table.entities import TableStatus

ORDERS_TOTAL = Counter(
    "rpos_orders_total",
    "Total number of orders observed by type and status.",
    ["type", "status"],
)

ORDER_TRANSITION_TOTAL = Counter(
    "rpos_order_transition_total",
    "Total number of order lifecycle transitions.",
    ["from", "to"],
)

ORDER_TIME_TO_COMPLETE_SECONDS = Histogram(
    "rpos_order_time_to_complete_seconds",
    "Time between order placement and bill generation.",
)

TABLE_STATUS_CHANGES_TOTAL = Counter(
    "rpos_table_status_changes_total",
    "Total number of table status changes driven by orders.",
    ["status"],
)

REPORTS_GENERATED_TOTAL = Counter(
    "rpos_reports_generated_total",
    "Total number of reports generated.",
    ["report"],
)


def record_order_status(order: Order) -> None:
    ORDERS_TOTAL.labels(type=order.order_type.value, status=order.status.value).inc()


def record_transition(from_status: OrderStatus, to_status: OrderStatus) -> None:
    ORDER_TRANSITION_TOTAL.labels(**{"from": from_status.value, "to": to_status.value}).inc()


def record_time_to_complete(order: Order, now: datetime | None = None) -> None:
    current = now or datetime.now(timezone.utc)
    ORDER_TIME_TO_COMPLETE_SECONDS.observe(max((current - order.created_at).total_seconds(), 0.0))


def record_table_status_change(status: TableStatus) -> None:
    TABLE_STATUS_CHANGES_TOTAL.labels(status=status.value).inc()


def record_report_generated(report: str) -> None:
    REPORTS_GENERATED_TOTAL.labels(report=report).inc()
