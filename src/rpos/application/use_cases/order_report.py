from __future__ import annotations

import logging
from datetime import date, tzinfo

from rpos.application.dto.responses import OrderReportResponse
from rpos.application.errors import InvalidReportFilterError
from rpos.application.mappers.report_mapper import to_order_report_response
from rpos.application.metrics.order_lifecycle import record_report_generated
from rpos.application.ports.publisher import EventPublisher
from rpos.application.ports.repositories import OrderRepository, TableRepository
from rpos.application.use_cases.cancel_order import DeleteOrder
from rpos.application.use_cases.context import SessionContext, TraceContext
from rpos.application.use_cases.report_window import load_orders, resolve_window
from rpos.domain.common.ids import OrderId
from rpos.domain.reporting.order_listing import (
    OrderListingReport,
    StatusFilter,
    build_order_listing,
)

logger = logging.getLogger(__name__)

_STATUS_MAP: dict[str, StatusFilter] = {status.value.upper(): status for status in StatusFilter}


def parse_status_filter(value: str | None) -> StatusFilter:
    if value is None or not value.strip():
        return StatusFilter.COMPLETED
    status = _STATUS_MAP.get(value.strip().upper())
    if status is None:
        raise InvalidReportFilterError(f"invalid status filter: {value}")
    return status


def _order_listing(
    order_repository: OrderRepository,
    table_repository: TableRepository,
    tz: tzinfo,
    from_day: date,
    to_day: date,
    status_filter: StatusFilter,
    search: str | None,
) -> OrderListingReport:
    window = resolve_window(from_day, to_day, tz)
    table_numbers = {table.table_id: table.table_number for table in table_repository.list_all()}
    return build_order_listing(
        load_orders(order_repository, window),
        table_numbers=table_numbers,
        status=status_filter,
        search=search,
    )


class GenerateOrderReport:
    def __init__(
        self,
        order_repository: OrderRepository,
        table_repository: TableRepository,
        tz: tzinfo,
    ) -> None:
        self._order_repository = order_repository
        self._table_repository = table_repository
        self._tz = tz

    def execute(
        self,
        from_day: date,
        to_day: date,
        status: str | None = None,
        search: str | None = None,
    ) -> OrderReportResponse:
        status_filter = parse_status_filter(status)
        report = _order_listing(
            self._order_repository,
            self._table_repository,
            self._tz,
            from_day,
            to_day,
            status_filter,
            search,
        )

        record_report_generated("orders")
        logger.info(
            "order_report_generated",
            extra={"rows": len(report.rows), "status": status_filter.value},
        )
        return to_order_report_response(
            report,
            from_day=from_day,
            to_day=to_day,
            status=status_filter,
        )


class DeleteReportedOrder:
    """Delete an order from the order report and return the listing without it.

    The remaining rows are renumbered and re-totalled from the listing built
    before the delete; the store is not queried again.
    """

    def __init__(
        self,
        order_repository: OrderRepository,
        table_repository: TableRepository,
        publisher: EventPublisher,
        tz: tzinfo,
    ) -> None:
        self._order_repository = order_repository
        self._table_repository = table_repository
        self._tz = tz
        self._delete_order = DeleteOrder(order_repository=order_repository, publisher=publisher)

    def execute(
        self,
        order_id: OrderId,
        from_day: date,
        to_day: date,
        session: SessionContext,
        trace_ctx: TraceContext,
        status: str | None = None,
        search: str | None = None,
    ) -> OrderReportResponse:
        session.require_admin("deleting an order")
        status_filter = parse_status_filter(status)
        report = _order_listing(
            self._order_repository,
            self._table_repository,
            self._tz,
            from_day,
            to_day,
            status_filter,
            search,
        )

        self._delete_order.execute(order_id=order_id, session=session, trace_ctx=trace_ctx)
        remaining = report.remove_row(order_id)

        logger.info(
            "order_report_row_removed",
            extra={"order_id": str(order_id), "rows": len(remaining.rows)},
        )
        return to_order_report_response(
            remaining,
            from_day=from_day,
            to_day=to_day,
            status=status_filter,
        )
