from __future__ import annotations

from datetime import date, datetime

from fastapi import APIRouter, Depends, Query

from rpos.application.dto.responses import (
    DashboardSummaryResponse,
    OrderReportResponse,
    SalesReportResponse,
)
from rpos.api.dependencies import current_session
from rpos.api.middleware.request_id import get_request_id
from rpos.application.use_cases.context import SessionContext, TraceContext
from rpos.application.use_cases.dashboard_summary import GetDashboardSummary
from rpos.application.use_cases.order_report import DeleteReportedOrder, GenerateOrderReport
from rpos.application.use_cases.sales_report import GenerateSalesReport
from rpos.domain.common.ids import OrderId
from rpos.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository
from rpos.infrastructure.db.repositories.table_repo import SqlAlchemyTableRepository
from rpos.infrastructure.messaging.redis_publisher import build_event_publisher
from rpos.infrastructure.observability.otel import current_trace_id
from rpos.infrastructure.settings import report_timezone

router = APIRouter()


def _window_or_today(from_day: date | None, to_day: date | None) -> tuple[date, date]:
    today = datetime.now(report_timezone()).date()
    return from_day or today, to_day or today


@router.get("/v1/reports/sales", response_model=SalesReportResponse)
def sales_report(
    from_day: date | None = Query(default=None, alias="from"),
    to_day: date | None = Query(default=None, alias="to"),
    search: str | None = Query(default=None),
) -> SalesReportResponse:
    start, end = _window_or_today(from_day, to_day)
    use_case = GenerateSalesReport(
        order_repository=SqlAlchemyOrderRepository(),
        tz=report_timezone(),
    )
    return use_case.execute(from_day=start, to_day=end, search=search)


@router.get("/v1/reports/orders", response_model=OrderReportResponse)
def order_report(
    from_day: date | None = Query(default=None, alias="from"),
    to_day: date | None = Query(default=None, alias="to"),
    status: str | None = Query(default=None),
    search: str | None = Query(default=None),
) -> OrderReportResponse:
    start, end = _window_or_today(from_day, to_day)
    use_case = GenerateOrderReport(
        order_repository=SqlAlchemyOrderRepository(),
        table_repository=SqlAlchemyTableRepository(),
        tz=report_timezone(),
    )
    return use_case.execute(from_day=start, to_day=end, status=status, search=search)


@router.delete("/v1/reports/orders/{order_id}", response_model=OrderReportResponse)
def delete_reported_order(
    order_id: str,
    from_day: date | None = Query(default=None, alias="from"),
    to_day: date | None = Query(default=None, alias="to"),
    status: str | None = Query(default=None),
    search: str | None = Query(default=None),
    session: SessionContext = Depends(current_session),
) -> OrderReportResponse:
    start, end = _window_or_today(from_day, to_day)
    use_case = DeleteReportedOrder(
        order_repository=SqlAlchemyOrderRepository(),
        table_repository=SqlAlchemyTableRepository(),
        publisher=build_event_publisher(),
        tz=report_timezone(),
    )
    return use_case.execute(
        order_id=OrderId(order_id),
        from_day=start,
        to_day=end,
        session=session,
        trace_ctx=TraceContext(trace_id=current_trace_id(), request_id=get_request_id()),
        status=status,
        search=search,
    )


@router.get("/v1/dashboard/summary", response_model=DashboardSummaryResponse)
def dashboard_summary() -> DashboardSummaryResponse:
    use_case = GetDashboardSummary(
        order_repository=SqlAlchemyOrderRepository(),
        table_repository=SqlAlchemyTableRepository(),
        tz=report_timezone(),
    )
    return use_case.execute()
