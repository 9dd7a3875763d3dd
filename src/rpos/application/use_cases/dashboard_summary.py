from __future__ import annotations

from datetime import date, datetime, tzinfo

from rpos.application.dto.responses import DashboardSummaryResponse
from rpos.application.mappers.report_mapper import to_dashboard_summary_response
from rpos.application.ports.repositories import OrderRepository, TableRepository
from rpos.application.use_cases.report_window import load_orders, resolve_window
from rpos.domain.reporting.dashboard import summarize_day


class GetDashboardSummary:
    def __init__(
        self,
        order_repository: OrderRepository,
        table_repository: TableRepository,
        tz: tzinfo,
    ) -> None:
        self._order_repository = order_repository
        self._table_repository = table_repository
        self._tz = tz

    def execute(self, today: date | None = None) -> DashboardSummaryResponse:
        day = today or datetime.now(self._tz).date()
        window = resolve_window(day, day, self._tz)
        summary = summarize_day(
            load_orders(self._order_repository, window),
            self._table_repository.list_all(),
        )
        return to_dashboard_summary_response(summary)
