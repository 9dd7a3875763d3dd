from __future__ import annotations

import logging
from datetime import date, tzinfo

from rpos.application.dto.responses import SalesReportResponse
from rpos.application.mappers.report_mapper import to_sales_report_response
from rpos.application.metrics.order_lifecycle import record_report_generated
from rpos.application.ports.repositories import OrderRepository
from rpos.application.use_cases.report_window import load_orders, resolve_window
from rpos.domain.reporting.sales import build_sales_report

logger = logging.getLogger(__name__)


class GenerateSalesReport:
    def __init__(self, order_repository: OrderRepository, tz: tzinfo) -> None:
        self._order_repository = order_repository
        self._tz = tz

    def execute(
        self,
        from_day: date,
        to_day: date,
        search: str | None = None,
    ) -> SalesReportResponse:
        window = resolve_window(from_day, to_day, self._tz)
        report = build_sales_report(load_orders(self._order_repository, window), search=search)

        record_report_generated("sales")
        logger.info(
            "sales_report_generated",
            extra={"items": len(report.items), "from": from_day.isoformat(), "to": to_day.isoformat()},
        )
        return to_sales_report_response(report, from_day=from_day, to_day=to_day)
