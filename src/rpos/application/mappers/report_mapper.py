from __future__ import annotations

from datetime import date

from rpos.application.dto.responses import (
    DashboardSummaryResponse,
    ItemAggregateResponse,
    OrderReportResponse,
    OrderRowResponse,
    SalesReportResponse,
    SizeAggregateResponse,
)
from rpos.domain.reporting.dashboard import DashboardSummary
from rpos.domain.reporting.order_listing import OrderListingReport, StatusFilter
from rpos.domain.reporting.sales import SalesReport


def to_sales_report_response(
    report: SalesReport,
    from_day: date,
    to_day: date,
) -> SalesReportResponse:
    return SalesReportResponse(
        fromDate=from_day,
        toDate=to_day,
        items=[
            ItemAggregateResponse(
                name=item.name,
                totalQuantity=item.total_quantity,
                totalAmount=item.total_amount,
                sizes=[
                    SizeAggregateResponse(size=size.size, quantity=size.quantity, amount=size.amount)
                    for size in item.sizes
                ],
            )
            for item in report.items
        ],
        grandTotal=report.grand_total,
    )


def to_order_report_response(
    report: OrderListingReport,
    from_day: date,
    to_day: date,
    status: StatusFilter,
) -> OrderReportResponse:
    return OrderReportResponse(
        fromDate=from_day,
        toDate=to_day,
        status=status.value,
        rows=[
            OrderRowResponse(
                sequence=row.sequence,
                orderId=str(row.order_id),
                displayAt=row.display_at,
                type=row.order_type.value,
                tableNumber=row.table_number,
                tableLabel=row.table_label,
                itemCount=row.item_count,
                total=row.total,
                status=row.status.value,
            )
            for row in report.rows
        ],
        grandTotal=report.grand_total,
    )


def to_dashboard_summary_response(summary: DashboardSummary) -> DashboardSummaryResponse:
    return DashboardSummaryResponse(
        ordersToday=summary.orders_today,
        revenueToday=summary.revenue_today,
        occupancyPercent=summary.occupancy_percent,
    )
