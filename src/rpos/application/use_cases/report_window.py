from __future__ import annotations

from datetime import date, tzinfo

from rpos.application.errors import InvalidReportWindowError
from rpos.application.ports.repositories import OrderRepository
from rpos.domain.order.entities import Order
from rpos.domain.reporting.window import ReportWindow, day_window


def resolve_window(from_day: date, to_day: date, tz: tzinfo) -> ReportWindow:
    try:
        return day_window(from_day, to_day, tz)
    except ValueError as exc:
        raise InvalidReportWindowError(
            str(exc),
            details={"from": from_day.isoformat(), "to": to_day.isoformat()},
        ) from exc


def load_orders(order_repository: OrderRepository, window: ReportWindow) -> list[Order]:
    """Orders created inside ``window``.

    The store applies the lower bound; the upper bound is applied here.
    """
    return [
        order
        for order in order_repository.list_created_since(window.start)
        if order.created_at <= window.end
    ]
