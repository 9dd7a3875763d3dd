from __future__ import annotations

import json
from dataclasses import replace
from datetime import datetime, timezone

import pytest

from rpos.application.dto.requests import ConfiguredLineRequest, CustomLineRequest
from rpos.application.errors import (
    InvalidOrderLineError,
    KitchenTicketNotAllowedError,
    OrderConflictError,
    OrderNotFoundError,
    OrderNotPendingError,
    PermissionDeniedError,
    PersistenceError,
    UnknownMenuItemError,
)
from rpos.application.use_cases.append_order_item import AppendCustomOrderItem, AppendOrderItem
from rpos.application.use_cases.cancel_order import CancelOrder, DeleteOrder
from rpos.application.use_cases.complete_order import CompleteOrder
from rpos.application.use_cases.get_order import GetKitchenTicket, GetOrder, GetReceipt
from rpos.application.use_cases.send_to_kitchen import SendToKitchen
from rpos.domain.common.ids import MenuItemId, OrderId, TableId
from rpos.domain.order.entities import (
    Order,
    OrderLine,
    OrderStatus,
    OrderType,
    create_pending_order,
)
from rpos.domain.table.entities import TableStatus

CREATED_AT = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _seed(
    order_repository,
    order_id: str = "ord_1",
    order_type: OrderType = OrderType.DINE_IN,
    table_id: str | None = "tbl_1",
) -> Order:
    line = OrderLine(
        menu_item_id=MenuItemId("itm_burger"),
        name="Burger",
        price=8.0,
        quantity=1,
        size="Large",
    )
    order = create_pending_order(
        OrderId(order_id),
        order_type,
        [line],
        CREATED_AT,
        table_id=TableId(table_id) if table_id else None,
    )
    order_repository.add(order, occupy_table_id=order.table_id)
    return order


def _event_types(publisher) -> list[str]:
    return [json.loads(message)["event_type"] for _, message in publisher.messages]


class TestCompleteOrder:
    def test_completes_and_frees_table(
        self, order_repository, table_repository, publisher, trace_ctx
    ):
        _seed(order_repository)
        assert table_repository.get("tbl_1").status == TableStatus.OCCUPIED

        response = CompleteOrder(order_repository, publisher).execute(OrderId("ord_1"), trace_ctx)

        assert response.order.status == "Completed"
        assert response.order.completedAt >= CREATED_AT
        assert [render.kind for render in response.renders] == ["receipt"]
        assert response.tableStatus == "Available"
        assert table_repository.get("tbl_1").status == TableStatus.AVAILABLE
        assert _event_types(publisher) == ["order.completed", "table.status_changed"]

    def test_takeaway_completion_has_no_table_change(self, order_repository, publisher, trace_ctx):
        _seed(order_repository, order_type=OrderType.TAKEAWAY, table_id=None)

        response = CompleteOrder(order_repository, publisher).execute(OrderId("ord_1"), trace_ctx)

        assert response.tableStatus is None
        assert _event_types(publisher) == ["order.completed"]

    def test_second_completion_is_rejected(self, order_repository, publisher, trace_ctx):
        _seed(order_repository)
        use_case = CompleteOrder(order_repository, publisher)
        use_case.execute(OrderId("ord_1"), trace_ctx)

        with pytest.raises(OrderNotPendingError):
            use_case.execute(OrderId("ord_1"), trace_ctx)

    def test_missing_order(self, order_repository, publisher, trace_ctx):
        with pytest.raises(OrderNotFoundError):
            CompleteOrder(order_repository, publisher).execute(OrderId("ord_x"), trace_ctx)

    def test_store_failure_keeps_table_occupied_and_emits_nothing(
        self, order_repository, table_repository, publisher, trace_ctx
    ):
        _seed(order_repository)
        order_repository.fail_writes = PersistenceError("order_update_status failed")

        with pytest.raises(PersistenceError):
            CompleteOrder(order_repository, publisher).execute(OrderId("ord_1"), trace_ctx)

        assert order_repository.get("ord_1").status == OrderStatus.PENDING
        assert table_repository.get("tbl_1").status == TableStatus.OCCUPIED
        assert publisher.messages == []

    def test_concurrent_completion_reports_not_pending(
        self, order_repository, publisher, trace_ctx
    ):
        order = _seed(order_repository)
        stale_get = order_repository.get
        calls = {"count": 0}

        def racing_get(order_id):
            calls["count"] += 1
            if calls["count"] == 1:
                # Another terminal completes the order right after this read.
                order_repository.orders["ord_1"] = replace(
                    order.complete(CREATED_AT), version=order.version + 1
                )
                return order
            return stale_get(order_id)

        order_repository.get = racing_get

        with pytest.raises(OrderNotPendingError):
            CompleteOrder(order_repository, publisher).execute(OrderId("ord_1"), trace_ctx)


class TestCancelAndDelete:
    def test_cancel_keeps_table_occupied(
        self, order_repository, table_repository, publisher, trace_ctx
    ):
        _seed(order_repository)

        response = CancelOrder(order_repository, publisher).execute(OrderId("ord_1"), trace_ctx)

        assert response.status == "Cancelled"
        assert table_repository.get("tbl_1").status == TableStatus.OCCUPIED
        assert _event_types(publisher) == ["order.cancelled"]

    def test_cancel_completed_order_is_rejected(self, order_repository, publisher, trace_ctx):
        _seed(order_repository, order_type=OrderType.TAKEAWAY, table_id=None)
        CompleteOrder(order_repository, publisher).execute(OrderId("ord_1"), trace_ctx)

        with pytest.raises(OrderNotPendingError):
            CancelOrder(order_repository, publisher).execute(OrderId("ord_1"), trace_ctx)

    def test_delete_requires_admin(
        self, order_repository, publisher, trace_ctx, staff_session, admin_session
    ):
        _seed(order_repository)
        use_case = DeleteOrder(order_repository, publisher)

        with pytest.raises(PermissionDeniedError):
            use_case.execute(OrderId("ord_1"), staff_session, trace_ctx)
        assert "ord_1" in order_repository.orders

        use_case.execute(OrderId("ord_1"), admin_session, trace_ctx)
        assert order_repository.orders == {}
        assert _event_types(publisher) == ["order.deleted"]

        with pytest.raises(OrderNotFoundError):
            use_case.execute(OrderId("ord_1"), admin_session, trace_ctx)


class TestSendToKitchen:
    def test_takeaway_order_gets_ticket_render(self, order_repository):
        _seed(order_repository, order_type=OrderType.TAKEAWAY, table_id=None)

        response = SendToKitchen(order_repository).execute(OrderId("ord_1"))

        assert [render.kind for render in response.renders] == ["kitchen_ticket"]
        assert response.order.status == "Pending"

    def test_dine_in_is_rejected(self, order_repository):
        _seed(order_repository)
        with pytest.raises(KitchenTicketNotAllowedError):
            SendToKitchen(order_repository).execute(OrderId("ord_1"))


class TestAppendItems:
    def test_admin_appends_configured_item(
        self, menu_repository, order_repository, publisher, trace_ctx, admin_session
    ):
        _seed(order_repository)
        use_case = AppendOrderItem(menu_repository, order_repository, publisher)

        response = use_case.execute(
            OrderId("ord_1"),
            ConfiguredLineRequest(menu_item_id="itm_burger", size="Large", quantity=2),
            admin_session,
            trace_ctx,
        )

        assert [(line.name, line.quantity) for line in response.lines] == [("Burger", 3)]
        assert response.total == 24.0
        assert response.version == 2
        assert _event_types(publisher) == ["order.items_changed"]

    def test_custom_item_appends_new_line(
        self, order_repository, publisher, trace_ctx, admin_session
    ):
        _seed(order_repository)

        response = AppendCustomOrderItem(order_repository, publisher).execute(
            OrderId("ord_1"),
            CustomLineRequest(name="Cake", price=4.25),
            admin_session,
            trace_ctx,
        )

        assert [line.name for line in response.lines] == ["Burger", "Cake"]
        assert response.lines[1].menuItemId == "custom:Cake:4.25"
        assert response.total == 12.25

    def test_staff_cannot_append(
        self, menu_repository, order_repository, publisher, trace_ctx, staff_session
    ):
        _seed(order_repository)
        with pytest.raises(PermissionDeniedError):
            AppendOrderItem(menu_repository, order_repository, publisher).execute(
                OrderId("ord_1"),
                ConfiguredLineRequest(menu_item_id="itm_fries"),
                staff_session,
                trace_ctx,
            )

    def test_append_to_completed_order_writes_nothing(
        self, menu_repository, order_repository, publisher, trace_ctx, admin_session
    ):
        _seed(order_repository, order_type=OrderType.TAKEAWAY, table_id=None)
        CompleteOrder(order_repository, publisher).execute(OrderId("ord_1"), trace_ctx)
        before = order_repository.get("ord_1")

        with pytest.raises(OrderNotPendingError):
            AppendOrderItem(menu_repository, order_repository, publisher).execute(
                OrderId("ord_1"),
                ConfiguredLineRequest(menu_item_id="itm_fries"),
                admin_session,
                trace_ctx,
            )
        assert order_repository.get("ord_1") == before

    def test_stale_version_is_a_conflict(
        self, menu_repository, order_repository, publisher, trace_ctx, admin_session
    ):
        order = _seed(order_repository)
        order_repository.get = lambda order_id: replace(order, version=0)

        with pytest.raises(OrderConflictError):
            AppendOrderItem(menu_repository, order_repository, publisher).execute(
                OrderId("ord_1"),
                ConfiguredLineRequest(menu_item_id="itm_fries"),
                admin_session,
                trace_ctx,
            )

    def test_invalid_lines_are_rejected(
        self, menu_repository, order_repository, publisher, trace_ctx, admin_session
    ):
        _seed(order_repository)
        with pytest.raises(UnknownMenuItemError):
            AppendOrderItem(menu_repository, order_repository, publisher).execute(
                OrderId("ord_1"),
                ConfiguredLineRequest(menu_item_id="itm_missing"),
                admin_session,
                trace_ctx,
            )
        with pytest.raises(InvalidOrderLineError):
            AppendCustomOrderItem(order_repository, publisher).execute(
                OrderId("ord_1"),
                CustomLineRequest(name=" ", price=1.0),
                admin_session,
                trace_ctx,
            )

    @pytest.mark.parametrize("size", [None, "Medium"])
    def test_sized_item_needs_a_known_size(
        self, menu_repository, order_repository, publisher, trace_ctx, admin_session, size
    ):
        before = _seed(order_repository)

        with pytest.raises(InvalidOrderLineError):
            AppendOrderItem(menu_repository, order_repository, publisher).execute(
                OrderId("ord_1"),
                ConfiguredLineRequest(menu_item_id="itm_burger", size=size),
                admin_session,
                trace_ctx,
            )
        assert order_repository.get("ord_1") == before
        assert publisher.messages == []


class TestPrintables:
    def test_receipt_formats_totals(self, order_repository, table_repository, publisher, trace_ctx):
        _seed(order_repository)
        CompleteOrder(order_repository, publisher).execute(OrderId("ord_1"), trace_ctx)

        receipt = GetReceipt(
            order_repository, table_repository, restaurant_name="Bistro", currency="USD"
        ).execute(OrderId("ord_1"))

        assert receipt.restaurantName == "Bistro"
        assert receipt.tableNumber == 1
        assert receipt.formattedTotal == "8.00"
        assert receipt.lines[0].formattedAmount == "8.00"

    def test_kitchen_ticket_lists_items_without_prices(self, order_repository, table_repository):
        _seed(order_repository)

        ticket = GetKitchenTicket(order_repository, table_repository, "Bistro").execute(
            OrderId("ord_1")
        )

        assert ticket.lines[0].name == "Burger"
        assert ticket.lines[0].size == "Large"
        assert not hasattr(ticket.lines[0], "price")

    def test_get_order_missing(self, order_repository):
        with pytest.raises(OrderNotFoundError):
            GetOrder(order_repository).execute(OrderId("ord_x"))
