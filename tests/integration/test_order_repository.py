from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from rpos.application.ports.repositories import OptimisticConcurrencyError, TableOccupiedError
from rpos.domain.common.ids import MenuItemId, OrderId, TableId
from rpos.domain.order.entities import OrderLine, OrderStatus, OrderType, create_pending_order
from rpos.domain.table.entities import TableStatus
from rpos.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository
from rpos.infrastructure.db.repositories.table_repo import SqlAlchemyTableRepository


def _order(order_id: str, table_id: str | None = None, created_at: datetime | None = None):
    return create_pending_order(
        order_id=OrderId(order_id),
        order_type=OrderType.DINE_IN if table_id else OrderType.TAKEAWAY,
        lines=[
            OrderLine(
                menu_item_id=MenuItemId("itm_burger"),
                name="Burger",
                price=9.0,
                quantity=1,
                size="Large",
                add_ons=("Cheese",),
            )
        ],
        now=created_at or datetime.now(timezone.utc),
        table_id=TableId(table_id) if table_id else None,
    )


def test_add_occupies_table_once() -> None:
    orders = SqlAlchemyOrderRepository()
    tables = SqlAlchemyTableRepository()

    orders.add(_order("ord_a", "tbl_1"), occupy_table_id=TableId("tbl_1"))

    assert tables.get(TableId("tbl_1")).status == TableStatus.OCCUPIED
    with pytest.raises(TableOccupiedError):
        orders.add(_order("ord_b", "tbl_1"), occupy_table_id=TableId("tbl_1"))
    assert orders.get(OrderId("ord_b")) is None


def test_round_trips_lines_and_timestamps() -> None:
    orders = SqlAlchemyOrderRepository()
    orders.add(_order("ord_a"))

    stored = orders.get(OrderId("ord_a"))

    assert stored.lines[0].add_ons == ("Cheese",)
    assert stored.lines[0].size == "Large"
    assert stored.created_at.tzinfo is not None
    assert stored.version == 1


def test_stale_version_is_rejected() -> None:
    orders = SqlAlchemyOrderRepository()
    order = _order("ord_a")
    orders.add(order)

    updated = orders.update_lines_with_version(
        order_id=order.order_id,
        lines=order.lines,
        total=order.total,
        expected_version=1,
    )
    assert updated.version == 2

    with pytest.raises(OptimisticConcurrencyError):
        orders.update_status_with_version(
            order_id=order.order_id,
            new_status=OrderStatus.CANCELLED,
            expected_version=1,
        )


def test_complete_releases_table_in_same_write() -> None:
    orders = SqlAlchemyOrderRepository()
    tables = SqlAlchemyTableRepository()
    order = _order("ord_a", "tbl_2")
    orders.add(order, occupy_table_id=TableId("tbl_2"))

    completed = orders.update_status_with_version(
        order_id=order.order_id,
        new_status=OrderStatus.COMPLETED,
        expected_version=1,
        completed_at=datetime.now(timezone.utc),
        release_table_id=TableId("tbl_2"),
    )

    assert completed.status == OrderStatus.COMPLETED
    assert tables.get(TableId("tbl_2")).status == TableStatus.AVAILABLE
    assert orders.find_pending_for_table(TableId("tbl_2")) is None


def test_list_created_since_is_ascending() -> None:
    orders = SqlAlchemyOrderRepository()
    now = datetime.now(timezone.utc)
    orders.add(_order("ord_new", created_at=now))
    orders.add(_order("ord_old", created_at=now - timedelta(hours=2)))
    orders.add(_order("ord_stale", created_at=now - timedelta(days=3)))

    listed = orders.list_created_since(now - timedelta(days=1))

    assert [str(order.order_id) for order in listed] == ["ord_old", "ord_new"]
