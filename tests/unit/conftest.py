from __future__ import annotations

import sys
from dataclasses import replace
from datetime import datetime
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from rpos.application.ports.repositories import OptimisticConcurrencyError, TableOccupiedError
from rpos.application.use_cases.context import SessionContext, TraceContext
from rpos.domain.common.ids import MenuItemId, OrderId, TableId, UserId
from rpos.domain.menu.entities import AddOn, MenuItem, Size
from rpos.domain.order.entities import Order, OrderLine, OrderStatus
from rpos.domain.table.entities import Table, TableStatus
from rpos.domain.user.entities import UserProfile, UserRole


class FakeMenuRepository:
    def __init__(self, items: list[MenuItem] | None = None) -> None:
        self.items: dict[str, MenuItem] = {str(item.item_id): item for item in items or []}

    def list_items(self) -> list[MenuItem]:
        return list(self.items.values())

    def get(self, item_id: MenuItemId) -> MenuItem | None:
        return self.items.get(str(item_id))

    def add(self, item: MenuItem) -> None:
        self.items[str(item.item_id)] = item

    def update(self, item: MenuItem) -> bool:
        if str(item.item_id) not in self.items:
            return False
        self.items[str(item.item_id)] = item
        return True

    def delete(self, item_id: MenuItemId) -> bool:
        return self.items.pop(str(item_id), None) is not None


class FakeTableRepository:
    def __init__(self, tables: list[Table] | None = None) -> None:
        self.tables: dict[str, Table] = {str(table.table_id): table for table in tables or []}

    def list_all(self) -> list[Table]:
        return list(self.tables.values())

    def get(self, table_id: TableId) -> Table | None:
        return self.tables.get(str(table_id))

    def add(self, table: Table) -> None:
        self.tables[str(table.table_id)] = table

    def delete(self, table_id: TableId) -> bool:
        return self.tables.pop(str(table_id), None) is not None

    def set_status(self, table_id: str, status: TableStatus) -> None:
        self.tables[table_id] = replace(self.tables[table_id], status=status)


class FakeOrderRepository:
    """In-memory store sharing table state with a FakeTableRepository."""

    def __init__(self, table_repository: FakeTableRepository | None = None) -> None:
        self.orders: dict[str, Order] = {}
        self.table_repository = table_repository or FakeTableRepository()
        self.fail_writes: Exception | None = None

    def add(self, order: Order, occupy_table_id: TableId | None = None) -> None:
        if self.fail_writes is not None:
            raise self.fail_writes
        if occupy_table_id is not None:
            table = self.table_repository.get(occupy_table_id)
            if table is None or table.status != TableStatus.AVAILABLE:
                raise TableOccupiedError(f"table {occupy_table_id} is no longer available")
            self.table_repository.set_status(str(occupy_table_id), TableStatus.OCCUPIED)
        self.orders[str(order.order_id)] = order

    def get(self, order_id: OrderId) -> Order | None:
        return self.orders.get(str(order_id))

    def update_lines_with_version(
        self,
        order_id: OrderId,
        lines: list[OrderLine],
        total: float,
        expected_version: int,
    ) -> Order:
        if self.fail_writes is not None:
            raise self.fail_writes
        current = self.orders.get(str(order_id))
        if (
            current is None
            or current.version != expected_version
            or current.status != OrderStatus.PENDING
        ):
            raise OptimisticConcurrencyError(f"order {order_id} version conflict")
        updated = replace(current, lines=list(lines), total=total, version=current.version + 1)
        self.orders[str(order_id)] = updated
        return updated

    def update_status_with_version(
        self,
        order_id: OrderId,
        new_status: OrderStatus,
        expected_version: int,
        completed_at: datetime | None = None,
        release_table_id: TableId | None = None,
    ) -> Order:
        if self.fail_writes is not None:
            raise self.fail_writes
        current = self.orders.get(str(order_id))
        if (
            current is None
            or current.version != expected_version
            or current.status != OrderStatus.PENDING
        ):
            raise OptimisticConcurrencyError(f"order {order_id} version conflict")
        updated = replace(
            current,
            status=new_status,
            completed_at=completed_at,
            version=current.version + 1,
        )
        self.orders[str(order_id)] = updated
        if release_table_id is not None and self.table_repository.get(release_table_id):
            self.table_repository.set_status(str(release_table_id), TableStatus.AVAILABLE)
        return updated

    def delete(self, order_id: OrderId) -> bool:
        return self.orders.pop(str(order_id), None) is not None

    def list_created_since(self, start: datetime) -> list[Order]:
        found = [order for order in self.orders.values() if order.created_at >= start]
        return sorted(found, key=lambda order: order.created_at)

    def find_pending_for_table(self, table_id: TableId) -> Order | None:
        for order in self.orders.values():
            if order.table_id == table_id and order.status == OrderStatus.PENDING:
                return order
        return None


class FakeUserRepository:
    def __init__(self, profiles: list[UserProfile] | None = None) -> None:
        self.profiles = {str(profile.user_id): profile for profile in profiles or []}

    def get(self, user_id: UserId) -> UserProfile | None:
        return self.profiles.get(str(user_id))

    def add(self, profile: UserProfile) -> None:
        self.profiles[str(profile.user_id)] = profile


class FakePublisher:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def publish(self, channel: str, message: str) -> None:
        self.messages.append((channel, message))


@pytest.fixture
def burger_item() -> MenuItem:
    return MenuItem(
        item_id=MenuItemId("itm_burger"),
        name="Burger",
        category="Mains",
        price=0.0,
        sizes=(Size("Small", 5.0), Size("Large", 8.0)),
        add_ons=(AddOn("Cheese", 1.0), AddOn("Bacon", 2.0)),
    )


@pytest.fixture
def fries_item() -> MenuItem:
    return MenuItem(
        item_id=MenuItemId("itm_fries"),
        name="Fries",
        category="Sides",
        price=3.5,
    )


@pytest.fixture
def menu_repository(burger_item: MenuItem, fries_item: MenuItem) -> FakeMenuRepository:
    return FakeMenuRepository([burger_item, fries_item])


@pytest.fixture
def table_repository() -> FakeTableRepository:
    return FakeTableRepository(
        [
            Table(table_id=TableId("tbl_1"), table_number=1, capacity=2),
            Table(table_id=TableId("tbl_2"), table_number=2, capacity=4),
            Table(
                table_id=TableId("tbl_3"),
                table_number=3,
                capacity=4,
                status=TableStatus.RESERVED,
            ),
        ]
    )


@pytest.fixture
def order_repository(table_repository: FakeTableRepository) -> FakeOrderRepository:
    return FakeOrderRepository(table_repository)


@pytest.fixture
def user_repository() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def publisher() -> FakePublisher:
    return FakePublisher()


@pytest.fixture
def trace_ctx() -> TraceContext:
    return TraceContext(trace_id="trace-1", request_id="req-1")


@pytest.fixture
def admin_session() -> SessionContext:
    return SessionContext(user_id=UserId("usr_admin"), role=UserRole.ADMIN)


@pytest.fixture
def staff_session() -> SessionContext:
    return SessionContext(user_id=UserId("usr_staff"), role=UserRole.STAFF)
