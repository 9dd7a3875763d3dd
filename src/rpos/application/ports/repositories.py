from __future__ import annotations

from datetime import datetime
from typing import Protocol

from rpos.domain.common.ids import MenuItemId, OrderId, TableId, UserId
from rpos.domain.menu.entities import MenuItem
from rpos.domain.order.entities import Order, OrderLine, OrderStatus
from rpos.domain.table.entities import Table
from rpos.domain.user.entities import UserProfile


class MenuRepository(Protocol):
    def list_items(self) -> list[MenuItem]: ...

    def get(self, item_id: MenuItemId) -> MenuItem | None: ...

    def add(self, item: MenuItem) -> None: ...

    def update(self, item: MenuItem) -> bool: ...

    def delete(self, item_id: MenuItemId) -> bool: ...


class TableRepository(Protocol):
    def list_all(self) -> list[Table]: ...

    def get(self, table_id: TableId) -> Table | None: ...

    def add(self, table: Table) -> None: ...

    def delete(self, table_id: TableId) -> bool: ...


class OrderRepository(Protocol):
    def add(self, order: Order, occupy_table_id: TableId | None = None) -> None: ...

    def get(self, order_id: OrderId) -> Order | None: ...

    def update_lines_with_version(
        self,
        order_id: OrderId,
        lines: list[OrderLine],
        total: float,
        expected_version: int,
    ) -> Order: ...

    def update_status_with_version(
        self,
        order_id: OrderId,
        new_status: OrderStatus,
        expected_version: int,
        completed_at: datetime | None = None,
        release_table_id: TableId | None = None,
    ) -> Order: ...

    def delete(self, order_id: OrderId) -> bool: ...

    def list_created_since(self, start: datetime) -> list[Order]: ...

    def find_pending_for_table(self, table_id: TableId) -> Order | None: ...


class UserRepository(Protocol):
    def get(self, user_id: UserId) -> UserProfile | None: ...

    def add(self, profile: UserProfile) -> None: ...


class TableOccupiedError(Exception):
    pass


class OptimisticConcurrencyError(Exception):
    pass
