from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from rpos.domain.common.ids import MenuItemId, OrderId, TableId
from rpos.domain.common.money import amounts_equal, ensure_non_negative, sum_amounts

CUSTOM_ITEM_PREFIX = "custom:"


class OrderStatus(str, Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class OrderType(str, Enum):
    DINE_IN = "Dine-in"
    TAKEAWAY = "Takeaway"
    DELIVERY = "Delivery"


@dataclass(frozen=True)
class OrderLine:
    menu_item_id: MenuItemId
    name: str
    price: float
    quantity: int
    size: str | None = None
    add_ons: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("line name must be non-empty")
        ensure_non_negative(self.price, "price")
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")

    @property
    def merge_key(self) -> tuple[str, str | None, tuple[str, ...]]:
        return (str(self.menu_item_id), self.size, tuple(sorted(self.add_ons)))

    @property
    def amount(self) -> float:
        return self.price * self.quantity

    @property
    def is_custom(self) -> bool:
        return str(self.menu_item_id).startswith(CUSTOM_ITEM_PREFIX)

    def with_quantity(self, quantity: int) -> OrderLine:
        return replace(self, quantity=quantity)


def custom_item_id(name: str, price: float) -> MenuItemId:
    """Synthetic id for an ad-hoc line; ``:`` and ``%`` in the name are percent-escaped."""
    price_text = str(int(price)) if float(price).is_integer() else repr(float(price))
    escaped_name = name.replace("%", "%25").replace(":", "%3A")
    return MenuItemId(f"{CUSTOM_ITEM_PREFIX}{escaped_name}:{price_text}")


def merge_line(lines: list[OrderLine], new_line: OrderLine) -> list[OrderLine]:
    """Return ``lines`` with ``new_line`` merged in by merge key.

    A line sharing the key keeps its position and gains the new quantity;
    otherwise the new line is appended.
    """
    merged: list[OrderLine] = []
    matched = False
    for line in lines:
        if not matched and line.merge_key == new_line.merge_key:
            merged.append(line.with_quantity(line.quantity + new_line.quantity))
            matched = True
        else:
            merged.append(line)
    if not matched:
        merged.append(new_line)
    return merged


def lines_total(lines: list[OrderLine]) -> float:
    return sum_amounts(line.amount for line in lines)


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    order_type: OrderType
    status: OrderStatus
    lines: list[OrderLine]
    total: float
    created_at: datetime
    table_id: TableId | None = None
    completed_at: datetime | None = None
    version: int = 1

    def __post_init__(self) -> None:
        if not self.lines:
            raise ValueError("order must contain at least one line")
        if not amounts_equal(self.total, lines_total(self.lines)):
            raise ValueError("order total must equal sum of line amounts")
        if self.order_type == OrderType.DINE_IN and self.table_id is None:
            raise ValueError("dine-in orders require a table")
        if self.order_type != OrderType.DINE_IN and self.table_id is not None:
            raise ValueError("only dine-in orders reference a table")
        if self.status == OrderStatus.COMPLETED and self.completed_at is None:
            raise ValueError("completed_at must be set when order is completed")

    @property
    def is_pending(self) -> bool:
        return self.status == OrderStatus.PENDING

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def display_at(self) -> datetime:
        return self.completed_at or self.created_at

    def ensure_pending(self) -> None:
        if not self.is_pending:
            raise OrderTransitionError(
                f"order {self.order_id} is {self.status.value}, expected Pending"
            )

    def with_line(self, line: OrderLine) -> Order:
        self.ensure_pending()
        lines = merge_line(self.lines, line)
        return replace(self, lines=lines, total=lines_total(lines))

    def complete(self, now: datetime) -> Order:
        self.ensure_pending()
        completed_at = max(now, self.created_at)
        return replace(self, status=OrderStatus.COMPLETED, completed_at=completed_at)

    def cancel(self) -> Order:
        self.ensure_pending()
        return replace(self, status=OrderStatus.CANCELLED)


def create_pending_order(
    order_id: OrderId,
    order_type: OrderType,
    lines: list[OrderLine],
    now: datetime,
    table_id: TableId | None = None,
) -> Order:
    if not lines:
        raise ValueError("order must contain at least one line")
    return Order(
        order_id=order_id,
        order_type=order_type,
        status=OrderStatus.PENDING,
        lines=list(lines),
        total=lines_total(lines),
        created_at=now,
        table_id=table_id,
    )


class OrderTransitionError(Exception):
    pass
