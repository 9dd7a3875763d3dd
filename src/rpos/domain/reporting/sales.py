from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from rpos.domain.common.money import sum_amounts
from rpos.domain.order.entities import Order, OrderStatus

DEFAULT_SIZE_LABEL = "Regular"
UNKNOWN_ITEM_NAME = "Unknown"


@dataclass(frozen=True)
class SizeAggregate:
    size: str
    quantity: int
    amount: float


@dataclass(frozen=True)
class ItemAggregate:
    name: str
    total_quantity: int
    total_amount: float
    sizes: tuple[SizeAggregate, ...]


@dataclass(frozen=True)
class SalesReport:
    items: tuple[ItemAggregate, ...]
    grand_total: float


class _Bucket:
    def __init__(self) -> None:
        self.quantity = 0
        self.amount = 0.0


def build_sales_report(orders: Iterable[Order], search: str | None = None) -> SalesReport:
    """Aggregate completed orders' lines per item name and size.

    Amounts use the price captured on each line. Items are ordered by amount,
    sizes within an item by quantity, both descending. ``search`` narrows the
    listed items by name; the grand total covers every included line.
    """
    totals: dict[str, _Bucket] = {}
    by_size: dict[str, dict[str, _Bucket]] = {}
    amounts: list[float] = []

    for order in orders:
        if order.status != OrderStatus.COMPLETED:
            continue
        for line in order.lines:
            name = line.name.strip() or UNKNOWN_ITEM_NAME
            size = line.size or DEFAULT_SIZE_LABEL
            amount = line.amount
            amounts.append(amount)

            item_bucket = totals.setdefault(name, _Bucket())
            item_bucket.quantity += line.quantity
            item_bucket.amount += amount

            size_bucket = by_size.setdefault(name, {}).setdefault(size, _Bucket())
            size_bucket.quantity += line.quantity
            size_bucket.amount += amount

    items = [
        ItemAggregate(
            name=name,
            total_quantity=bucket.quantity,
            total_amount=bucket.amount,
            sizes=tuple(
                sorted(
                    (
                        SizeAggregate(size=size, quantity=sb.quantity, amount=sb.amount)
                        for size, sb in by_size[name].items()
                    ),
                    key=lambda aggregate: aggregate.quantity,
                    reverse=True,
                )
            ),
        )
        for name, bucket in totals.items()
    ]

    term = (search or "").strip().lower()
    if term:
        items = [item for item in items if term in item.name.lower()]

    items.sort(key=lambda item: item.total_amount, reverse=True)
    return SalesReport(items=tuple(items), grand_total=sum_amounts(amounts))
