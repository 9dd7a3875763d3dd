from __future__ import annotations

from collections.abc import Iterable

from rpos.domain.common.money import ensure_non_negative
from rpos.domain.menu.entities import MenuItem
from rpos.domain.order.entities import OrderLine, custom_item_id, lines_total, merge_line
from rpos.domain.order.pricing import ensure_priceable, unit_price


class Cart:
    """An in-progress order: ordered line items and a derived total.

    Lines with the same merge key never appear twice; the total is always
    computed from the lines.
    """

    def __init__(self, lines: Iterable[OrderLine] = ()) -> None:
        self._lines: list[OrderLine] = []
        for line in lines:
            self._lines = merge_line(self._lines, line)

    @property
    def lines(self) -> tuple[OrderLine, ...]:
        return tuple(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def is_empty(self) -> bool:
        return not self._lines

    def add_configured(
        self,
        menu_item: MenuItem,
        size: str | None = None,
        add_ons: Iterable[str] = (),
        quantity: int = 1,
    ) -> OrderLine:
        if quantity < 1:
            raise ValueError("quantity must be >= 1")
        ensure_priceable(menu_item, size)
        selected = tuple(dict.fromkeys(add_ons))
        line = OrderLine(
            menu_item_id=menu_item.item_id,
            name=menu_item.name,
            price=unit_price(menu_item, size, selected),
            quantity=quantity,
            size=size,
            add_ons=selected,
        )
        self._lines = merge_line(self._lines, line)
        return line

    def add_custom_item(self, name: str, price: float, quantity: int = 1) -> OrderLine:
        name = name.strip()
        if not name:
            raise ValueError("custom item name must be non-empty")
        ensure_non_negative(price, "price")
        if quantity < 1:
            raise ValueError("quantity must be >= 1")
        line = OrderLine(
            menu_item_id=custom_item_id(name, price),
            name=name,
            price=price,
            quantity=quantity,
        )
        self._lines = merge_line(self._lines, line)
        return line

    def set_quantity(self, index: int, quantity: int) -> None:
        if index < 0 or index >= len(self._lines):
            raise IndexError(f"cart has no line at index {index}")
        if quantity <= 0:
            del self._lines[index]
            return
        self._lines[index] = self._lines[index].with_quantity(quantity)

    def clear(self) -> None:
        self._lines = []

    def total(self) -> float:
        return lines_total(self._lines)
