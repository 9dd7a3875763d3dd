from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from rpos.domain.common.ids import TableId


class TableStatus(str, Enum):
    AVAILABLE = "Available"
    OCCUPIED = "Occupied"
    RESERVED = "Reserved"


@dataclass(frozen=True)
class Table:
    table_id: TableId
    table_number: int
    capacity: int
    status: TableStatus = TableStatus.AVAILABLE

    def __post_init__(self) -> None:
        if self.table_number < 1:
            raise ValueError("table_number must be positive")
        if self.capacity < 1:
            raise ValueError("capacity must be positive")

    @property
    def label(self) -> str:
        return f"Table {self.table_number}"

    def ensure_available(self) -> None:
        if self.status != TableStatus.AVAILABLE:
            raise TableUnavailableError(
                f"table {self.table_number} is {self.status.value}, expected Available"
            )

    def occupy(self) -> Table:
        self.ensure_available()
        return replace(self, status=TableStatus.OCCUPIED)

    def release(self) -> Table:
        return replace(self, status=TableStatus.AVAILABLE)


class TableUnavailableError(Exception):
    pass
