from __future__ import annotations

from dataclasses import dataclass, field

from rpos.domain.common.ids import MenuItemId
from rpos.domain.common.money import ensure_non_negative, ensure_positive


@dataclass(frozen=True)
class Size:
    name: str
    price: float

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("size name must be non-empty")
        ensure_positive(self.price, "size price")


@dataclass(frozen=True)
class AddOn:
    name: str
    price: float

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("add-on name must be non-empty")
        ensure_positive(self.price, "add-on price")


@dataclass(frozen=True)
class MenuItem:
    item_id: MenuItemId
    name: str
    category: str
    price: float
    description: str | None = None
    sizes: tuple[Size, ...] = field(default_factory=tuple)
    add_ons: tuple[AddOn, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if not self.category.strip():
            raise ValueError("category must be non-empty")
        ensure_non_negative(self.price, "price")
        if self.price <= 0 and not any(size.price > 0 for size in self.sizes):
            raise ValueError("provide a base price or at least one size with a price")
        size_names = [size.name for size in self.sizes]
        if len(set(size_names)) != len(size_names):
            raise ValueError("size names must be unique")
        add_on_names = [add_on.name for add_on in self.add_ons]
        if len(set(add_on_names)) != len(add_on_names):
            raise ValueError("add-on names must be unique")

    @property
    def has_sizes(self) -> bool:
        return len(self.sizes) > 0

    def find_size(self, name: str | None) -> Size | None:
        if name is None:
            return None
        for size in self.sizes:
            if size.name == name:
                return size
        return None

    def display_price(self) -> float:
        """Lowest price a customer can pay for the item before add-ons."""
        if self.has_sizes:
            return min(size.price for size in self.sizes)
        return self.price
