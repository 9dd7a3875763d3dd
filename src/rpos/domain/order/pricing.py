from __future__ import annotations

from collections.abc import Iterable

from rpos.domain.menu.entities import MenuItem


def unit_price(
    menu_item: MenuItem,
    size_name: str | None,
    add_on_names: Iterable[str],
) -> float:
    """Price of one unit of ``menu_item`` configured with a size and add-ons.

    Sized items are priced from the matching size; a size name that matches
    nothing falls back to the item's base price. Add-on names the item does not
    offer contribute nothing.
    """
    base = menu_item.price
    if menu_item.has_sizes:
        size = menu_item.find_size(size_name)
        if size is not None:
            base = size.price

    selected = set(add_on_names)
    add_on_total = sum(
        (add_on.price for add_on in menu_item.add_ons if add_on.name in selected),
        0.0,
    )
    return base + add_on_total


def ensure_priceable(menu_item: MenuItem, size_name: str | None) -> None:
    """Reject a size selection that would price a sized item from a zero base.

    The base-price fallback only applies when the item has a positive base price.
    """
    if not menu_item.has_sizes or menu_item.find_size(size_name) is not None:
        return
    if menu_item.price <= 0:
        offered = ", ".join(size.name for size in menu_item.sizes)
        if size_name:
            raise ValueError(
                f"{menu_item.name} has no size {size_name!r}; choose one of {offered}"
            )
        raise ValueError(f"{menu_item.name} needs a size; choose one of {offered}")
