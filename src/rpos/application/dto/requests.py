from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from rpos.domain.order.entities import OrderType


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class PricedOptionRequest(CamelBaseModel):
    name: str
    price: float


class MenuItemRequest(CamelBaseModel):
    name: str
    category: str
    price: float = 0.0
    description: str | None = None
    sizes: list[PricedOptionRequest] = Field(default_factory=list)
    add_ons: list[PricedOptionRequest] = Field(default_factory=list)


class CreateTableRequest(CamelBaseModel):
    table_number: int
    capacity: int


class ConfiguredLineRequest(CamelBaseModel):
    menu_item_id: str
    size: str | None = None
    add_ons: list[str] = Field(default_factory=list)
    quantity: int = Field(default=1, ge=1)


class CustomLineRequest(CamelBaseModel):
    name: str
    price: float
    quantity: int = Field(default=1, ge=1)


class CartRequest(CamelBaseModel):
    lines: list[ConfiguredLineRequest] = Field(default_factory=list)
    custom_items: list[CustomLineRequest] = Field(default_factory=list)


class PlaceOrderRequest(CartRequest):
    order_type: OrderType = Field(alias="type")
    table_id: str | None = None
    send_to_kitchen: bool = False
    settle_now: bool = False


class UserProfileRequest(CamelBaseModel):
    email: str | None = None
    display_name: str | None = None
