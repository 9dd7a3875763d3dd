from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field


class PricedOptionResponse(BaseModel):
    name: str
    price: float


class MenuItemResponse(BaseModel):
    itemId: str
    name: str
    category: str
    price: float
    displayPrice: float
    description: str | None = None
    sizes: list[PricedOptionResponse] = Field(default_factory=list)
    addOns: list[PricedOptionResponse] = Field(default_factory=list)


class MenuResponse(BaseModel):
    categories: list[str] = Field(default_factory=list)
    items: list[MenuItemResponse] = Field(default_factory=list)


class TableResponse(BaseModel):
    tableId: str
    tableNumber: int
    capacity: int
    status: str
    label: str


class TableListResponse(BaseModel):
    tables: list[TableResponse] = Field(default_factory=list)


class OrderLineResponse(BaseModel):
    menuItemId: str
    name: str
    price: float
    quantity: int
    amount: float
    size: str | None = None
    addOns: list[str] = Field(default_factory=list)


class CartQuoteResponse(BaseModel):
    lines: list[OrderLineResponse] = Field(default_factory=list)
    itemCount: int
    total: float


class OrderResponse(BaseModel):
    orderId: str
    type: str
    status: str
    tableId: str | None = None
    lines: list[OrderLineResponse] = Field(default_factory=list)
    itemCount: int
    total: float
    createdAt: datetime
    completedAt: datetime | None = None
    version: int


class RenderResponse(BaseModel):
    kind: str
    orderId: str
    path: str


class OrderTransitionResponse(BaseModel):
    order: OrderResponse
    renders: list[RenderResponse] = Field(default_factory=list)
    tableStatus: str | None = None


class ReceiptLineResponse(BaseModel):
    name: str
    quantity: int
    price: float
    amount: float
    formattedAmount: str
    size: str | None = None
    addOns: list[str] = Field(default_factory=list)


class ReceiptResponse(BaseModel):
    orderId: str
    restaurantName: str
    type: str
    tableNumber: int | None = None
    printedAt: datetime
    lines: list[ReceiptLineResponse] = Field(default_factory=list)
    total: float
    formattedTotal: str
    currency: str


class KitchenTicketLineResponse(BaseModel):
    name: str
    quantity: int
    size: str | None = None
    addOns: list[str] = Field(default_factory=list)


class KitchenTicketResponse(BaseModel):
    orderId: str
    restaurantName: str
    type: str
    tableNumber: int | None = None
    createdAt: datetime
    lines: list[KitchenTicketLineResponse] = Field(default_factory=list)


class SizeAggregateResponse(BaseModel):
    size: str
    quantity: int
    amount: float


class ItemAggregateResponse(BaseModel):
    name: str
    totalQuantity: int
    totalAmount: float
    sizes: list[SizeAggregateResponse] = Field(default_factory=list)


class SalesReportResponse(BaseModel):
    fromDate: date
    toDate: date
    items: list[ItemAggregateResponse] = Field(default_factory=list)
    grandTotal: float


class OrderRowResponse(BaseModel):
    sequence: int
    orderId: str
    displayAt: datetime
    type: str
    tableNumber: int | None = None
    tableLabel: str
    itemCount: int
    total: float
    status: str


class OrderReportResponse(BaseModel):
    fromDate: date
    toDate: date
    status: str
    rows: list[OrderRowResponse] = Field(default_factory=list)
    grandTotal: float


class DashboardSummaryResponse(BaseModel):
    ordersToday: int
    revenueToday: float
    occupancyPercent: int | None = None


class UserProfileResponse(BaseModel):
    userId: str
    email: str | None = None
    displayName: str | None = None
    role: str
    isAdmin: bool
