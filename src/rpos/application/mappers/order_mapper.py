from __future__ import annotations

from collections.abc import Iterable

from rpos.application.dto.responses import (
    CartQuoteResponse,
    OrderLineResponse,
    OrderResponse,
    OrderTransitionResponse,
    RenderResponse,
)
from rpos.domain.order.cart import Cart
from rpos.domain.order.entities import Order, OrderLine
from rpos.domain.table.entities import TableStatus

RECEIPT_RENDER = "receipt"
KITCHEN_TICKET_RENDER = "kitchen_ticket"

_RENDER_PATHS = {
    RECEIPT_RENDER: "/v1/orders/{order_id}/receipt",
    KITCHEN_TICKET_RENDER: "/v1/orders/{order_id}/kitchen-ticket",
}


def to_order_line_response(line: OrderLine) -> OrderLineResponse:
    return OrderLineResponse(
        menuItemId=str(line.menu_item_id),
        name=line.name,
        price=line.price,
        quantity=line.quantity,
        amount=line.amount,
        size=line.size,
        addOns=list(line.add_ons),
    )


def to_order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        orderId=str(order.order_id),
        type=order.order_type.value,
        status=order.status.value,
        tableId=str(order.table_id) if order.table_id else None,
        lines=[to_order_line_response(line) for line in order.lines],
        itemCount=order.item_count,
        total=order.total,
        createdAt=order.created_at,
        completedAt=order.completed_at,
        version=order.version,
    )


def to_cart_quote_response(cart: Cart) -> CartQuoteResponse:
    return CartQuoteResponse(
        lines=[to_order_line_response(line) for line in cart.lines],
        itemCount=sum(line.quantity for line in cart.lines),
        total=cart.total(),
    )


def to_transition_response(
    order: Order,
    renders: Iterable[str] = (),
    table_status: TableStatus | None = None,
) -> OrderTransitionResponse:
    return OrderTransitionResponse(
        order=to_order_response(order),
        renders=[
            RenderResponse(
                kind=kind,
                orderId=str(order.order_id),
                path=_RENDER_PATHS[kind].format(order_id=order.order_id),
            )
            for kind in renders
        ],
        tableStatus=table_status.value if table_status else None,
    )
