from __future__ import annotations

from datetime import datetime

from rpos.application.dto.responses import (
    KitchenTicketLineResponse,
    KitchenTicketResponse,
    ReceiptLineResponse,
    ReceiptResponse,
)
from rpos.domain.common.money import format_amount
from rpos.domain.order.entities import Order


def to_receipt_response(
    order: Order,
    table_number: int | None,
    restaurant_name: str,
    currency: str,
) -> ReceiptResponse:
    return ReceiptResponse(
        orderId=str(order.order_id),
        restaurantName=restaurant_name,
        type=order.order_type.value,
        tableNumber=table_number,
        printedAt=order.display_at,
        lines=[
            ReceiptLineResponse(
                name=line.name,
                quantity=line.quantity,
                price=line.price,
                amount=line.amount,
                formattedAmount=format_amount(line.amount),
                size=line.size,
                addOns=list(line.add_ons),
            )
            for line in order.lines
        ],
        total=order.total,
        formattedTotal=format_amount(order.total),
        currency=currency,
    )


def to_kitchen_ticket_response(
    order: Order,
    table_number: int | None,
    restaurant_name: str,
    created_at: datetime | None = None,
) -> KitchenTicketResponse:
    return KitchenTicketResponse(
        orderId=str(order.order_id),
        restaurantName=restaurant_name,
        type=order.order_type.value,
        tableNumber=table_number,
        createdAt=created_at or order.created_at,
        lines=[
            KitchenTicketLineResponse(
                name=line.name,
                quantity=line.quantity,
                size=line.size,
                addOns=list(line.add_ons),
            )
            for line in order.lines
        ],
    )
