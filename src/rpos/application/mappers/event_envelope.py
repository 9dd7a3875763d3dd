from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import uuid4

from rpos.domain.order.entities import Order
from rpos.domain.table.entities import TableStatus


def _serialize_event(
    *,
    event_type: str,
    occurred_at: datetime,
    payload: dict[str, Any],
    trace_id: str | None,
    request_id: str | None,
) -> str:
    envelope = {
        "event_id": str(uuid4()),
        "event_type": event_type,
        "occurred_at": occurred_at.isoformat(),
        "request_id": request_id,
        "trace_id": trace_id,
        "payload": payload,
    }
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False)


def serialize_order_event(
    *,
    event_type: str,
    occurred_at: datetime,
    order: Order,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    return _serialize_event(
        event_type=event_type,
        occurred_at=occurred_at,
        trace_id=trace_id,
        request_id=request_id,
        payload={
            "orderId": str(order.order_id),
            "type": order.order_type.value,
            "tableId": str(order.table_id) if order.table_id else None,
            "status": order.status.value,
            "total": order.total,
            "version": order.version,
            "createdAt": order.created_at.isoformat(),
            "completedAt": order.completed_at.isoformat() if order.completed_at else None,
            "lines": [
                {
                    "menuItemId": str(line.menu_item_id),
                    "name": line.name,
                    "quantity": line.quantity,
                    "price": line.price,
                    "size": line.size,
                    "addOns": list(line.add_ons),
                }
                for line in order.lines
            ],
        },
    )


def serialize_order_deleted_event(
    *,
    occurred_at: datetime,
    order_id: str,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    return _serialize_event(
        event_type="order.deleted",
        occurred_at=occurred_at,
        trace_id=trace_id,
        request_id=request_id,
        payload={"orderId": order_id},
    )


def serialize_table_status_event(
    *,
    occurred_at: datetime,
    table_id: str,
    status: TableStatus,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    return _serialize_event(
        event_type="table.status_changed",
        occurred_at=occurred_at,
        trace_id=trace_id,
        request_id=request_id,
        payload={
            "tableId": table_id,
            "status": status.value,
        },
    )
