from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from rpos.application.dto.requests import PlaceOrderRequest
from rpos.application.dto.responses import OrderTransitionResponse
from rpos.application.errors import (
    EmptyOrderError,
    KitchenTicketNotAllowedError,
    SettlementNotAllowedError,
    TableNotAvailableError,
    TableNotFoundError,
    TableSelectionError,
)
from rpos.application.mappers.event_envelope import (
    serialize_order_event,
    serialize_table_status_event,
)
from rpos.application.mappers.order_mapper import (
    KITCHEN_TICKET_RENDER,
    RECEIPT_RENDER,
    to_transition_response,
)
from rpos.application.metrics.order_lifecycle import (
    record_order_status,
    record_table_status_change,
    record_time_to_complete,
    record_transition,
)
from rpos.application.ports.publisher import EventPublisher
from rpos.application.ports.repositories import (
    MenuRepository,
    OrderRepository,
    TableOccupiedError,
    TableRepository,
)
from rpos.application.use_cases.context import TraceContext
from rpos.application.use_cases.events import publish_event
from rpos.application.use_cases.quote_cart import build_cart
from rpos.domain.common.ids import OrderId, TableId
from rpos.domain.order.entities import OrderStatus, OrderType, create_pending_order
from rpos.domain.table.entities import Table, TableStatus, TableUnavailableError

logger = logging.getLogger(__name__)


class PlaceOrder:
    def __init__(
        self,
        menu_repository: MenuRepository,
        table_repository: TableRepository,
        order_repository: OrderRepository,
        publisher: EventPublisher,
    ) -> None:
        self._menu_repository = menu_repository
        self._table_repository = table_repository
        self._order_repository = order_repository
        self._publisher = publisher

    def execute(
        self,
        request_dto: PlaceOrderRequest,
        trace_ctx: TraceContext,
    ) -> OrderTransitionResponse:
        cart = build_cart(self._menu_repository, request_dto)
        if cart.is_empty():
            raise EmptyOrderError("order must contain at least one item")

        table = self._resolve_table(request_dto)

        now = datetime.now(timezone.utc)
        order = create_pending_order(
            order_id=OrderId(f"ord_{uuid4().hex[:12]}"),
            order_type=request_dto.order_type,
            lines=list(cart.lines),
            now=now,
            table_id=table.table_id if table else None,
        )
        renders: list[str] = []
        if request_dto.settle_now:
            order = order.complete(now)
            renders.append(RECEIPT_RENDER)
        elif request_dto.send_to_kitchen:
            renders.append(KITCHEN_TICKET_RENDER)

        try:
            self._order_repository.add(order, occupy_table_id=table.table_id if table else None)
        except TableOccupiedError as exc:
            raise TableNotAvailableError(str(exc)) from exc

        logger.info(
            "order_placed",
            extra={
                "order_id": str(order.order_id),
                "order_type": order.order_type.value,
                "table_id": str(order.table_id) if order.table_id else None,
                "status": order.status.value,
            },
        )
        record_order_status(order)
        if order.status == OrderStatus.COMPLETED:
            record_transition(from_status=OrderStatus.PENDING, to_status=OrderStatus.COMPLETED)
            record_time_to_complete(order, now=now)

        publish_event(
            self._publisher,
            serialize_order_event(
                event_type="order.placed",
                occurred_at=now,
                order=order,
                trace_id=trace_ctx.trace_id,
                request_id=trace_ctx.request_id,
            ),
        )
        if table is not None:
            record_table_status_change(TableStatus.OCCUPIED)
            publish_event(
                self._publisher,
                serialize_table_status_event(
                    occurred_at=now,
                    table_id=str(table.table_id),
                    status=TableStatus.OCCUPIED,
                    trace_id=trace_ctx.trace_id,
                    request_id=trace_ctx.request_id,
                ),
            )

        return to_transition_response(
            order,
            renders=renders,
            table_status=TableStatus.OCCUPIED if table else None,
        )

    def _resolve_table(self, request_dto: PlaceOrderRequest) -> Table | None:
        if request_dto.order_type != OrderType.DINE_IN:
            if request_dto.table_id:
                raise TableSelectionError("only dine-in orders can be assigned a table")
            return None

        if request_dto.send_to_kitchen:
            raise KitchenTicketNotAllowedError(
                "kitchen tickets for dine-in orders are printed from the table view"
            )
        if request_dto.settle_now:
            raise SettlementNotAllowedError("dine-in orders are settled by generating the bill")
        if not request_dto.table_id:
            raise TableSelectionError("select a table for the dine-in order")

        table = self._table_repository.get(TableId(request_dto.table_id))
        if table is None:
            raise TableNotFoundError(f"table {request_dto.table_id} not found")
        try:
            table.ensure_available()
        except TableUnavailableError as exc:
            raise TableNotAvailableError(str(exc)) from exc
        return table
