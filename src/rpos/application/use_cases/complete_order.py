from __future__ import annotations

import logging
from datetime import datetime, timezone

from rpos.application.dto.responses import OrderTransitionResponse
from rpos.application.errors import OrderConflictError, OrderNotFoundError, OrderNotPendingError
from rpos.application.mappers.event_envelope import (
    serialize_order_event,
    serialize_table_status_event,
)
from rpos.application.mappers.order_mapper import RECEIPT_RENDER, to_transition_response
from rpos.application.metrics.order_lifecycle import (
    record_order_status,
    record_table_status_change,
    record_time_to_complete,
    record_transition,
)
from rpos.application.ports.publisher import EventPublisher
from rpos.application.ports.repositories import OptimisticConcurrencyError, OrderRepository
from rpos.application.use_cases.context import TraceContext
from rpos.application.use_cases.events import publish_event
from rpos.domain.common.ids import OrderId
from rpos.domain.order.entities import OrderStatus, OrderTransitionError
from rpos.domain.table.entities import TableStatus

logger = logging.getLogger(__name__)


class CompleteOrder:
    """Generate the bill: complete a pending order and free its table in one write."""

    def __init__(self, order_repository: OrderRepository, publisher: EventPublisher) -> None:
        self._order_repository = order_repository
        self._publisher = publisher

    def execute(self, order_id: OrderId, trace_ctx: TraceContext) -> OrderTransitionResponse:
        order = self._order_repository.get(order_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")

        now = datetime.now(timezone.utc)
        try:
            completed = order.complete(now)
        except OrderTransitionError as exc:
            raise OrderNotPendingError(str(exc)) from exc

        try:
            persisted = self._order_repository.update_status_with_version(
                order_id=order.order_id,
                new_status=OrderStatus.COMPLETED,
                expected_version=order.version,
                completed_at=completed.completed_at,
                release_table_id=order.table_id,
            )
        except OptimisticConcurrencyError as exc:
            current = self._order_repository.get(order_id)
            if current is None:
                raise OrderNotFoundError(f"order {order_id} not found") from exc
            if not current.is_pending:
                raise OrderNotPendingError(
                    f"order {order_id} is {current.status.value}, expected Pending"
                ) from exc
            raise OrderConflictError(f"order {order_id} status update conflict") from exc

        logger.info(
            "order_completed",
            extra={
                "order_id": str(order_id),
                "table_id": str(order.table_id) if order.table_id else None,
            },
        )
        record_transition(from_status=order.status, to_status=OrderStatus.COMPLETED)
        record_order_status(persisted)
        record_time_to_complete(persisted, now=now)

        publish_event(
            self._publisher,
            serialize_order_event(
                event_type="order.completed",
                occurred_at=now,
                order=persisted,
                trace_id=trace_ctx.trace_id,
                request_id=trace_ctx.request_id,
            ),
        )
        table_status: TableStatus | None = None
        if order.table_id is not None:
            table_status = TableStatus.AVAILABLE
            record_table_status_change(table_status)
            publish_event(
                self._publisher,
                serialize_table_status_event(
                    occurred_at=now,
                    table_id=str(order.table_id),
                    status=table_status,
                    trace_id=trace_ctx.trace_id,
                    request_id=trace_ctx.request_id,
                ),
            )

        return to_transition_response(
            persisted,
            renders=[RECEIPT_RENDER],
            table_status=table_status,
        )
