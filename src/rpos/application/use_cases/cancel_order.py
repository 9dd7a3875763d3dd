from __future__ import annotations

import logging
from datetime import datetime, timezone

from rpos.application.dto.responses import OrderResponse
from rpos.application.errors import OrderConflictError, OrderNotFoundError, OrderNotPendingError
from rpos.application.mappers.event_envelope import (
    serialize_order_deleted_event,
    serialize_order_event,
)
from rpos.application.mappers.order_mapper import to_order_response
from rpos.application.metrics.order_lifecycle import record_order_status, record_transition
from rpos.application.ports.publisher import EventPublisher
from rpos.application.ports.repositories import OptimisticConcurrencyError, OrderRepository
from rpos.application.use_cases.context import SessionContext, TraceContext
from rpos.application.use_cases.events import publish_event
from rpos.domain.common.ids import OrderId
from rpos.domain.order.entities import OrderStatus, OrderTransitionError

logger = logging.getLogger(__name__)


class CancelOrder:
    """Cancel a pending order. Its table, if any, stays as it is."""

    def __init__(self, order_repository: OrderRepository, publisher: EventPublisher) -> None:
        self._order_repository = order_repository
        self._publisher = publisher

    def execute(self, order_id: OrderId, trace_ctx: TraceContext) -> OrderResponse:
        order = self._order_repository.get(order_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")
        try:
            order.cancel()
        except OrderTransitionError as exc:
            raise OrderNotPendingError(str(exc)) from exc

        try:
            persisted = self._order_repository.update_status_with_version(
                order_id=order.order_id,
                new_status=OrderStatus.CANCELLED,
                expected_version=order.version,
            )
        except OptimisticConcurrencyError as exc:
            raise OrderConflictError(f"order {order_id} status update conflict") from exc

        now = datetime.now(timezone.utc)
        logger.info("order_cancelled", extra={"order_id": str(order_id)})
        record_transition(from_status=order.status, to_status=OrderStatus.CANCELLED)
        record_order_status(persisted)
        publish_event(
            self._publisher,
            serialize_order_event(
                event_type="order.cancelled",
                occurred_at=now,
                order=persisted,
                trace_id=trace_ctx.trace_id,
                request_id=trace_ctx.request_id,
            ),
        )
        return to_order_response(persisted)


class DeleteOrder:
    def __init__(self, order_repository: OrderRepository, publisher: EventPublisher) -> None:
        self._order_repository = order_repository
        self._publisher = publisher

    def execute(
        self,
        order_id: OrderId,
        session: SessionContext,
        trace_ctx: TraceContext,
    ) -> None:
        session.require_admin("deleting an order")
        if not self._order_repository.delete(order_id):
            raise OrderNotFoundError(f"order {order_id} not found")

        logger.info(
            "order_deleted",
            extra={"order_id": str(order_id), "user_id": session.user_id},
        )
        publish_event(
            self._publisher,
            serialize_order_deleted_event(
                occurred_at=datetime.now(timezone.utc),
                order_id=str(order_id),
                trace_id=trace_ctx.trace_id,
                request_id=trace_ctx.request_id,
            ),
        )
