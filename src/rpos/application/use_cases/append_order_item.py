from __future__ import annotations

import logging
from datetime import datetime, timezone

from rpos.application.dto.requests import ConfiguredLineRequest, CustomLineRequest
from rpos.application.dto.responses import OrderResponse
from rpos.application.errors import (
    InvalidOrderLineError,
    OrderConflictError,
    OrderNotFoundError,
    OrderNotPendingError,
    UnknownMenuItemError,
)
from rpos.application.mappers.event_envelope import serialize_order_event
from rpos.application.mappers.order_mapper import to_order_response
from rpos.application.ports.publisher import EventPublisher
from rpos.application.ports.repositories import (
    MenuRepository,
    OptimisticConcurrencyError,
    OrderRepository,
)
from rpos.application.use_cases.context import SessionContext, TraceContext
from rpos.application.use_cases.events import publish_event
from rpos.domain.common.ids import MenuItemId, OrderId
from rpos.domain.order.cart import Cart
from rpos.domain.order.entities import OrderLine, OrderTransitionError
from rpos.domain.order.pricing import ensure_priceable, unit_price

logger = logging.getLogger(__name__)


class _AppendToOpenOrder:
    def __init__(self, order_repository: OrderRepository, publisher: EventPublisher) -> None:
        self._order_repository = order_repository
        self._publisher = publisher

    def _append(self, order_id: OrderId, line: OrderLine, trace_ctx: TraceContext) -> OrderResponse:
        # Merge against the stored lines, not the caller's view of them.
        order = self._order_repository.get(order_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")
        try:
            updated = order.with_line(line)
        except OrderTransitionError as exc:
            raise OrderNotPendingError(str(exc)) from exc

        try:
            persisted = self._order_repository.update_lines_with_version(
                order_id=order_id,
                lines=updated.lines,
                total=updated.total,
                expected_version=order.version,
            )
        except OptimisticConcurrencyError as exc:
            raise OrderConflictError(
                f"order {order_id} was modified by another terminal, reload and retry"
            ) from exc

        logger.info(
            "order_items_changed",
            extra={"order_id": str(order_id), "menu_item_id": str(line.menu_item_id)},
        )
        publish_event(
            self._publisher,
            serialize_order_event(
                event_type="order.items_changed",
                occurred_at=datetime.now(timezone.utc),
                order=persisted,
                trace_id=trace_ctx.trace_id,
                request_id=trace_ctx.request_id,
            ),
        )
        return to_order_response(persisted)


class AppendOrderItem(_AppendToOpenOrder):
    def __init__(
        self,
        menu_repository: MenuRepository,
        order_repository: OrderRepository,
        publisher: EventPublisher,
    ) -> None:
        super().__init__(order_repository=order_repository, publisher=publisher)
        self._menu_repository = menu_repository

    def execute(
        self,
        order_id: OrderId,
        request_dto: ConfiguredLineRequest,
        session: SessionContext,
        trace_ctx: TraceContext,
    ) -> OrderResponse:
        session.require_admin("adding items to an open order")
        menu_item = self._menu_repository.get(MenuItemId(request_dto.menu_item_id))
        if menu_item is None:
            raise UnknownMenuItemError(
                f"menu item {request_dto.menu_item_id} does not exist",
                details={"menuItemId": request_dto.menu_item_id},
            )

        try:
            ensure_priceable(menu_item, request_dto.size)
        except ValueError as exc:
            raise InvalidOrderLineError(
                str(exc),
                details={"menuItemId": request_dto.menu_item_id},
            ) from exc

        add_ons = tuple(dict.fromkeys(request_dto.add_ons))
        line = OrderLine(
            menu_item_id=menu_item.item_id,
            name=menu_item.name,
            price=unit_price(menu_item, request_dto.size, add_ons),
            quantity=request_dto.quantity,
            size=request_dto.size,
            add_ons=add_ons,
        )
        return self._append(order_id, line, trace_ctx)


class AppendCustomOrderItem(_AppendToOpenOrder):
    def execute(
        self,
        order_id: OrderId,
        request_dto: CustomLineRequest,
        session: SessionContext,
        trace_ctx: TraceContext,
    ) -> OrderResponse:
        session.require_admin("adding items to an open order")
        try:
            line = Cart().add_custom_item(request_dto.name, request_dto.price, request_dto.quantity)
        except ValueError as exc:
            raise InvalidOrderLineError(str(exc)) from exc
        return self._append(order_id, line, trace_ctx)
