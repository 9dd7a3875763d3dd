from __future__ import annotations

import logging

from rpos.application.dto.responses import OrderTransitionResponse
from rpos.application.errors import (
    KitchenTicketNotAllowedError,
    OrderNotFoundError,
    OrderNotPendingError,
)
from rpos.application.mappers.order_mapper import KITCHEN_TICKET_RENDER, to_transition_response
from rpos.application.ports.repositories import OrderRepository
from rpos.domain.common.ids import OrderId
from rpos.domain.order.entities import OrderTransitionError, OrderType

logger = logging.getLogger(__name__)


class SendToKitchen:
    """Emit a kitchen ticket for a pending takeaway or delivery order."""

    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(self, order_id: OrderId) -> OrderTransitionResponse:
        order = self._order_repository.get(order_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")
        if order.order_type == OrderType.DINE_IN:
            raise KitchenTicketNotAllowedError(
                "kitchen tickets for dine-in orders are printed from the table view"
            )
        try:
            order.ensure_pending()
        except OrderTransitionError as exc:
            raise OrderNotPendingError(str(exc)) from exc

        logger.info("kitchen_ticket_requested", extra={"order_id": str(order_id)})
        return to_transition_response(order, renders=[KITCHEN_TICKET_RENDER])
