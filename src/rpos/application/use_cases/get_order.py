from __future__ import annotations

from rpos.application.dto.responses import KitchenTicketResponse, OrderResponse, ReceiptResponse
from rpos.application.errors import OrderNotFoundError
from rpos.application.mappers.order_mapper import to_order_response
from rpos.application.mappers.ticket_mapper import to_kitchen_ticket_response, to_receipt_response
from rpos.application.ports.repositories import OrderRepository, TableRepository
from rpos.domain.common.ids import OrderId
from rpos.domain.order.entities import Order


class GetOrder:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(self, order_id: OrderId) -> OrderResponse:
        order = self._order_repository.get(order_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")
        return to_order_response(order)


class _PrintableOrder:
    def __init__(
        self,
        order_repository: OrderRepository,
        table_repository: TableRepository,
        restaurant_name: str,
    ) -> None:
        self._order_repository = order_repository
        self._table_repository = table_repository
        self._restaurant_name = restaurant_name

    def _load(self, order_id: OrderId) -> tuple[Order, int | None]:
        order = self._order_repository.get(order_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")
        table_number: int | None = None
        if order.table_id is not None:
            table = self._table_repository.get(order.table_id)
            if table is not None:
                table_number = table.table_number
        return order, table_number


class GetReceipt(_PrintableOrder):
    def __init__(
        self,
        order_repository: OrderRepository,
        table_repository: TableRepository,
        restaurant_name: str,
        currency: str,
    ) -> None:
        super().__init__(order_repository, table_repository, restaurant_name)
        self._currency = currency

    def execute(self, order_id: OrderId) -> ReceiptResponse:
        order, table_number = self._load(order_id)
        return to_receipt_response(
            order,
            table_number=table_number,
            restaurant_name=self._restaurant_name,
            currency=self._currency,
        )


class GetKitchenTicket(_PrintableOrder):
    def execute(self, order_id: OrderId) -> KitchenTicketResponse:
        order, table_number = self._load(order_id)
        return to_kitchen_ticket_response(
            order,
            table_number=table_number,
            restaurant_name=self._restaurant_name,
        )
