from __future__ import annotations

from fastapi import APIRouter, Depends, status

from rpos.api.dependencies import current_session
from rpos.api.middleware.request_id import get_request_id
from rpos.application.dto.requests import (
    ConfiguredLineRequest,
    CustomLineRequest,
    PlaceOrderRequest,
)
from rpos.application.dto.responses import (
    KitchenTicketResponse,
    OrderResponse,
    OrderTransitionResponse,
    ReceiptResponse,
)
from rpos.application.use_cases.append_order_item import (
    AppendCustomOrderItem,
    AppendOrderItem,
)
from rpos.application.use_cases.cancel_order import CancelOrder, DeleteOrder
from rpos.application.use_cases.complete_order import CompleteOrder
from rpos.application.use_cases.context import SessionContext, TraceContext
from rpos.application.use_cases.get_order import GetKitchenTicket, GetOrder, GetReceipt
from rpos.application.use_cases.place_order import PlaceOrder
from rpos.application.use_cases.send_to_kitchen import SendToKitchen
from rpos.domain.common.ids import OrderId
from rpos.infrastructure.db.repositories.menu_repo import SqlAlchemyMenuRepository
from rpos.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository
from rpos.infrastructure.db.repositories.table_repo import SqlAlchemyTableRepository
from rpos.infrastructure.messaging.redis_publisher import build_event_publisher
from rpos.infrastructure.observability.otel import current_trace_id
from rpos.infrastructure.settings import receipt_currency, restaurant_name

router = APIRouter()


def _trace_context() -> TraceContext:
    return TraceContext(trace_id=current_trace_id(), request_id=get_request_id())


def _place_order_use_case() -> PlaceOrder:
    return PlaceOrder(
        menu_repository=SqlAlchemyMenuRepository(),
        table_repository=SqlAlchemyTableRepository(),
        order_repository=SqlAlchemyOrderRepository(),
        publisher=build_event_publisher(),
    )


def _complete_order_use_case() -> CompleteOrder:
    return CompleteOrder(
        order_repository=SqlAlchemyOrderRepository(),
        publisher=build_event_publisher(),
    )


@router.post(
    "/v1/orders",
    response_model=OrderTransitionResponse,
    status_code=status.HTTP_201_CREATED,
)
def place_order(request_dto: PlaceOrderRequest) -> OrderTransitionResponse:
    return _place_order_use_case().execute(request_dto=request_dto, trace_ctx=_trace_context())


@router.get("/v1/orders/{order_id}", response_model=OrderResponse)
def get_order(order_id: str) -> OrderResponse:
    return GetOrder(order_repository=SqlAlchemyOrderRepository()).execute(OrderId(order_id))


@router.delete("/v1/orders/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order(
    order_id: str,
    session: SessionContext = Depends(current_session),
) -> None:
    use_case = DeleteOrder(
        order_repository=SqlAlchemyOrderRepository(),
        publisher=build_event_publisher(),
    )
    use_case.execute(order_id=OrderId(order_id), session=session, trace_ctx=_trace_context())


@router.post("/v1/orders/{order_id}/kitchen", response_model=OrderTransitionResponse)
def send_to_kitchen(order_id: str) -> OrderTransitionResponse:
    return SendToKitchen(order_repository=SqlAlchemyOrderRepository()).execute(OrderId(order_id))


@router.post("/v1/orders/{order_id}/bill", response_model=OrderTransitionResponse)
def generate_bill(order_id: str) -> OrderTransitionResponse:
    return _complete_order_use_case().execute(
        order_id=OrderId(order_id),
        trace_ctx=_trace_context(),
    )


@router.post("/v1/orders/{order_id}/cancel", response_model=OrderResponse)
def cancel_order(order_id: str) -> OrderResponse:
    use_case = CancelOrder(
        order_repository=SqlAlchemyOrderRepository(),
        publisher=build_event_publisher(),
    )
    return use_case.execute(order_id=OrderId(order_id), trace_ctx=_trace_context())


@router.post("/v1/orders/{order_id}/items", response_model=OrderResponse)
def append_item(
    order_id: str,
    request_dto: ConfiguredLineRequest,
    session: SessionContext = Depends(current_session),
) -> OrderResponse:
    use_case = AppendOrderItem(
        menu_repository=SqlAlchemyMenuRepository(),
        order_repository=SqlAlchemyOrderRepository(),
        publisher=build_event_publisher(),
    )
    return use_case.execute(
        order_id=OrderId(order_id),
        request_dto=request_dto,
        session=session,
        trace_ctx=_trace_context(),
    )


@router.post("/v1/orders/{order_id}/custom-items", response_model=OrderResponse)
def append_custom_item(
    order_id: str,
    request_dto: CustomLineRequest,
    session: SessionContext = Depends(current_session),
) -> OrderResponse:
    use_case = AppendCustomOrderItem(
        order_repository=SqlAlchemyOrderRepository(),
        publisher=build_event_publisher(),
    )
    return use_case.execute(
        order_id=OrderId(order_id),
        request_dto=request_dto,
        session=session,
        trace_ctx=_trace_context(),
    )


@router.get("/v1/orders/{order_id}/receipt", response_model=ReceiptResponse)
def get_receipt(order_id: str) -> ReceiptResponse:
    use_case = GetReceipt(
        order_repository=SqlAlchemyOrderRepository(),
        table_repository=SqlAlchemyTableRepository(),
        restaurant_name=restaurant_name(),
        currency=receipt_currency(),
    )
    return use_case.execute(OrderId(order_id))


@router.get("/v1/orders/{order_id}/kitchen-ticket", response_model=KitchenTicketResponse)
def get_kitchen_ticket(order_id: str) -> KitchenTicketResponse:
    use_case = GetKitchenTicket(
        order_repository=SqlAlchemyOrderRepository(),
        table_repository=SqlAlchemyTableRepository(),
        restaurant_name=restaurant_name(),
    )
    return use_case.execute(OrderId(order_id))
