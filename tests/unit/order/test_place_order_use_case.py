from __future__ import annotations

import json

import pydantic
import pytest

from rpos.application.dto.requests import (
    CartRequest,
    ConfiguredLineRequest,
    CustomLineRequest,
    PlaceOrderRequest,
)
from rpos.application.errors import (
    EmptyOrderError,
    InvalidOrderLineError,
    KitchenTicketNotAllowedError,
    PersistenceError,
    SettlementNotAllowedError,
    TableNotAvailableError,
    TableNotFoundError,
    TableSelectionError,
    UnknownMenuItemError,
)
from rpos.application.ports.publisher import EVENTS_CHANNEL
from rpos.application.use_cases.place_order import PlaceOrder
from rpos.application.use_cases.quote_cart import QuoteCart
from rpos.domain.common.ids import MenuItemId
from rpos.domain.menu.entities import MenuItem, Size
from rpos.domain.order.entities import OrderType
from rpos.domain.table.entities import TableStatus


@pytest.fixture
def use_case(menu_repository, table_repository, order_repository, publisher) -> PlaceOrder:
    return PlaceOrder(
        menu_repository=menu_repository,
        table_repository=table_repository,
        order_repository=order_repository,
        publisher=publisher,
    )


def _request(order_type: OrderType, **kwargs) -> PlaceOrderRequest:
    lines = kwargs.pop(
        "lines",
        [ConfiguredLineRequest(menu_item_id="itm_burger", size="Large", add_ons=["Cheese"])],
    )
    return PlaceOrderRequest(type=order_type, lines=lines, **kwargs)


def test_dine_in_order_occupies_table(use_case, order_repository, table_repository, trace_ctx):
    response = use_case.execute(_request(OrderType.DINE_IN, table_id="tbl_1"), trace_ctx)

    assert response.order.status == "Pending"
    assert response.order.type == "Dine-in"
    assert response.order.tableId == "tbl_1"
    assert response.order.total == 9.0
    assert response.renders == []
    assert response.tableStatus == "Occupied"
    assert table_repository.get("tbl_1").status == TableStatus.OCCUPIED
    assert response.order.orderId in order_repository.orders


def test_place_order_publishes_envelopes(use_case, publisher, trace_ctx):
    use_case.execute(_request(OrderType.DINE_IN, table_id="tbl_2"), trace_ctx)

    channels = {channel for channel, _ in publisher.messages}
    events = [json.loads(message) for _, message in publisher.messages]
    assert channels == {EVENTS_CHANNEL}
    assert [event["event_type"] for event in events] == ["order.placed", "table.status_changed"]
    assert events[0]["trace_id"] == "trace-1"
    assert events[0]["request_id"] == "req-1"


def test_takeaway_sent_to_kitchen_emits_ticket(use_case, trace_ctx):
    response = use_case.execute(_request(OrderType.TAKEAWAY, send_to_kitchen=True), trace_ctx)

    assert response.order.status == "Pending"
    assert [render.kind for render in response.renders] == ["kitchen_ticket"]
    assert response.renders[0].path.endswith("/kitchen-ticket")
    assert response.tableStatus is None


def test_delivery_settled_now_is_completed_with_receipt(use_case, order_repository, trace_ctx):
    response = use_case.execute(_request(OrderType.DELIVERY, settle_now=True), trace_ctx)

    assert response.order.status == "Completed"
    assert response.order.completedAt is not None
    assert [render.kind for render in response.renders] == ["receipt"]
    stored = order_repository.get(response.order.orderId)
    assert stored.completed_at is not None


def test_same_configuration_merges_into_one_line(use_case, trace_ctx):
    request = _request(
        OrderType.TAKEAWAY,
        lines=[
            ConfiguredLineRequest(menu_item_id="itm_burger", size="Large", quantity=2),
            ConfiguredLineRequest(menu_item_id="itm_burger", size="Large"),
        ],
        custom_items=[CustomLineRequest(name="Corkage", price=5.0)],
    )

    response = use_case.execute(request, trace_ctx)

    assert [(line.name, line.quantity) for line in response.order.lines] == [
        ("Burger", 3),
        ("Corkage", 1),
    ]
    assert response.order.total == 29.0


def test_empty_cart_is_rejected(use_case, order_repository, trace_ctx):
    with pytest.raises(EmptyOrderError):
        use_case.execute(_request(OrderType.TAKEAWAY, lines=[]), trace_ctx)
    assert order_repository.orders == {}


@pytest.mark.parametrize(
    ("request_kwargs", "error"),
    [
        ({"order_type": OrderType.DINE_IN}, TableSelectionError),
        ({"order_type": OrderType.TAKEAWAY, "table_id": "tbl_1"}, TableSelectionError),
        (
            {"order_type": OrderType.DINE_IN, "table_id": "tbl_1", "send_to_kitchen": True},
            KitchenTicketNotAllowedError,
        ),
        (
            {"order_type": OrderType.DINE_IN, "table_id": "tbl_1", "settle_now": True},
            SettlementNotAllowedError,
        ),
        ({"order_type": OrderType.DINE_IN, "table_id": "tbl_404"}, TableNotFoundError),
        ({"order_type": OrderType.DINE_IN, "table_id": "tbl_3"}, TableNotAvailableError),
    ],
)
def test_table_selection_rules(
    use_case,
    order_repository,
    table_repository,
    trace_ctx,
    request_kwargs,
    error,
):
    order_type = request_kwargs.pop("order_type")

    with pytest.raises(error):
        use_case.execute(_request(order_type, **request_kwargs), trace_ctx)

    assert order_repository.orders == {}
    assert table_repository.get("tbl_1").status == TableStatus.AVAILABLE


def test_second_order_for_occupied_table_is_rejected(use_case, order_repository, trace_ctx):
    use_case.execute(_request(OrderType.DINE_IN, table_id="tbl_1"), trace_ctx)

    with pytest.raises(TableNotAvailableError):
        use_case.execute(_request(OrderType.DINE_IN, table_id="tbl_1"), trace_ctx)
    assert len(order_repository.orders) == 1


def test_lost_race_for_table_maps_to_table_not_available(
    use_case,
    order_repository,
    table_repository,
    trace_ctx,
):
    table_repository_get = table_repository.get

    def stale_get(table_id):
        table = table_repository_get(table_id)
        table_repository.set_status(str(table_id), TableStatus.OCCUPIED)
        return table

    table_repository.get = stale_get

    with pytest.raises(TableNotAvailableError):
        use_case.execute(_request(OrderType.DINE_IN, table_id="tbl_1"), trace_ctx)
    assert order_repository.orders == {}


def test_unknown_menu_item_is_rejected(use_case, trace_ctx):
    request = _request(
        OrderType.TAKEAWAY,
        lines=[ConfiguredLineRequest(menu_item_id="itm_missing")],
    )
    with pytest.raises(UnknownMenuItemError) as exc_info:
        use_case.execute(request, trace_ctx)
    assert exc_info.value.details == {"menuItemId": "itm_missing"}


def test_store_failure_publishes_nothing(use_case, order_repository, publisher, trace_ctx):
    order_repository.fail_writes = PersistenceError("order_add failed")

    with pytest.raises(PersistenceError):
        use_case.execute(_request(OrderType.TAKEAWAY, send_to_kitchen=True), trace_ctx)
    assert publisher.messages == []


def test_publish_failure_does_not_fail_order(
    menu_repository,
    table_repository,
    order_repository,
    trace_ctx,
):
    class BrokenPublisher:
        def publish(self, channel: str, message: str) -> None:
            raise ConnectionError("redis down")

    use_case = PlaceOrder(
        menu_repository=menu_repository,
        table_repository=table_repository,
        order_repository=order_repository,
        publisher=BrokenPublisher(),
    )

    response = use_case.execute(_request(OrderType.TAKEAWAY), trace_ctx)
    assert response.order.orderId in order_repository.orders


def test_quote_cart_prices_without_persisting(menu_repository, order_repository):
    request = CartRequest(
        lines=[
            ConfiguredLineRequest(menu_item_id="itm_burger", size="Small", add_ons=["Bacon"]),
            ConfiguredLineRequest(menu_item_id="itm_fries", quantity=2),
        ],
    )

    quote = QuoteCart(menu_repository=menu_repository).execute(request)

    assert quote.total == 14.0
    assert quote.itemCount == 3
    assert order_repository.orders == {}


def test_line_quantity_must_be_positive():
    with pytest.raises(pydantic.ValidationError):
        ConfiguredLineRequest(menu_item_id="itm_fries", quantity=0)
    with pytest.raises(pydantic.ValidationError):
        CustomLineRequest(name="Corkage", price=5.0, quantity=-1)


def test_large_quantity_is_priced_as_one_line(menu_repository):
    request = CartRequest(
        lines=[ConfiguredLineRequest(menu_item_id="itm_burger", size="Small", quantity=10**9)]
    )

    quote = QuoteCart(menu_repository=menu_repository).execute(request)

    assert len(quote.lines) == 1
    assert quote.itemCount == 10**9
    assert quote.total == 5.0 * 10**9


@pytest.mark.parametrize("size", [None, "Medium"])
def test_sized_item_without_base_price_needs_a_known_size(
    use_case, menu_repository, order_repository, trace_ctx, size
):
    line = ConfiguredLineRequest(menu_item_id="itm_burger", size=size)

    with pytest.raises(InvalidOrderLineError) as excinfo:
        QuoteCart(menu_repository=menu_repository).execute(CartRequest(lines=[line]))
    assert excinfo.value.details == {"menuItemId": "itm_burger"}

    with pytest.raises(InvalidOrderLineError):
        use_case.execute(_request(OrderType.TAKEAWAY, lines=[line]), trace_ctx)
    assert order_repository.orders == {}


def test_unmatched_size_falls_back_to_positive_base_price(menu_repository):
    menu_repository.add(
        MenuItem(
            item_id=MenuItemId("itm_soup"),
            name="Soup",
            category="Starters",
            price=4.0,
            sizes=(Size(name="Bowl", price=6.0),),
        )
    )
    line = ConfiguredLineRequest(menu_item_id="itm_soup", size="Cup")

    quote = QuoteCart(menu_repository=menu_repository).execute(CartRequest(lines=[line]))

    assert quote.total == 4.0
