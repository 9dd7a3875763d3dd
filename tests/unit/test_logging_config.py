from __future__ import annotations

import json
import logging

from rpos.infrastructure.observability.logging_config import JsonFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="rpos.application.use_cases.place_order",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="order_placed",
        args=None,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields() -> None:
    payload = json.loads(
        JsonFormatter().format(_record(order_id="ord_1", order_type="Takeaway", table_id=None))
    )

    assert payload["message"] == "order_placed"
    assert payload["level"] == "INFO"
    assert payload["order_id"] == "ord_1"
    assert payload["order_type"] == "Takeaway"
    assert "table_id" not in payload
    assert "pathname" not in payload
    assert payload["request_id"] is None
