from __future__ import annotations

import sys
from pathlib import Path

from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from rpos.api.main import app
from rpos.api.middleware.request_id import REQUEST_ID_HEADER, resolve_request_id


def test_inbound_request_id_is_kept_when_safe() -> None:
    assert resolve_request_id("terminal-3:0007") == "terminal-3:0007"


def test_unsafe_or_missing_request_id_is_replaced() -> None:
    minted = resolve_request_id("bad id\nwith newline")

    assert minted != "bad id\nwith newline"
    assert len(minted) == 32
    assert resolve_request_id(None) != resolve_request_id(None)


def test_response_echoes_request_id() -> None:
    client = TestClient(app)

    response = client.get("/health/live", headers={REQUEST_ID_HEADER: "till-1"})

    assert response.headers[REQUEST_ID_HEADER] == "till-1"
