from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

import pytest

from preloved.adapters.api_errors import ApiClientError, ApiError, ApiServerError
from preloved.adapters.http_client import ApiSession
from preloved.adapters.order_rest import OrderRestAdapter


class _ResponseStub:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code
        self.text = json.dumps(payload)

    def json(self) -> Any:
        return self._payload


class _SessionStub:
    def __init__(self, responses: Sequence[_ResponseStub]) -> None:
        self._responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> _ResponseStub:
        body = kwargs.get("data")
        self.calls.append(
            {"method": method, "url": url, "json": json.loads(body) if body else None, **kwargs}
        )
        return self._responses.pop(0)


def _adapter(responses):
    stub = _SessionStub(responses)
    http = ApiSession(session_factory=lambda: stub)
    return OrderRestAdapter("http://shop.local", http), stub


def test_create_order_returns_order_id_from_201() -> None:
    adapter, stub = _adapter([_ResponseStub({"order_id": 12}, status_code=201)])

    order_id = adapter.create_order({"product_id": 10, "quantity": 1})

    assert order_id == 12
    assert stub.calls[0]["method"] == "POST"
    assert stub.calls[0]["url"] == "http://shop.local/api/orders"


def test_create_order_without_id_is_an_error() -> None:
    adapter, _ = _adapter([_ResponseStub({"success": True}, status_code=201)])
    with pytest.raises(ApiError):
        adapter.create_order({"product_id": 10})


def test_rejected_order_carries_backend_message() -> None:
    adapter, _ = _adapter([_ResponseStub({"message": "Out of stock"}, status_code=400)])

    with pytest.raises(ApiClientError) as excinfo:
        adapter.create_order({"product_id": 10})

    assert excinfo.value.status == 400
    assert excinfo.value.backend_message == "Out of stock"


def test_set_status_puts_status_body() -> None:
    adapter, stub = _adapter([_ResponseStub({"success": True})])

    adapter.set_status(12, "confirmed")

    call = stub.calls[0]
    assert call["method"] == "PUT"
    assert call["url"] == "http://shop.local/api/orders/12/status"
    assert call["json"] == {"status": "confirmed"}


def test_set_status_server_error() -> None:
    adapter, _ = _adapter([_ResponseStub({"message": "db down"}, status_code=500)])
    with pytest.raises(ApiServerError):
        adapter.set_status(12, "shipped")


def test_list_orders_skips_malformed_entries() -> None:
    payload = {"data": [{"id": 1, "status": "pending"}, {"status": "broken"}, "junk"]}
    adapter, _ = _adapter([_ResponseStub(payload)])

    orders = adapter.list_orders()

    assert [o.id for o in orders] == [1]


def test_get_order_unwraps_data() -> None:
    adapter, _ = _adapter([_ResponseStub({"data": {"id": 4, "status": "delivered"}})])
    order = adapter.get_order(4)
    assert order.status == "delivered"
