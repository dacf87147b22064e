from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

import pytest
import requests

from preloved.adapters.api_errors import ApiTimeoutError
from preloved.adapters.http_client import ApiSession, HttpConfig


class _ResponseStub:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code
        self.text = json.dumps(payload)

    def json(self) -> Any:
        return self._payload


class _SessionStub:
    def __init__(self, responses: Sequence[Any]) -> None:
        self._responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> _ResponseStub:
        self.calls.append({"method": method, "url": url, **kwargs})
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class _Tokens:
    def __init__(self, token: Optional[str]) -> None:
        self.token = token

    def current_token(self) -> Optional[str]:
        return self.token


def _session(responses, tokens=None, cfg=None):
    stub = _SessionStub(responses)
    http = ApiSession(cfg, token_source=tokens, session_factory=lambda: stub)
    return http, stub


def test_token_is_read_when_each_request_is_sent() -> None:
    tokens = _Tokens("T1")
    http, stub = _session([_ResponseStub({}), _ResponseStub({})], tokens)

    http.get("http://shop/api/cart")
    tokens.token = "T2"
    http.get("http://shop/api/cart")

    assert stub.calls[0]["headers"]["Authorization"] == "Bearer T1"
    assert stub.calls[1]["headers"]["Authorization"] == "Bearer T2"


def test_anonymous_call_has_no_authorization_header() -> None:
    http, stub = _session([_ResponseStub({})], _Tokens("T1"))

    http.post("http://shop/api/auth/login", json_body={"email": "a"}, auth=False)

    headers = stub.calls[0]["headers"]
    assert "Authorization" not in headers
    assert headers["Content-Type"] == "application/json"
    assert json.loads(stub.calls[0]["data"]) == {"email": "a"}


def test_default_timeout_applied() -> None:
    http, stub = _session([_ResponseStub({})], cfg=HttpConfig(request_timeout_s=4))
    http.get("http://shop/api/products", auth=False)
    assert stub.calls[0]["timeout"] == 4


def test_timeout_is_not_retried_by_default() -> None:
    http, stub = _session([requests.Timeout("slow"), _ResponseStub({})])

    with pytest.raises(ApiTimeoutError):
        http.get("http://shop/api/orders")

    assert len(stub.calls) == 1


def test_explicit_retry_count_is_honoured() -> None:
    http, stub = _session(
        [requests.ConnectionError("down"), _ResponseStub({"ok": True})],
        cfg=HttpConfig(retries=1),
    )

    resp = http.get("http://shop/api/orders")

    assert resp.json() == {"ok": True}
    assert len(stub.calls) == 2
