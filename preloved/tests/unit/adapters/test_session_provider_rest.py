from __future__ import annotations

from typing import Any, Dict, List, Sequence

import pytest
import requests

from preloved.adapters.api_errors import ApiClientError, ApiError
from preloved.adapters.session_provider_rest import PROVIDER_SESSION_KEY, SessionProviderRest
from preloved.adapters.storage_local import StorageLocal


class _ResponseStub:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code
        self.text = str(payload)

    def json(self) -> Any:
        return self._payload


class _SessionStub:
    def __init__(self, responses: Sequence[Any]) -> None:
        self._responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> _ResponseStub:
        self.calls.append({"url": url, **kwargs})
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def _provider(tmp_path, responses=(), now=1000.0):
    storage = StorageLocal(str(tmp_path))
    provider = SessionProviderRest(
        "https://auth.example", "anon", storage, clock=lambda: now
    )
    stub = _SessionStub(responses)
    provider.session = stub  # type: ignore[assignment]
    return provider, storage, stub


def test_requires_url_and_key(tmp_path) -> None:
    with pytest.raises(ValueError):
        SessionProviderRest("", "anon", StorageLocal(str(tmp_path)))


def test_valid_token_returned_without_network(tmp_path) -> None:
    provider, _, stub = _provider(tmp_path)
    provider.save_session({"access_token": "P1", "expires_in": 3600})

    assert provider.get_access_token() == "P1"
    assert stub.calls == []


def test_expired_token_is_refreshed_and_saved(tmp_path) -> None:
    provider, storage, stub = _provider(
        tmp_path,
        [_ResponseStub({"access_token": "P2", "refresh_token": "R2", "expires_in": 60})],
    )
    storage.set_json(
        PROVIDER_SESSION_KEY, {"access_token": "P1", "refresh_token": "R1", "expires_at": 10}
    )

    assert provider.get_access_token() == "P2"
    assert stub.calls[0]["params"] == {"grant_type": "refresh_token"}
    assert stub.calls[0]["json"] == {"refresh_token": "R1"}
    assert stub.calls[0]["headers"]["apikey"] == "anon"
    assert storage.get_json(PROVIDER_SESSION_KEY)["expires_at"] == 1060


def test_expired_without_refresh_token_is_discarded(tmp_path) -> None:
    provider, storage, _ = _provider(tmp_path)
    storage.set_json(PROVIDER_SESSION_KEY, {"access_token": "P1", "expires_at": 10})

    assert provider.get_access_token() is None
    assert storage.get_json(PROVIDER_SESSION_KEY) is None


def test_refresh_rejected(tmp_path) -> None:
    provider, storage, _ = _provider(tmp_path, [_ResponseStub({"error": "invalid_grant"}, 400)])
    storage.set_json(
        PROVIDER_SESSION_KEY, {"access_token": "P1", "refresh_token": "R1", "expires_at": 10}
    )
    with pytest.raises(ApiClientError):
        provider.get_access_token()


def test_sign_out_removes_local_copy_even_when_remote_fails(tmp_path) -> None:
    provider, storage, stub = _provider(tmp_path, [requests.ConnectionError("offline")])
    provider.save_session({"access_token": "P1"})

    with pytest.raises(ApiError):
        provider.sign_out()

    assert storage.get_json(PROVIDER_SESSION_KEY) is None
    assert stub.calls[0]["url"] == "https://auth.example/auth/v1/logout"
    assert stub.calls[0]["headers"]["Authorization"] == "Bearer P1"
