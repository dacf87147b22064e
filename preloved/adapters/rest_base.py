"""Common plumbing for marketplace REST adapters."""

from __future__ import annotations

from typing import Any, Dict, List

import requests

from preloved.adapters.api_errors import ApiError, error_from_response
from preloved.adapters.http_client import ApiSession


def normalize_api_base(raw: str) -> str:
    """Return the API base URL, always ending in ``/api`` without a slash."""
    base = str(raw or "").strip().rstrip("/")
    if not base:
        raise ValueError("API base URL is required")
    return base if base.endswith("/api") else f"{base}/api"


class RestAdapter:
    """Base for adapters that share one :class:`ApiSession`."""

    def __init__(self, base_url: str, http: ApiSession) -> None:
        self.base_url = normalize_api_base(base_url)
        self.http = http

    def _url(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.base_url}{path}"

    @staticmethod
    def _ensure_ok(resp: requests.Response, ctx: str) -> None:
        """Raise typed adapter errors for non-2xx responses."""
        if 200 <= resp.status_code < 300:
            return
        raise error_from_response(resp, ctx)

    @staticmethod
    def _json_any(resp: requests.Response, ctx: str) -> Any:
        try:
            return resp.json()
        except Exception:
            txt = getattr(resp, "text", "")[:400]
            raise ApiError(f"Invalid JSON response: {txt}", status=resp.status_code, context=ctx)

    @classmethod
    def _json_dict(cls, resp: requests.Response, ctx: str) -> Dict[str, Any]:
        payload = cls._json_any(resp, ctx)
        if not isinstance(payload, dict):
            raise ApiError("Invalid JSON response shape: expected object", payload=payload, context=ctx)
        return payload

    @classmethod
    def _data_dict(cls, resp: requests.Response, ctx: str) -> Dict[str, Any]:
        """Unwrap ``{"data": {...}}`` envelopes (bare objects are accepted too)."""
        payload = cls._json_dict(resp, ctx)
        data = payload.get("data", payload)
        if not isinstance(data, dict):
            raise ApiError("Invalid response: 'data' is not an object", payload=payload, context=ctx)
        return data

    @classmethod
    def _data_list(cls, resp: requests.Response, ctx: str) -> List[Dict[str, Any]]:
        """Unwrap ``{"data": [...]}``; non-object entries are dropped."""
        payload = cls._json_any(resp, ctx)
        data = payload.get("data") if isinstance(payload, dict) else payload
        if not isinstance(data, list):
            return []
        return [item for item in data if isinstance(item, dict)]


__all__ = ["RestAdapter", "normalize_api_base"]
