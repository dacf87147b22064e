"""Typed failures raised by the marketplace and auth-provider adapters.

The storefront backend answers errors with small JSON bodies:
``{"message": "..."}`` for business rejections, ``{"errors": [{"msg": ...}]}``
from request validation and occasionally ``{"error": "..."}`` from
middleware. Use cases only ever look at ``status``, ``backend_message`` and
``hint``; the raw body stays available as ``payload`` for logging.
"""

from __future__ import annotations

from typing import Any, List, Optional

_HINT_LIMIT = 200
_BODY_SNIPPET = 400


class ApiError(RuntimeError):
    """Base class for REST adapter failures."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.code = code
        self.hint = hint
        self.payload = payload
        self.context = context

    @property
    def backend_message(self) -> Optional[str]:
        """The ``message`` field of the error body, when the backend sent one."""
        return backend_message(self.payload)


class ApiClientError(ApiError):
    """HTTP 4xx: the request was rejected (validation, auth, stock, state)."""

    def __init__(self, message: str, *, status: int, **kwargs: Any) -> None:
        super().__init__(message, status=status, **kwargs)


class ApiServerError(ApiError):
    """HTTP 5xx from the marketplace API."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, status=status, payload=payload, context=context)


class ApiTimeoutError(ApiError):
    """Timeout or connectivity failure; the request may not have arrived."""

    def __init__(self, message: str, *, context: Optional[str] = None) -> None:
        super().__init__(message, context=context)


def error_from_response(resp: Any, ctx: str) -> ApiError:
    """Build the typed error for a non-2xx response."""
    status = int(resp.status_code)
    payload = read_error_body(resp)
    hint = error_hint(payload)
    message = f"{ctx}: {hint} (HTTP {status})" if hint else f"{ctx}: HTTP {status}"
    if 400 <= status < 500:
        return ApiClientError(
            message,
            status=status,
            code=error_code(payload),
            hint=hint,
            payload=payload,
            context=ctx,
        )
    if status >= 500:
        return ApiServerError(message, status=status, payload=payload, context=ctx)
    return ApiError(message, status=status, payload=payload, context=ctx)


def read_error_body(resp: Any) -> Any:
    """Decoded JSON body, else a text snippet, else ``None``; never raises."""
    try:
        return resp.json()
    except Exception:
        text = str(getattr(resp, "text", "") or "").strip()
        return text[:_BODY_SNIPPET] or None


def backend_message(payload: Any) -> Optional[str]:
    if isinstance(payload, dict):
        value = payload.get("message")
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def error_code(payload: Any) -> Optional[str]:
    """Machine-readable code (``code`` or a token-like ``error``)."""
    if not isinstance(payload, dict):
        return None
    code = payload.get("code")
    if code is not None and not isinstance(code, bool):
        return str(code)
    error = payload.get("error")
    if isinstance(error, str) and error and " " not in error:
        return error
    return None


def error_hint(payload: Any) -> Optional[str]:
    """Best human-readable explanation found in an error body."""
    message = backend_message(payload)
    if message:
        return message[:_HINT_LIMIT]
    if isinstance(payload, dict):
        validation = _validation_messages(payload.get("errors"))
        if validation:
            return "; ".join(validation)[:_HINT_LIMIT]
        for key in ("error", "detail", "hint"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()[:_HINT_LIMIT]
        return None
    if isinstance(payload, list):
        validation = _validation_messages(payload)
        return "; ".join(validation)[:_HINT_LIMIT] if validation else None
    if isinstance(payload, str) and payload.strip():
        return payload.strip()[:_HINT_LIMIT]
    return None


def _validation_messages(raw: Any) -> List[str]:
    """First three entries of an ``errors`` list (strings or ``{msg}``)."""
    if isinstance(raw, dict):
        raw = [f"{key}: {value}" for key, value in raw.items()]
    if not isinstance(raw, list):
        return []
    messages: List[str] = []
    for item in raw:
        if isinstance(item, dict):
            item = item.get("msg") or item.get("message")
        if isinstance(item, str) and item.strip():
            messages.append(item.strip())
        if len(messages) == 3:
            break
    return messages


__all__ = [
    "ApiClientError",
    "ApiError",
    "ApiServerError",
    "ApiTimeoutError",
    "backend_message",
    "error_code",
    "error_from_response",
    "error_hint",
    "read_error_body",
]
