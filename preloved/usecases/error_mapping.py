"""Translate adapter errors into user-facing UseCaseError instances."""

from __future__ import annotations

from typing import Optional

from preloved.adapters.api_errors import (
    ApiClientError,
    ApiError,
    ApiServerError,
    ApiTimeoutError,
    error_hint,
)
from preloved.domain.ports import UseCaseError


def map_api_error(
    exc: Exception,
    *,
    default_code: str,
    default_message: Optional[str] = None,
) -> UseCaseError:
    """Map adapter exceptions to stable UseCaseError codes.

    The backend ``message`` field always wins as the user-facing text; the
    ``default_message`` is used when the backend sent none.

    Args:
        exc: Exception raised by an adapter or a nested use case.
        default_code: Code for failures that carry no more specific meaning.
        default_message: Fallback text shown to the user.

    Returns:
        UseCaseError: Error with a stable ``code`` and a presentable message.
    """
    if isinstance(exc, UseCaseError):
        return exc
    fallback = default_message or "Terjadi kesalahan"
    if isinstance(exc, ApiTimeoutError):
        return UseCaseError(
            "REQUEST_TIMEOUT",
            "Permintaan melebihi batas waktu. Periksa koneksi.",
        )
    if isinstance(exc, ApiClientError):
        status = exc.status or 0
        message = exc.backend_message or fallback
        meta = {"status": status}
        if status in (401, 403):
            return UseCaseError("AUTH_FAILED", message, meta=meta)
        if status == 404:
            return UseCaseError("NOT_FOUND", message, meta=meta)
        if status == 409:
            return UseCaseError("CONFLICT", message, meta=meta)
        if status == 422 and not exc.backend_message:
            hint = exc.hint or error_hint(exc.payload)
            message = _compose_error_message(fallback, hint)
        return UseCaseError(default_code, message, meta=meta)
    if isinstance(exc, ApiServerError):
        return UseCaseError(
            "SERVER_ERROR",
            exc.backend_message or fallback,
            meta={"status": exc.status},
        )
    if isinstance(exc, ApiError):
        return UseCaseError(default_code, exc.backend_message or str(exc) or fallback)

    return UseCaseError(default_code, default_message or str(exc) or fallback)


def failure_message(exc: BaseException, fallback: str) -> str:
    """Backend ``message`` of an adapter error, else ``fallback``."""
    if isinstance(exc, UseCaseError):
        return exc.message or fallback
    if isinstance(exc, ApiError):
        return exc.backend_message or fallback
    return fallback


def _compose_error_message(base: str, hint: Optional[str]) -> str:
    hint_text = (hint or "").strip()
    if hint_text:
        return f"{base}: {hint_text}"
    return base


__all__ = ["failure_message", "map_api_error"]
