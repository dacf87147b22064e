from __future__ import annotations

from preloved.adapters.api_errors import ApiClientError, ApiError, ApiServerError, ApiTimeoutError
from preloved.domain.ports import UseCaseError
from preloved.usecases.error_mapping import failure_message, map_api_error


def test_backend_message_wins_over_default() -> None:
    exc = ApiClientError("login: x (HTTP 400)", status=400, payload={"message": "Akun diblokir"})
    err = map_api_error(exc, default_code="LOGIN_FAILED", default_message="Login gagal")
    assert err.code == "LOGIN_FAILED"
    assert err.message == "Akun diblokir"


def test_default_message_when_backend_silent() -> None:
    exc = ApiClientError("x", status=400, payload="<html>")
    err = map_api_error(exc, default_code="LOGIN_FAILED", default_message="Login gagal")
    assert err.message == "Login gagal"


def test_auth_failures_have_stable_code() -> None:
    exc = ApiClientError("x", status=401, payload={"message": "Token tidak valid"})
    err = map_api_error(exc, default_code="CART_FAILED")
    assert err.code == "AUTH_FAILED"
    assert err.meta["status"] == 401


def test_timeout_and_server_errors() -> None:
    assert map_api_error(ApiTimeoutError("slow"), default_code="X").code == "REQUEST_TIMEOUT"
    err = map_api_error(ApiServerError("boom", status=503), default_code="X", default_message="Gagal")
    assert err.code == "SERVER_ERROR"
    assert err.message == "Gagal"


def test_use_case_errors_pass_through() -> None:
    original = UseCaseError("VALIDATION_CART", "Keranjang kosong")
    assert map_api_error(original, default_code="X") is original


def test_unprocessable_entity_appends_hint() -> None:
    exc = ApiClientError("x", status=422, hint=None, payload={"errors": ["price must be > 0"]})
    err = map_api_error(exc, default_code="PUBLISH_FAILED", default_message="Gagal menambahkan produk")
    assert err.message == "Gagal menambahkan produk: price must be > 0"


def test_failure_message_fallback() -> None:
    assert failure_message(ApiError("x", payload={"message": "Out of stock"}), "Item 1 gagal") == "Out of stock"
    assert failure_message(RuntimeError("boom"), "Item 2 gagal") == "Item 2 gagal"
