"""Client-side form rules; failures block submission before any network call."""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Sequence

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_RE = re.compile(r"^(\+62|0)[0-9]{9,12}$")

MAX_UPLOAD_IMAGES = 5


def validate_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(str(email or "")))


def validate_phone(phone: str) -> bool:
    return bool(_PHONE_RE.match(str(phone or "")))


def _is_number(value: Any) -> bool:
    try:
        float(str(value))
    except (TypeError, ValueError):
        return False
    return True


def validate_product_form(form: Mapping[str, Any], *, require_images: bool = True) -> Dict[str, str]:
    """Return ``{field: message}`` for every invalid field (empty when valid)."""
    errors: Dict[str, str] = {}
    if not str(form.get("name") or "").strip():
        errors["name"] = "Nama barang wajib diisi"
    if not form.get("category_id"):
        errors["category_id"] = "Kategori wajib dipilih"
    price = form.get("price")
    if price in (None, "") or not _is_number(price) or float(str(price)) <= 0:
        errors["price"] = "Harga harus berupa angka positif"
    images: Sequence[Any] = form.get("images") or ()
    if require_images and not images:
        errors["images"] = "Foto barang wajib diunggah"
    stock = form.get("stock")
    if stock in (None, "") or not _is_number(stock):
        errors["stock"] = "Stok harus bilangan bulat >= 0"
    else:
        stock_value = float(str(stock))
        if stock_value < 0 or not stock_value.is_integer():
            errors["stock"] = "Stok harus bilangan bulat >= 0"
    return errors


def validate_registration(
    name: str,
    email: str,
    password: str,
    confirm_password: str | None = None,
    phone: str | None = None,
) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if not str(name or "").strip():
        errors["name"] = "Nama wajib diisi"
    if not validate_email(email):
        errors["email"] = "Format email tidak valid"
    if not password:
        errors["password"] = "Password wajib diisi"
    elif confirm_password is not None and confirm_password != password:
        errors["password"] = "Password tidak cocok"
    if phone and not validate_phone(phone):
        errors["phone"] = "Format nomor telepon tidak valid"
    return errors


__all__ = [
    "MAX_UPLOAD_IMAGES",
    "validate_email",
    "validate_phone",
    "validate_product_form",
    "validate_registration",
]
