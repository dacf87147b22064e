from __future__ import annotations

import pytest

from preloved.domain.validation import (
    validate_email,
    validate_phone,
    validate_product_form,
    validate_registration,
)


@pytest.mark.parametrize(
    "phone,ok",
    [
        ("081234567890", True),
        ("+62812345678", True),
        ("81234567890", False),
        ("0812", False),
        ("0812-3456-7890", False),
    ],
)
def test_validate_phone(phone, ok) -> None:
    assert validate_phone(phone) is ok


def test_validate_email() -> None:
    assert validate_email("a@b.id")
    assert not validate_email("a@b")
    assert not validate_email("a b@c.id")


def test_product_form_reports_every_invalid_field() -> None:
    errors = validate_product_form({"name": " ", "price": "-5", "stock": "1.5"})

    assert errors == {
        "name": "Nama barang wajib diisi",
        "category_id": "Kategori wajib dipilih",
        "price": "Harga harus berupa angka positif",
        "images": "Foto barang wajib diunggah",
        "stock": "Stok harus bilangan bulat >= 0",
    }


def test_product_form_valid() -> None:
    form = {
        "name": "Sepatu",
        "category_id": 1,
        "price": "150000",
        "stock": "0",
        "images": [("a.jpg", b"x")],
    }
    assert validate_product_form(form) == {}


def test_registration_password_mismatch() -> None:
    errors = validate_registration("Budi", "b@x.id", "rahasia", "beda")
    assert errors == {"password": "Password tidak cocok"}
