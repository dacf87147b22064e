"""Display formatting helpers for view models.

Call context:
    ``OrdersVM``, ``OrderDetailVM`` and ``CheckoutVM`` use these to render
    prices, dates and status tokens the way the storefront shows them.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Optional

_MONTHS_ID = (
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
)

_SPACE_DATETIME = re.compile(r"^\d{4}-\d{2}-\d{2} ")


def format_price(amount: Any) -> str:
    """Rupiah with dot thousands separators and no decimals: ``Rp 150.000``."""
    try:
        value = round(float(amount))
    except (TypeError, ValueError):
        value = 0
    sign = "-" if value < 0 else ""
    grouped = f"{abs(value):,}".replace(",", ".")
    return f"{sign}Rp {grouped}"


def format_date(raw: Optional[str]) -> str:
    """``2024-03-05 10:00:00`` -> ``5 Maret 2024``; ``-`` when unusable."""
    if not raw:
        return "-"
    text = str(raw).strip()
    if not text or text.startswith("0000-00-00"):
        return "-"
    if _SPACE_DATETIME.match(text):
        text = text.replace(" ", "T", 1)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return "-"
    return f"{parsed.day} {_MONTHS_ID[parsed.month - 1]} {parsed.year}"


def status_key(status: Optional[str]) -> str:
    return (status or "").strip().lower()


def status_label(status: Optional[str]) -> str:
    key = status_key(status)
    mapping = {
        "pending": "Menunggu Pembayaran",
        "confirmed": "Terbayar",
        "shipped": "Dikirim",
        "delivered": "Selesai",
        "cancelled": "Dibatalkan",
    }
    if key in mapping:
        return mapping[key]
    return mapping["pending"] if not key else key.replace("_", " ").title()


def condition_label(condition: Optional[str]) -> str:
    mapping = {
        "like_new": "Seperti Baru",
        "good": "Baik",
        "fair": "Cukup",
        "poor": "Rusak",
    }
    key = condition or ""
    return mapping.get(key, key)


def payment_label(method: Optional[str]) -> str:
    mapping = {"transfer": "Transfer Bank", "cod": "COD", "ewallet": "E-Wallet"}
    key = method or ""
    return mapping.get(key, key)


__all__ = [
    "condition_label",
    "format_date",
    "format_price",
    "payment_label",
    "status_key",
    "status_label",
]
