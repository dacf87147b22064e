from __future__ import annotations

from typing import Any, List, Optional


def as_int(value: Any, default: int = 0) -> int:
    """Coerce backend numbers (ints, numeric strings, floats) to int."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        try:
            return int(float(value))
        except (TypeError, ValueError):
            return default


def as_optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    coerced = as_int(value, default=0)
    return coerced or None


def as_float(value: Any, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def as_text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def as_flag(value: Any) -> bool:
    """
    Normalize a backend boolean column to a strict bool.

    MySQL-backed endpoints report flags as 0/1 or "0"/"1"; textual
    "false"/"no" are treated as False as well.
    """
    if isinstance(value, str):
        return value.strip().lower() not in {"", "0", "false", "no", "off", "null"}
    return bool(value)


def split_images(raw: Any) -> List[str]:
    """Return image references from a list or a comma separated string."""
    if isinstance(raw, (list, tuple)):
        return [str(item).strip() for item in raw if item and str(item).strip()]
    if isinstance(raw, str):
        return [part.strip() for part in raw.split(",") if part.strip()]
    return []


def first_image(raw: Any) -> str:
    images = split_images(raw)
    return images[0] if images else ""


__all__ = [
    "as_flag",
    "as_float",
    "as_int",
    "as_optional_int",
    "as_text",
    "first_image",
    "split_images",
]
