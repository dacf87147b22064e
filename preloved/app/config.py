"""Runtime configuration for the storefront client.

Values come from defaults, then ``PRELOVED_*`` environment variables, then an
optional flat mapping (settings file or CLI flags) applied via ``apply_dict``.
"""

from __future__ import annotations

import os
import re
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Mapping, Optional

DEFAULT_API_URL = "http://localhost:5000"

_ENV_KEYS = {
    "api_url": "PRELOVED_API_URL",
    "auth_url": "PRELOVED_AUTH_URL",
    "auth_anon_key": "PRELOVED_AUTH_ANON_KEY",
    "data_dir": "PRELOVED_DATA_DIR",
    "request_timeout_s": "PRELOVED_TIMEOUT_S",
}


def _default_data_dir() -> str:
    return os.path.join(os.path.expanduser("~"), ".preloved")


@dataclass(frozen=True)
class AppConfig:
    """Typed settings shared by the composition root and the CLI."""

    api_url: str = DEFAULT_API_URL
    auth_url: str = ""
    auth_anon_key: str = ""
    data_dir: str = ""
    request_timeout_s: float = 10
    upload_timeout_s: float = 60
    max_workers: int = 8

    def __post_init__(self) -> None:
        if not self.data_dir:
            object.__setattr__(self, "data_dir", _default_data_dir())

    @property
    def api_base_url(self) -> str:
        """Backend base including the ``/api`` prefix."""
        base = self.api_url.strip().rstrip("/")
        return base if base.endswith("/api") else f"{base}/api"

    @property
    def asset_base_url(self) -> str:
        """Origin serving ``/uploads``; the API URL without ``/api``."""
        return re.sub(r"/api$", "", self.api_url.strip().rstrip("/"))

    @property
    def provider_enabled(self) -> bool:
        return bool(self.auth_url and self.auth_anon_key)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        env = os.environ if environ is None else environ
        overrides = {
            field_name: env[var]
            for field_name, var in _ENV_KEYS.items()
            if env.get(var, "").strip()
        }
        return cls().apply_dict(overrides)

    def apply_dict(self, payload: Mapping[str, Any]) -> "AppConfig":
        """Return a copy with flat keys from ``payload`` applied.

        Raises:
            ValueError: Unknown key or a value that cannot be coerced.
        """
        if not isinstance(payload, Mapping):
            raise ValueError("Config payload must be a mapping of flat keys.")
        known = {f.name for f in fields(self)}
        changes = {}
        for key, raw in payload.items():
            if raw is None:
                continue
            if key not in known:
                raise ValueError(f"Unknown config key: {key}")
            changes[key] = self._coerce(key, raw)
        return replace(self, **changes)

    def to_dict(self) -> dict:
        snapshot = asdict(self)
        snapshot.pop("auth_anon_key", None)
        return snapshot

    def image_url(self, path: Optional[str]) -> str:
        """Absolute URL for an uploaded image path.

        Legacy ``backend/uploads/...`` paths are normalized; anything outside
        ``/uploads/`` is returned as a root-relative path.
        """
        if not path:
            return ""
        if re.match(r"^https?://", path, re.IGNORECASE):
            return path
        cleaned = path.strip()
        cleaned = re.sub(r"^/?backend/uploads/", "/uploads/", cleaned)
        if not cleaned.startswith("/"):
            cleaned = "/" + cleaned
        if not cleaned.startswith("/uploads/"):
            return cleaned
        return self.asset_base_url + cleaned

    @staticmethod
    def _coerce(key: str, raw: Any) -> Any:
        if key in ("request_timeout_s", "upload_timeout_s"):
            try:
                value = float(raw)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"{key} must be a number") from exc
            if value <= 0:
                raise ValueError(f"{key} must be positive")
            return value
        if key == "max_workers":
            try:
                value = int(raw)
            except (TypeError, ValueError) as exc:
                raise ValueError("max_workers must be an integer") from exc
            if value < 1:
                raise ValueError("max_workers must be >= 1")
            return value
        if key == "api_url":
            text = str(raw).strip()
            if not re.match(r"^https?://", text, re.IGNORECASE):
                raise ValueError("api_url must start with http:// or https://")
            return text
        return str(raw).strip()


__all__ = ["AppConfig", "DEFAULT_API_URL"]
