"""External auth provider adapter (GoTrue-compatible REST).

The storefront can sit behind a hosted auth/database service that keeps its
own persisted session next to the app's local storage. This adapter reads that
session, refreshes an expired access token once, and signs out remotely.

Dependencies:
    - ``requests`` for the provider's ``/auth/v1`` endpoints.
    - ``KeyValueStorePort`` for the persisted provider session document.

Call context:
    - ``RestoreSession`` asks for the access token at startup.
    - ``Logout`` calls ``sign_out`` best-effort.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Mapping, Optional

import requests

from preloved.adapters.api_errors import ApiError, ApiTimeoutError, error_from_response
from preloved.adapters.http_client import HttpConfig
from preloved.domain.ports import KeyValueStorePort, SessionProviderPort

PROVIDER_SESSION_KEY = "provider_session"


class SessionProviderRest(SessionProviderPort):
    """Persisted-session reader with token refresh and remote sign-out."""

    def __init__(
        self,
        auth_url: str,
        anon_key: str,
        storage: KeyValueStorePort,
        *,
        cfg: Optional[HttpConfig] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not auth_url or not anon_key:
            raise ValueError("SessionProviderRest requires auth_url and anon_key")
        self._log = logging.getLogger(__name__)
        self.auth_url = auth_url.rstrip("/")
        self.anon_key = anon_key
        self.storage = storage
        self.cfg = cfg or HttpConfig()
        self.session = requests.Session()
        self._clock = clock

    # ---- SessionProviderPort ----
    def get_access_token(self) -> Optional[str]:
        stored = self._load()
        if not stored:
            return None
        token = str(stored.get("access_token") or "").strip()
        if not token:
            return None
        if not self._expired(stored):
            return token
        refresh_token = str(stored.get("refresh_token") or "").strip()
        if not refresh_token:
            self._log.info("Provider session expired without refresh token; discarding it.")
            self.storage.delete(PROVIDER_SESSION_KEY)
            return None
        refreshed = self._refresh(refresh_token)
        self.save_session(refreshed)
        return str(refreshed.get("access_token") or "") or None

    def sign_out(self) -> None:
        stored = self._load() or {}
        token = str(stored.get("access_token") or "").strip()
        # The local copy goes away even when the remote call fails.
        self.storage.delete(PROVIDER_SESSION_KEY)
        if not token:
            return
        url = f"{self.auth_url}/auth/v1/logout"
        try:
            resp = self.session.post(
                url,
                headers=self._headers(token),
                timeout=self.cfg.request_timeout_s,
            )
        except (requests.Timeout, requests.ConnectionError) as exc:
            raise ApiTimeoutError(f"Timeout contacting {url}", context="provider_logout") from exc
        if resp.status_code >= 400:
            raise error_from_response(resp, "provider_logout")

    # ---- helpers ----
    def save_session(self, payload: Mapping[str, Any]) -> None:
        """Persist a provider session document (``access_token`` et al.)."""
        data: Dict[str, Any] = dict(payload)
        if "expires_at" not in data and data.get("expires_in"):
            data["expires_at"] = int(self._clock()) + int(data["expires_in"])
        self.storage.set_json(PROVIDER_SESSION_KEY, data)

    def _load(self) -> Optional[Dict[str, Any]]:
        try:
            raw = self.storage.get_json(PROVIDER_SESSION_KEY)
        except ValueError:
            self._log.warning("Provider session document is corrupt; ignoring it.")
            return None
        return dict(raw) if isinstance(raw, Mapping) else None

    def _expired(self, stored: Mapping[str, Any]) -> bool:
        expires_at = stored.get("expires_at")
        if expires_at is None:
            return False
        try:
            return float(expires_at) <= self._clock()
        except (TypeError, ValueError):
            return True

    def _refresh(self, refresh_token: str) -> Dict[str, Any]:
        url = f"{self.auth_url}/auth/v1/token"
        ctx = "provider_refresh"
        try:
            resp = self.session.post(
                url,
                params={"grant_type": "refresh_token"},
                json={"refresh_token": refresh_token},
                headers=self._headers(None),
                timeout=self.cfg.request_timeout_s,
            )
        except (requests.Timeout, requests.ConnectionError) as exc:
            raise ApiTimeoutError(f"Timeout contacting {url}", context=ctx) from exc
        if resp.status_code >= 400:
            raise error_from_response(resp, ctx)
        try:
            data = resp.json()
        except ValueError as exc:
            raise ApiError("Invalid JSON from auth provider", context=ctx) from exc
        if not isinstance(data, dict) or not data.get("access_token"):
            raise ApiError("Auth provider returned no access token", payload=data, context=ctx)
        return data

    def _headers(self, token: Optional[str]) -> Dict[str, str]:
        headers = {"apikey": self.anon_key, "Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers


__all__ = ["PROVIDER_SESSION_KEY", "SessionProviderRest"]
