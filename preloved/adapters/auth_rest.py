"""REST adapters for ``/auth`` and ``/users`` endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from preloved.adapters.api_errors import ApiError
from preloved.adapters.http_client import ApiSession
from preloved.adapters.rest_base import RestAdapter
from preloved.domain.entities import UserProfile
from preloved.domain.ports import AuthPort, UserId, UserPort


class AuthRestAdapter(RestAdapter, AuthPort):
    """Credential exchange; these calls never carry a bearer token."""

    def login(self, email: str, password: str) -> Tuple[str, UserProfile]:
        ctx = "login"
        resp = self.http.post(
            self._url("/auth/login"),
            json_body={"email": email, "password": password},
            auth=False,
        )
        self._ensure_ok(resp, ctx)
        payload = self._json_dict(resp, ctx)
        token = str(payload.get("token") or "").strip()
        if not token:
            raise ApiError("Token tidak tersedia", payload=payload, context=ctx)
        user_raw = payload.get("user")
        if not isinstance(user_raw, Mapping):
            raise ApiError("Login response missing user profile", payload=payload, context=ctx)
        return token, UserProfile.from_payload(user_raw)

    def register(
        self, name: str, email: str, password: str, phone: Optional[str] = None
    ) -> Dict[str, Any]:
        ctx = "register"
        body: Dict[str, Any] = {"name": name, "email": email, "password": password}
        if phone:
            body["phone"] = phone
        resp = self.http.post(self._url("/auth/register"), json_body=body, auth=False)
        self._ensure_ok(resp, ctx)
        try:
            return self._json_dict(resp, ctx)
        except ApiError:
            # Registration succeeded; an empty body is fine.
            return {}


class UserRestAdapter(RestAdapter, UserPort):
    def __init__(self, base_url: str, http: ApiSession) -> None:
        super().__init__(base_url, http)
        self._log = logging.getLogger(__name__)

    def get_profile(self) -> UserProfile:
        ctx = "profile[me]"
        resp = self.http.get(self._url("/users/profile/me"))
        self._ensure_ok(resp, ctx)
        return UserProfile.from_payload(self._data_dict(resp, ctx))

    def get_user(self, user_id: UserId) -> UserProfile:
        ctx = f"user[{user_id}]"
        resp = self.http.get(self._url(f"/users/{int(user_id)}"))
        self._ensure_ok(resp, ctx)
        return UserProfile.from_payload(self._data_dict(resp, ctx))

    def update_user(self, user_id: UserId, fields: Mapping[str, Any]) -> UserProfile:
        ctx = f"update_user[{user_id}]"
        resp = self.http.put(self._url(f"/users/{int(user_id)}"), json_body=dict(fields))
        self._ensure_ok(resp, ctx)
        return UserProfile.from_payload(self._data_dict(resp, ctx))

    def become_seller(self, user_id: UserId) -> None:
        ctx = f"become_seller[{user_id}]"
        resp = self.http.put(self._url(f"/users/{int(user_id)}/become-seller"))
        self._ensure_ok(resp, ctx)
        self._log.info("User %s upgraded to seller", user_id)


__all__ = ["AuthRestAdapter", "UserRestAdapter"]
