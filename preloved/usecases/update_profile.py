"""Profile mutations for the signed-in user.

The backend record is authoritative: every successful call replaces the
in-memory and persisted profile with what the server reports, except
``BecomeSeller`` which only flips the flag because the endpoint returns no
profile.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from preloved.domain.entities import UserProfile
from preloved.domain.ports import UseCaseError, UserPort
from preloved.domain.session_store import SessionStore
from preloved.domain.validation import validate_email, validate_phone
from preloved.usecases.error_mapping import map_api_error

log = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "email", "phone", "avatar", "address")


@dataclass
class BecomeSeller:
    users: UserPort
    store: SessionStore

    def __call__(self) -> Optional[UserProfile]:
        user = self.store.user
        if user is None:
            log.debug("become_seller ignored: no current user")
            return None
        try:
            self.users.become_seller(user.id)
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="BECOME_SELLER_FAILED",
                default_message="Gagal menjadi penjual",
            ) from exc
        upgraded = user.as_seller()
        self.store.set_user(upgraded)
        return upgraded


@dataclass
class UpdateProfile:
    users: UserPort
    store: SessionStore

    def __call__(self, fields: Mapping[str, Any]) -> UserProfile:
        user = self.store.user
        if user is None:
            raise UseCaseError("NOT_AUTHENTICATED", "Silakan login terlebih dahulu")
        changes = {
            k: v.strip() if isinstance(v, str) else v
            for k, v in fields.items()
            if k in EDITABLE_FIELDS
        }
        if not changes:
            raise UseCaseError("VALIDATION_PROFILE", "Tidak ada perubahan")
        if "email" in changes and not validate_email(changes["email"]):
            raise UseCaseError("VALIDATION_PROFILE", "Format email tidak valid")
        if changes.get("phone") and not validate_phone(changes["phone"]):
            raise UseCaseError("VALIDATION_PROFILE", "Format nomor telepon tidak valid")
        try:
            canonical = self.users.update_user(user.id, changes)
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="UPDATE_PROFILE_FAILED",
                default_message="Gagal memperbarui profil",
            ) from exc
        self.store.set_user(canonical)
        return canonical


@dataclass
class RefreshProfile:
    """Re-read ``/users/profile/me`` and overwrite the cached copy."""

    users: UserPort
    store: SessionStore

    def __call__(self) -> UserProfile:
        if not self.store.token:
            raise UseCaseError("NOT_AUTHENTICATED", "Silakan login terlebih dahulu")
        try:
            profile = self.users.get_profile()
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="PROFILE_FAILED",
                default_message="Gagal memuat profil",
            ) from exc
        self.store.set_user(profile)
        return profile


__all__ = ["BecomeSeller", "EDITABLE_FIELDS", "RefreshProfile", "UpdateProfile"]
