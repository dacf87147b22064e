from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from preloved.domain.entities import Session
from preloved.domain.ports import AuthPort, UseCaseError
from preloved.domain.session_store import SessionStore
from preloved.domain.validation import validate_registration
from preloved.usecases.error_mapping import map_api_error

log = logging.getLogger(__name__)


@dataclass
class Login:
    """Exchange credentials for a token and replace the current session."""

    auth: AuthPort
    store: SessionStore

    def __call__(self, email: str, password: str) -> Session:
        email = (email or "").strip()
        if not email or not password:
            raise UseCaseError("VALIDATION_LOGIN", "Email dan password wajib diisi")
        with self.store.exclusive():
            try:
                token, user = self.auth.login(email, password)
            except Exception as exc:
                raise map_api_error(
                    exc, default_code="LOGIN_FAILED", default_message="Login gagal"
                ) from exc
            self.store.establish(token, user)
            log.info("Signed in as user %s", user.id)
            return self.store.session


@dataclass
class Register:
    """Create an account, then sign in with the same credentials."""

    auth: AuthPort
    login: Login

    def __call__(
        self,
        name: str,
        email: str,
        password: str,
        *,
        confirm_password: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Session:
        errors = validate_registration(name, email, password, confirm_password, phone)
        if errors:
            first = next(iter(errors.values()))
            raise UseCaseError("VALIDATION_REGISTER", first, meta={"errors": errors})
        try:
            self.auth.register(name.strip(), email.strip(), password, phone or None)
        except Exception as exc:
            raise map_api_error(
                exc, default_code="REGISTER_FAILED", default_message="Registrasi gagal"
            ) from exc
        return self.login(email, password)


__all__ = ["Login", "Register"]
