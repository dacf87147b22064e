from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from preloved.domain.ports import UseCaseError
from preloved.usecases.login import Login, Register

HOME_ROUTE = "/"


@dataclass
class AuthVM:
    """Login and registration forms.

    ``submitting`` guards against double submission; ``field_errors`` carries
    per-field validation messages for the register form.
    """

    login: Login
    register: Register
    on_navigate: Optional[Callable[[str], None]] = None

    email: str = ""
    password: str = ""
    name: str = ""
    phone: str = ""
    confirm_password: str = ""
    error: str = ""
    field_errors: Dict[str, str] = field(default_factory=dict)
    submitting: bool = False

    def submit_login(self) -> bool:
        return self._run(lambda: self.login(self.email, self.password))

    def submit_register(self) -> bool:
        return self._run(
            lambda: self.register(
                self.name,
                self.email,
                self.password,
                confirm_password=self.confirm_password,
                phone=self.phone or None,
            )
        )

    def _run(self, action: Callable[[], object]) -> bool:
        if self.submitting:
            return False
        self.submitting = True
        self.error = ""
        self.field_errors = {}
        try:
            action()
        except UseCaseError as exc:
            self.error = exc.message
            errors = exc.meta.get("errors")
            if isinstance(errors, dict):
                self.field_errors = dict(errors)
            return False
        finally:
            self.submitting = False
        self.password = ""
        self.confirm_password = ""
        if self.on_navigate:
            self.on_navigate(HOME_ROUTE)
        return True


__all__ = ["AuthVM", "HOME_ROUTE"]
