from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from preloved.domain.ports import SessionProviderPort
from preloved.domain.session_store import SessionStore

log = logging.getLogger(__name__)

LOGIN_ROUTE = "/login"

Navigate = Callable[[str], None]


@dataclass
class Logout:
    """Forget the session locally; the provider sign-out is best-effort."""

    store: SessionStore
    provider: Optional[SessionProviderPort] = None
    navigate: Optional[Navigate] = None

    def __call__(self, *, redirect: bool = False) -> None:
        with self.store.exclusive():
            if self.provider is not None:
                try:
                    self.provider.sign_out()
                except Exception as exc:
                    log.warning("Provider sign-out failed: %s", exc)
            self.store.clear()
        if redirect and self.navigate is not None:
            self.navigate(LOGIN_ROUTE)


__all__ = ["LOGIN_ROUTE", "Logout", "Navigate"]
