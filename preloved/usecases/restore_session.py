"""Startup restoration of the authenticated identity.

Dependencies:
    - ``SessionStore`` for the in-memory and persisted session.
    - ``UserPort`` to hydrate the profile when no cached copy exists.
    - Optional ``SessionProviderPort`` for an externally persisted session.

Call context:
    - ``AppController.start()`` runs this once, before any dependent read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from preloved.domain.entities import Session
from preloved.domain.ports import SessionProviderPort, UserPort
from preloved.domain.session_store import SessionStore


@dataclass
class RestoreSession:
    """Rebuild the session from provider, local token and cached profile."""

    store: SessionStore
    users: UserPort
    provider: Optional[SessionProviderPort] = None
    _log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__), repr=False)

    def __call__(self) -> Session:
        with self.store.exclusive():
            token = self._provider_token() or self.store.persisted_token()
            if not token:
                self._log.debug("No stored session to restore.")
                return self.store.session

            self.store.set_token(token)

            cached = self.store.cached_user()
            if cached is not None:
                self.store.set_user(cached)
                return self.store.session

            try:
                profile = self.users.get_profile()
            except Exception as exc:
                # Token-only session; the next protected call surfaces 401.
                self._log.warning("Profile hydration failed: %s", exc)
                return self.store.session
            self.store.set_user(profile)
            return self.store.session

    def _provider_token(self) -> Optional[str]:
        if self.provider is None:
            return None
        try:
            return self.provider.get_access_token()
        except Exception as exc:
            self._log.warning("Session provider unavailable: %s", exc)
            return None


__all__ = ["RestoreSession"]
