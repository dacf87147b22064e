from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from preloved.domain.entities import Session, UserProfile
from preloved.domain.events import SESSION_CHANGED, EventChannel
from preloved.domain.ports import KeyValueStorePort

TOKEN_KEY = "token"
USER_KEY = "user"
FAVORITES_KEY = "favorites"


class SessionStore:
    """
    Process-wide owner of the authenticated identity.

    One instance is created by the composition root and passed explicitly to
    use cases and to the HTTP transport (as its ``TokenSource``). Every write
    goes to memory first and is then mirrored to the local key/value store,
    always overwriting the persisted copy.

    ``exclusive()`` serializes multi-step session operations (startup restore,
    login, logout) so they never interleave. Reads of the token stay cheap and
    reflect the latest committed value at the moment they are made.
    """

    def __init__(self, storage: KeyValueStorePort, events: Optional[EventChannel] = None) -> None:
        self._log = logging.getLogger(__name__)
        self._storage = storage
        self._events = events
        self._state_lock = threading.Lock()
        self._op_lock = threading.RLock()
        self._session = Session()

    # ---- reads ----
    @property
    def session(self) -> Session:
        with self._state_lock:
            return self._session

    @property
    def user(self) -> Optional[UserProfile]:
        return self.session.user

    @property
    def token(self) -> Optional[str]:
        return self.session.token

    def current_token(self) -> Optional[str]:
        """TokenSource hook read by the transport when building headers."""
        return self.token

    @contextmanager
    def exclusive(self) -> Iterator["SessionStore"]:
        with self._op_lock:
            yield self

    # ---- persisted copies ----
    def persisted_token(self) -> Optional[str]:
        token = self._storage.get_text(TOKEN_KEY)
        return token or None

    def cached_user(self) -> Optional[UserProfile]:
        """Profile persisted by a previous run, ``None`` when absent or corrupt."""
        try:
            raw = self._storage.get_json(USER_KEY)
        except ValueError:
            self._log.warning("Cached user profile is not valid JSON; ignoring it.")
            return None
        if not raw:
            return None
        try:
            return UserProfile.from_payload(raw)
        except ValueError as exc:
            self._log.warning("Cached user profile rejected: %s", exc)
            return None

    # ---- writes ----
    def set_token(self, token: str) -> None:
        with self._state_lock:
            self._session = Session(token=token, user=self._session.user)
        self._storage.set_text(TOKEN_KEY, token)
        self._notify("token")

    def set_user(self, user: UserProfile) -> None:
        with self._state_lock:
            self._session = Session(token=self._session.token, user=user)
        self._storage.set_json(USER_KEY, user.to_payload())
        self._notify("user")

    def establish(self, token: str, user: UserProfile) -> None:
        """Replace the whole session (login); overwrites any prior identity."""
        with self._state_lock:
            self._session = Session(token=token, user=user)
        self._storage.set_text(TOKEN_KEY, token)
        self._storage.set_json(USER_KEY, user.to_payload())
        self._notify("login")

    def clear(self) -> None:
        with self._state_lock:
            self._session = Session()
        self._storage.delete(TOKEN_KEY)
        self._storage.delete(USER_KEY)
        self._notify("logout")

    def _notify(self, reason: str) -> None:
        if self._events is None:
            return
        snapshot = self.session
        self._events.publish(
            SESSION_CHANGED,
            {
                "reason": reason,
                "authenticated": snapshot.is_authenticated,
                "user_id": snapshot.user.id if snapshot.user else None,
            },
        )


__all__ = ["FAVORITES_KEY", "SessionStore", "TOKEN_KEY", "USER_KEY"]
