"""In-process publish/subscribe channel for cross-view notifications.

Topics used by the storefront:
    - ``cart-changed``: cart contents were mutated on the server.
    - ``favorites-changed``: the local favorites list changed.
    - ``session-changed``: login, logout, profile edit, or seller upgrade.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

CART_CHANGED = "cart-changed"
FAVORITES_CHANGED = "favorites-changed"
SESSION_CHANGED = "session-changed"

Listener = Callable[[Mapping[str, Any]], None]


@dataclass
class Subscription:
    """Handle returned by :meth:`EventChannel.subscribe`."""

    channel: "EventChannel"
    topic: str
    listener: Listener
    active: bool = field(default=True)

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.channel._remove(self)
        self.active = False

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.unsubscribe()


class EventChannel:
    """Synchronous topic fan-out; a failing listener never blocks the others."""

    def __init__(self) -> None:
        self._log = logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._listeners: Dict[str, List[Subscription]] = {}

    def subscribe(self, topic: str, listener: Listener) -> Subscription:
        sub = Subscription(channel=self, topic=topic, listener=listener)
        with self._lock:
            self._listeners.setdefault(topic, []).append(sub)
        return sub

    def publish(self, topic: str, payload: Optional[Mapping[str, Any]] = None) -> int:
        """Deliver ``payload`` to current subscribers, return delivery count."""
        with self._lock:
            targets = list(self._listeners.get(topic, ()))
        data: Mapping[str, Any] = dict(payload or {})
        delivered = 0
        for sub in targets:
            try:
                sub.listener(data)
            except Exception:
                self._log.exception("Listener for %s failed", topic)
                continue
            delivered += 1
        return delivered

    def subscriber_count(self, topic: str) -> int:
        with self._lock:
            return len(self._listeners.get(topic, ()))

    def _remove(self, sub: Subscription) -> None:
        with self._lock:
            subs = self._listeners.get(sub.topic)
            if not subs:
                return
            try:
                subs.remove(sub)
            except ValueError:
                return
            if not subs:
                del self._listeners[sub.topic]


__all__ = [
    "CART_CHANGED",
    "EventChannel",
    "FAVORITES_CHANGED",
    "Listener",
    "SESSION_CHANGED",
    "Subscription",
]
