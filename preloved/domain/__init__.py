"""Domain package exports for value objects, ports and session state."""

from .entities import (
    CartItem,
    Category,
    Order,
    OrderDraft,
    Product,
    Review,
    Session,
    UserProfile,
)
from .events import EventChannel, Subscription
from .order_flow import available_actions, can_review
from .ports import UseCaseError
from .session_store import SessionStore

__all__ = [
    "CartItem",
    "Category",
    "EventChannel",
    "Order",
    "OrderDraft",
    "Product",
    "Review",
    "Session",
    "SessionStore",
    "Subscription",
    "UseCaseError",
    "UserProfile",
    "available_actions",
    "can_review",
]
