"""Client-observed order status machine.

The backend enforces transitions; the client uses these tables to decide which
action buttons to offer and never sends a backward transition.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Tuple

from preloved.domain.entities import Order

OrderAction = Literal["pay", "ship", "receive"]
ActorRole = Literal["buyer", "seller"]

STATUS_SEQUENCE: Tuple[str, ...] = ("pending", "confirmed", "shipped", "delivered")


@dataclass(frozen=True)
class Transition:
    action: OrderAction
    actor: ActorRole
    source: str
    target: str


TRANSITIONS: Dict[OrderAction, Transition] = {
    "pay": Transition("pay", "buyer", "pending", "confirmed"),
    "ship": Transition("ship", "seller", "confirmed", "shipped"),
    "receive": Transition("receive", "buyer", "shipped", "delivered"),
}


def step_index(status: str) -> int:
    """Position in the forward sequence, ``-1`` for cancelled/unknown."""
    try:
        return STATUS_SEQUENCE.index(str(status).lower())
    except ValueError:
        return -1


def is_forward(current: str, target: str) -> bool:
    current_idx = step_index(current)
    target_idx = step_index(target)
    if current_idx < 0 or target_idx < 0:
        return False
    return target_idx == current_idx + 1


def can_perform(order: Order, action: OrderAction) -> bool:
    transition = TRANSITIONS.get(action)
    if transition is None:
        return False
    return order.status == transition.source


def available_actions(order: Order, *, role: Optional[ActorRole] = None) -> List[OrderAction]:
    """Actions whose predecessor status matches the order's current status."""
    actions: List[OrderAction] = []
    for action, transition in TRANSITIONS.items():
        if role is not None and transition.actor != role:
            continue
        if order.status == transition.source:
            actions.append(action)
    return actions


def can_review(order: Order) -> bool:
    return order.status == "delivered"


def progress_fraction(status: str) -> float:
    """Share of the status track completed: pending is one step of four.

    Cancelled and unknown statuses show as the first step.
    """
    idx = max(step_index(status), 0)
    return (idx + 1) / len(STATUS_SEQUENCE)


__all__ = [
    "ActorRole",
    "OrderAction",
    "STATUS_SEQUENCE",
    "TRANSITIONS",
    "Transition",
    "available_actions",
    "can_perform",
    "can_review",
    "is_forward",
    "progress_fraction",
    "step_index",
]
