"""Forward order transitions (pay, ship, receive)."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from preloved.domain.entities import ORDER_STATUSES, Order
from preloved.domain.order_flow import TRANSITIONS, OrderAction, can_perform
from preloved.domain.ports import OrderId, OrderPort, UseCaseError
from preloved.usecases.error_mapping import map_api_error

log = logging.getLogger(__name__)


@dataclass
class SetOrderStatus:
    """Raw ``PUT /orders/{id}/status``; the backend validates the move."""

    orders: OrderPort

    def __call__(self, order_id: OrderId, status: str) -> None:
        if status not in ORDER_STATUSES:
            raise UseCaseError("VALIDATION_STATUS", f"Status tidak dikenal: {status}")
        try:
            self.orders.set_status(order_id, status)
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="STATUS_FAILED",
                default_message="Gagal memperbarui status",
            ) from exc
        log.info("Order %s -> %s", order_id, status)


@dataclass
class _GuardedTransition:
    set_status: SetOrderStatus
    action: OrderAction = "pay"

    def __call__(self, order: Order) -> Order:
        transition = TRANSITIONS[self.action]
        if not can_perform(order, self.action):
            raise UseCaseError(
                "INVALID_TRANSITION",
                f"Pesanan berstatus {order.status} tidak dapat diubah ke {transition.target}",
                meta={"order_id": order.id, "status": order.status},
            )
        self.set_status(order.id, transition.target)
        return order.with_status(transition.target)


@dataclass
class PayOrder(_GuardedTransition):
    """Buyer marks a pending order as paid (``confirmed``)."""

    action: OrderAction = "pay"


@dataclass
class MarkShipped(_GuardedTransition):
    action: OrderAction = "ship"


@dataclass
class MarkReceived(_GuardedTransition):
    action: OrderAction = "receive"


__all__ = ["MarkReceived", "MarkShipped", "PayOrder", "SetOrderStatus"]
