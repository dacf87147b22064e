from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from preloved.domain.entities import Order
from preloved.domain.order_flow import (
    STATUS_SEQUENCE,
    OrderAction,
    available_actions,
    can_review,
    progress_fraction,
    step_index,
)
from preloved.domain.ports import OrderId, UseCaseError
from preloved.usecases.load_orders import LoadOrder
from preloved.usecases.set_order_status import MarkReceived, PayOrder
from preloved.usecases.submit_review import SubmitReview

from .status_format import format_date, format_price, payment_label, status_label

log = logging.getLogger(__name__)

DEFAULT_RATING = 5


@dataclass
class OrderDetailVM:
    """Buyer's order page: status track, pay/receive buttons, review form.

    Status changes are never applied optimistically; after a successful
    transition or review the order is fetched again.
    """

    order_id: OrderId
    load_order: LoadOrder
    pay_order: PayOrder
    mark_received: MarkReceived
    submit_review: SubmitReview
    on_changed: Optional[Callable[[], None]] = None
    on_alert: Optional[Callable[[str], None]] = None

    order: Optional[Order] = None
    error: str = ""
    busy: bool = False
    rating: int = DEFAULT_RATING
    comment: str = ""
    review_submitting: bool = False
    review_submitted: bool = False

    # ---- projections ----
    @property
    def actions(self) -> List[OrderAction]:
        if self.order is None:
            return []
        return available_actions(self.order, role="buyer")

    @property
    def show_review_form(self) -> bool:
        if self.order is None or self.review_submitted:
            return False
        return can_review(self.order) and not self.order.review

    def steps(self) -> List[dict]:
        current = step_index(self.order.status) if self.order else -1
        return [
            {"status": s, "label": status_label(s), "done": i <= current}
            for i, s in enumerate(STATUS_SEQUENCE)
        ]

    def header(self) -> dict:
        if self.order is None:
            return {}
        return {
            "id": f"#{self.order.id}",
            "status": status_label(self.order.status),
            "progress": progress_fraction(self.order.status),
            "total": format_price(self.order.total_amount),
            "payment": payment_label(self.order.payment_method),
            "date": format_date(self.order.created_at),
        }

    # ---- commands ----
    def load(self) -> None:
        try:
            self.order = self.load_order(self.order_id)
            self.error = ""
        except UseCaseError as exc:
            self.error = exc.message
        self._changed()

    def pay(self) -> bool:
        return self._transition(self.pay_order, "Terjadi kesalahan saat bayar")

    def receive(self) -> bool:
        return self._transition(self.mark_received, "Gagal memperbarui status")

    def send_review(self) -> bool:
        if self.order is None or self.review_submitting or self.review_submitted:
            return False
        self.review_submitting = True
        self._changed()
        try:
            self.submit_review(self.order, self.rating, self.comment)
        except UseCaseError as exc:
            self._alert(exc.message)
            return False
        finally:
            self.review_submitting = False
        self.review_submitted = True
        self.comment = ""
        self._alert("Review berhasil dikirim!")
        self.load()
        return True

    def _transition(self, command: Callable[[Order], Order], fallback: str) -> bool:
        if self.order is None or self.busy:
            return False
        self.busy = True
        self._changed()
        try:
            command(self.order)
        except UseCaseError as exc:
            self._alert(exc.message or fallback)
            return False
        finally:
            self.busy = False
        self.load()
        return True

    def _alert(self, message: str) -> None:
        if self.on_alert:
            self.on_alert(message)
        else:
            log.info("%s", message)

    def _changed(self) -> None:
        if self.on_changed:
            self.on_changed()


__all__ = ["OrderDetailVM"]
