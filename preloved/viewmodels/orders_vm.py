"""Order lists for buyers (``/orders``) and sellers (seller dashboard).

Call context:
    The list views bind row rendering to ``rows()`` and the per-row button to
    ``confirm_received`` (buyer) or ``confirm_shipped`` (seller).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set

from preloved.domain.entities import Order
from preloved.domain.order_flow import ActorRole, OrderAction, available_actions, progress_fraction
from preloved.domain.ports import OrderId, UseCaseError
from preloved.usecases.load_orders import LoadOrders
from preloved.usecases.set_order_status import MarkReceived, MarkShipped

from .status_format import format_date, format_price, status_label


@dataclass
class OrderRow:
    order_id: OrderId
    title: str
    status: str
    status_label: str
    progress: float
    total: str
    date: str
    actions: List[OrderAction]


@dataclass
class OrdersVM:
    load_orders: LoadOrders
    mark_received: MarkReceived
    mark_shipped: MarkShipped
    role: ActorRole = "buyer"
    on_changed: Optional[Callable[[], None]] = None
    on_alert: Optional[Callable[[str], None]] = None

    orders: List[Order] = field(default_factory=list)
    error: str = ""
    updating: Set[OrderId] = field(default_factory=set)

    def rows(self) -> List[OrderRow]:
        return [self._to_row(order) for order in self.orders]

    def load(self) -> None:
        try:
            self.orders = self.load_orders("seller" if self.role == "seller" else None)
            self.error = ""
        except UseCaseError as exc:
            self.error = exc.message
        self._changed()

    def confirm_received(self, order_id: OrderId) -> bool:
        return self._apply(order_id, self.mark_received)

    def confirm_shipped(self, order_id: OrderId) -> bool:
        return self._apply(order_id, self.mark_shipped)

    def _apply(self, order_id: OrderId, command: Callable[[Order], Order]) -> bool:
        index = self._index_of(order_id)
        if index is None or order_id in self.updating:
            return False
        self.updating.add(order_id)
        self._changed()
        try:
            updated = command(self.orders[index])
        except UseCaseError as exc:
            if self.on_alert:
                self.on_alert(exc.message)
            return False
        finally:
            self.updating.discard(order_id)
        # Only a confirmed backend write changes the row.
        self.orders[index] = updated
        self._changed()
        return True

    def _index_of(self, order_id: OrderId) -> Optional[int]:
        for i, order in enumerate(self.orders):
            if order.id == order_id:
                return i
        return None

    def _to_row(self, order: Order) -> OrderRow:
        actions = [] if order.id in self.updating else available_actions(order, role=self.role)
        return OrderRow(
            order_id=order.id,
            title=order.product_name or f"Pesanan #{order.id}",
            status=order.status,
            status_label=status_label(order.status),
            progress=progress_fraction(order.status),
            total=format_price(order.total_amount),
            date=format_date(order.created_at),
            actions=actions,
        )

    def _changed(self) -> None:
        if self.on_changed:
            self.on_changed()


__all__ = ["OrderRow", "OrdersVM"]
