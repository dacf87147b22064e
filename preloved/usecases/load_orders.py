from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from preloved.domain.entities import Order
from preloved.domain.order_flow import ActorRole
from preloved.domain.ports import OrderId, OrderPort, UseCaseError
from preloved.domain.session_store import SessionStore
from preloved.usecases.error_mapping import map_api_error


@dataclass
class LoadOrders:
    """List the user's orders, newest first; ``role="seller"`` for sales."""

    orders: OrderPort
    store: SessionStore

    def __call__(self, role: Optional[ActorRole] = None) -> List[Order]:
        if not self.store.session.is_authenticated:
            raise UseCaseError("NOT_AUTHENTICATED", "Silakan login terlebih dahulu")
        params = {"role": role} if role else None
        try:
            result = self.orders.list_orders(params)
        except Exception as exc:
            raise map_api_error(
                exc, default_code="ORDERS_FAILED", default_message="Gagal memuat pesanan"
            ) from exc
        return sorted(result, key=lambda o: (o.created_at, o.id), reverse=True)


@dataclass
class LoadOrder:
    orders: OrderPort

    def __call__(self, order_id: OrderId) -> Order:
        try:
            return self.orders.get_order(order_id)
        except Exception as exc:
            raise map_api_error(
                exc, default_code="ORDER_FAILED", default_message="Pesanan tidak ditemukan"
            ) from exc


__all__ = ["LoadOrder", "LoadOrders"]
