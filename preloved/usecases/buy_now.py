from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from preloved.domain.entities import PAYMENT_METHODS, OrderDraft, Product
from preloved.domain.ports import OrderId, OrderPort, UseCaseError
from preloved.domain.session_store import SessionStore
from preloved.usecases.checkout_cart import confirm_orders
from preloved.usecases.error_mapping import map_api_error

log = logging.getLogger(__name__)


@dataclass
class BuyNowResult:
    order_id: OrderId
    confirmed: bool

    @property
    def notice(self) -> str:
        if self.confirmed:
            return f"Pesanan dibuat (#{self.order_id}) dan ditandai terbayar"
        return f"Pesanan dibuat (#{self.order_id})"


@dataclass
class BuyNow:
    """Single-product purchase from the product page, confirmed right away."""

    orders: OrderPort
    store: SessionStore

    def __call__(
        self,
        product: Product,
        *,
        quantity: int = 1,
        payment_method: str = "transfer",
        shipping_address: str = "",
    ) -> BuyNowResult:
        if not self.store.session.is_authenticated:
            raise UseCaseError("NOT_AUTHENTICATED", "Silakan login terlebih dahulu")
        if quantity < 1:
            raise UseCaseError("VALIDATION_QUANTITY", "Jumlah minimal 1")
        if payment_method not in PAYMENT_METHODS:
            raise UseCaseError("VALIDATION_PAYMENT", "Metode pembayaran tidak valid")
        draft = OrderDraft(
            product_id=product.id,
            seller_id=product.user_id or None,
            quantity=quantity,
            payment_method=payment_method,
            shipping_address=shipping_address,
        )
        try:
            order_id = self.orders.create_order(draft.to_payload())
        except Exception as exc:
            raise map_api_error(
                exc, default_code="ORDER_FAILED", default_message="Gagal membuat pesanan"
            ) from exc
        confirmed = confirm_orders(self.orders, [order_id]) == 1
        log.info("Buy-now order %s created (confirmed=%s)", order_id, confirmed)
        return BuyNowResult(order_id=order_id, confirmed=confirmed)


__all__ = ["BuyNow", "BuyNowResult"]
