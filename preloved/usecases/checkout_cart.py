"""Multi-item checkout: one order per cart line, then auto-confirm.

Flow:
    1. Local validation; nothing reaches the network when it fails.
    2. All ``POST /orders`` calls are started together and awaited as a batch.
    3. Successful creations are confirmed together
       (``PUT /orders/{id}/status {"status": "confirmed"}``); confirm failures
       are logged and do not change the outcome.

Partial failure leaves the successful orders in place; there is no
compensation step.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from preloved.domain.entities import PAYMENT_METHODS, CartItem, OrderDraft
from preloved.domain.ports import OrderId, OrderPort, UseCaseError
from preloved.domain.session_store import SessionStore
from preloved.usecases.error_mapping import failure_message
from preloved.usecases.settle_all import settle_all

log = logging.getLogger(__name__)

PARTIAL_FAILURE_PREFIX = "Sebagian pesanan gagal: "


@dataclass
class CheckoutResult:
    """Outcome of a checkout attempt.

    ``proceed`` is true only when every line produced an order; the caller
    navigates to the orders page in that case and stays otherwise.
    """

    order_ids: List[OrderId] = field(default_factory=list)
    failures: List[str] = field(default_factory=list)

    @property
    def proceed(self) -> bool:
        return not self.failures

    @property
    def error_message(self) -> Optional[str]:
        if not self.failures:
            return None
        return PARTIAL_FAILURE_PREFIX + ", ".join(self.failures)


def confirm_orders(orders: OrderPort, order_ids: Sequence[OrderId], *, max_workers: Optional[int] = None) -> int:
    """Mark each order confirmed concurrently; return how many succeeded."""
    batch = settle_all(
        lambda oid: orders.set_status(oid, "confirmed"),
        list(order_ids),
        max_workers=max_workers,
    )
    for index, exc in batch.failed:
        log.warning("Auto-confirm of order %s failed: %s", order_ids[index], exc)
    return len(batch.succeeded)


@dataclass
class CheckoutCart:
    orders: OrderPort
    store: SessionStore
    max_workers: Optional[int] = None

    def __call__(
        self,
        items: Sequence[CartItem],
        *,
        payment_method: str,
        shipping_address: str,
    ) -> CheckoutResult:
        address = (shipping_address or "").strip()
        if not address:
            raise UseCaseError("VALIDATION_ADDRESS", "Alamat pengiriman wajib diisi")
        if not items:
            raise UseCaseError("VALIDATION_CART", "Keranjang kosong")
        if not self.store.session.is_authenticated:
            raise UseCaseError("NOT_AUTHENTICATED", "Harus login terlebih dahulu")
        if payment_method not in PAYMENT_METHODS:
            raise UseCaseError(
                "VALIDATION_PAYMENT",
                "Metode pembayaran tidak valid",
                meta={"payment_method": payment_method},
            )

        drafts = [
            OrderDraft.from_cart_item(item, payment_method=payment_method, shipping_address=address)
            for item in items
        ]
        created = settle_all(
            lambda draft: self.orders.create_order(draft.to_payload()),
            drafts,
            max_workers=self.max_workers,
        )

        result = CheckoutResult(order_ids=created.values)
        for index, exc in created.failed:
            result.failures.append(failure_message(exc, f"Item {index + 1} gagal"))

        if result.order_ids:
            confirmed = confirm_orders(self.orders, result.order_ids, max_workers=self.max_workers)
            log.info(
                "Checkout created %d/%d orders, confirmed %d",
                len(result.order_ids),
                len(drafts),
                confirmed,
            )
        if result.failures:
            log.warning("Checkout partially failed: %s", "; ".join(result.failures))
        return result


__all__ = ["CheckoutCart", "CheckoutResult", "PARTIAL_FAILURE_PREFIX", "confirm_orders"]
