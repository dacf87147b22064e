"""Checkout page state: cart snapshot, form fields and submission outcome.

Call context:
    The checkout view binds its fields to this VM and calls ``submit()``; a
    fully successful checkout is reported through ``on_navigate`` so the view
    can move to the orders page.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from preloved.domain.entities import CartItem
from preloved.domain.ports import UseCaseError
from preloved.usecases.checkout_cart import CheckoutCart, CheckoutResult
from preloved.usecases.manage_cart import LoadCart, cart_total

from .status_format import format_price

log = logging.getLogger(__name__)

SHIPPING_COST = 25000
ORDERS_ROUTE = "/orders"
GENERIC_ERROR = "Terjadi kesalahan. Silakan coba lagi."


@dataclass
class CheckoutVM:
    checkout: CheckoutCart
    load_cart: LoadCart
    on_navigate: Optional[Callable[[str], None]] = None
    on_changed: Optional[Callable[[], None]] = None

    items: List[CartItem] = field(default_factory=list)
    payment_method: str = "transfer"
    shipping_address: str = ""
    error: str = ""
    submitting: bool = False
    last_result: Optional[CheckoutResult] = None

    def __post_init__(self) -> None:
        self._submit_lock = threading.Lock()

    # ---- derived values ----
    @property
    def subtotal(self) -> float:
        return cart_total(self.items)

    @property
    def total(self) -> float:
        return self.subtotal + SHIPPING_COST

    def summary(self) -> dict:
        return {
            "count": len(self.items),
            "subtotal": format_price(self.subtotal),
            "shipping": format_price(SHIPPING_COST),
            "total": format_price(self.total),
        }

    # ---- commands ----
    def load(self) -> None:
        try:
            self.items = self.load_cart()
            self.error = ""
        except UseCaseError as exc:
            log.warning("Cart load failed: %s", exc.message)
            self.items = []
            self.error = "Gagal memuat keranjang"
        self._changed()

    def submit(self) -> Optional[CheckoutResult]:
        """Run checkout once; a second call while one is in flight is ignored."""
        if not self._submit_lock.acquire(blocking=False):
            return None
        self.submitting = True
        self.error = ""
        self._changed()
        try:
            result = self.checkout(
                self.items,
                payment_method=self.payment_method,
                shipping_address=self.shipping_address,
            )
            self.last_result = result
            if result.proceed:
                if self.on_navigate:
                    self.on_navigate(ORDERS_ROUTE)
            else:
                self.error = result.error_message or GENERIC_ERROR
            return result
        except UseCaseError as exc:
            self.error = exc.message
            return None
        except Exception:
            log.exception("Checkout crashed")
            self.error = GENERIC_ERROR
            return None
        finally:
            self.submitting = False
            self._submit_lock.release()
            self._changed()

    def _changed(self) -> None:
        if self.on_changed:
            self.on_changed()


__all__ = ["CheckoutVM", "ORDERS_ROUTE", "SHIPPING_COST"]
