"""Server-side cart operations.

Every mutation is followed by a fresh ``GET /cart`` so callers always render
the server's view, and a single ``cart-changed`` event is published.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from preloved.domain.entities import CartItem
from preloved.domain.events import CART_CHANGED, EventChannel
from preloved.domain.ports import CartPort, ProductId, UseCaseError
from preloved.domain.session_store import SessionStore
from preloved.usecases.error_mapping import map_api_error


def cart_total(items: List[CartItem]) -> float:
    return sum(item.subtotal for item in items)


@dataclass
class LoadCart:
    cart: CartPort
    store: SessionStore

    def __call__(self) -> List[CartItem]:
        if not self.store.session.is_authenticated:
            return []
        try:
            return self.cart.list_items()
        except Exception as exc:
            raise map_api_error(
                exc, default_code="CART_FAILED", default_message="Gagal memuat keranjang"
            ) from exc


@dataclass
class _CartMutation:
    cart: CartPort
    store: SessionStore
    events: Optional[EventChannel] = None

    def _refetch(self, reason: str) -> List[CartItem]:
        items = LoadCart(self.cart, self.store)()
        if self.events is not None:
            self.events.publish(CART_CHANGED, {"reason": reason, "count": len(items)})
        return items

    def _require_auth(self) -> None:
        if not self.store.session.is_authenticated:
            raise UseCaseError("NOT_AUTHENTICATED", "Silakan login terlebih dahulu")


@dataclass
class AddToCart(_CartMutation):
    def __call__(self, product_id: ProductId, quantity: int = 1) -> List[CartItem]:
        self._require_auth()
        if quantity < 1:
            raise UseCaseError("VALIDATION_QUANTITY", "Jumlah minimal 1")
        try:
            self.cart.add_item(product_id, quantity)
        except Exception as exc:
            raise map_api_error(
                exc, default_code="CART_FAILED", default_message="Gagal menambahkan ke keranjang"
            ) from exc
        return self._refetch("add")


@dataclass
class UpdateCartItem(_CartMutation):
    def __call__(self, item_id: int, quantity: int) -> List[CartItem]:
        self._require_auth()
        if quantity < 1:
            raise UseCaseError("VALIDATION_QUANTITY", "Jumlah minimal 1")
        try:
            self.cart.update_item(item_id, quantity)
        except Exception as exc:
            raise map_api_error(
                exc, default_code="CART_FAILED", default_message="Gagal memperbarui keranjang"
            ) from exc
        return self._refetch("update")


@dataclass
class RemoveCartItem(_CartMutation):
    def __call__(self, item_id: int) -> List[CartItem]:
        self._require_auth()
        try:
            self.cart.remove_item(item_id)
        except Exception as exc:
            raise map_api_error(
                exc, default_code="CART_FAILED", default_message="Gagal menghapus item"
            ) from exc
        return self._refetch("remove")


__all__ = ["AddToCart", "LoadCart", "RemoveCartItem", "UpdateCartItem", "cart_total"]
