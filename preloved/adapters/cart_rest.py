"""REST adapter for ``/cart`` endpoints."""

from __future__ import annotations

from typing import List

from preloved.adapters.rest_base import RestAdapter
from preloved.domain.entities import CartItem
from preloved.domain.ports import CartPort, ProductId


class CartRestAdapter(RestAdapter, CartPort):
    def list_items(self) -> List[CartItem]:
        ctx = "cart"
        resp = self.http.get(self._url("/cart"))
        self._ensure_ok(resp, ctx)
        return [CartItem.from_payload(item) for item in self._data_list(resp, ctx)]

    def add_item(self, product_id: ProductId, quantity: int = 1) -> None:
        resp = self.http.post(
            self._url("/cart"),
            json_body={"product_id": int(product_id), "quantity": int(quantity)},
        )
        self._ensure_ok(resp, f"cart_add[{product_id}]")

    def update_item(self, item_id: int, quantity: int) -> None:
        resp = self.http.put(self._url(f"/cart/{int(item_id)}"), json_body={"quantity": int(quantity)})
        self._ensure_ok(resp, f"cart_update[{item_id}]")

    def remove_item(self, item_id: int) -> None:
        resp = self.http.delete(self._url(f"/cart/{int(item_id)}"))
        self._ensure_ok(resp, f"cart_remove[{item_id}]")


__all__ = ["CartRestAdapter"]
