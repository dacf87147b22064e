"""REST adapter for ``/orders`` endpoints."""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from preloved.adapters.api_errors import ApiError
from preloved.adapters.http_client import ApiSession
from preloved.adapters.rest_base import RestAdapter
from preloved.domain.entities import Order
from preloved.domain.ports import OrderId, OrderPort
from preloved.domain.util import as_int


class OrderRestAdapter(RestAdapter, OrderPort):
    """Order creation, listing, status transitions and reviews.

    Endpoints:
      - POST {base}/orders                 body: one product per order
              -> 201 {"order_id": 12}
      - GET  {base}/orders                 -> {"data": [...]}
      - GET  {base}/orders/{id}            -> {"data": {...}}
      - PUT  {base}/orders/{id}/status     body: {"status": "confirmed"}
      - POST {base}/orders/{id}/review     body: {"rating": 5, "comment": "..."}
    """

    def __init__(self, base_url: str, http: ApiSession) -> None:
        super().__init__(base_url, http)
        self._log = logging.getLogger(__name__)

    def create_order(self, payload: Mapping[str, Any]) -> OrderId:
        ctx = f"create_order[product={payload.get('product_id')}]"
        resp = self.http.post(self._url("/orders"), json_body=dict(payload))
        self._ensure_ok(resp, ctx)
        data = self._json_dict(resp, ctx)
        nested = data.get("data") if isinstance(data.get("data"), Mapping) else {}
        order_id = as_int(data.get("order_id") or nested.get("order_id") or nested.get("id"))
        if order_id <= 0:
            raise ApiError("Response payload missing order_id", payload=data, context=ctx)
        self._log.debug("Created order %s for product %s", order_id, payload.get("product_id"))
        return order_id

    def list_orders(self, params: Optional[Mapping[str, Any]] = None) -> List[Order]:
        ctx = "orders"
        resp = self.http.get(self._url("/orders"), params=params)
        self._ensure_ok(resp, ctx)
        orders: List[Order] = []
        for item in self._data_list(resp, ctx):
            try:
                orders.append(Order.from_payload(item))
            except ValueError as exc:
                self._log.warning("Skipping malformed order entry: %s", exc)
        return orders

    def get_order(self, order_id: OrderId) -> Order:
        ctx = f"order[{order_id}]"
        resp = self.http.get(self._url(f"/orders/{int(order_id)}"))
        self._ensure_ok(resp, ctx)
        return Order.from_payload(self._data_dict(resp, ctx))

    def set_status(self, order_id: OrderId, status: str) -> None:
        ctx = f"order_status[{order_id}->{status}]"
        resp = self.http.put(
            self._url(f"/orders/{int(order_id)}/status"),
            json_body={"status": status},
        )
        self._ensure_ok(resp, ctx)

    def add_review(self, order_id: OrderId, payload: Mapping[str, Any]) -> None:
        ctx = f"review[{order_id}]"
        resp = self.http.post(self._url(f"/orders/{int(order_id)}/review"), json_body=dict(payload))
        self._ensure_ok(resp, ctx)


__all__ = ["OrderRestAdapter"]
