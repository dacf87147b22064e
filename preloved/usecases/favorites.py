"""Favorites live on the device only; products are resolved from the catalog."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from preloved.domain.entities import Product
from preloved.domain.events import FAVORITES_CHANGED, EventChannel
from preloved.domain.ports import KeyValueStorePort, ProductId, ProductPort
from preloved.domain.session_store import FAVORITES_KEY
from preloved.domain.util import as_int
from preloved.usecases.error_mapping import map_api_error

log = logging.getLogger(__name__)


def read_favorite_ids(storage: KeyValueStorePort) -> List[int]:
    try:
        raw = storage.get_json(FAVORITES_KEY)
    except ValueError:
        log.warning("Favorites list is not valid JSON; starting empty.")
        return []
    if not isinstance(raw, list):
        return []
    ids = [as_int(value) for value in raw]
    return [pid for pid in dict.fromkeys(ids) if pid > 0]


@dataclass
class LoadFavorites:
    products: ProductPort
    storage: KeyValueStorePort

    def __call__(self) -> List[Product]:
        ids = read_favorite_ids(self.storage)
        if not ids:
            return []
        try:
            catalog = self.products.list_products()
        except Exception as exc:
            raise map_api_error(
                exc, default_code="FAVORITES_FAILED", default_message="Gagal memuat favorit"
            ) from exc
        wanted = set(ids)
        return [p for p in catalog if p.id in wanted]


@dataclass
class ToggleFavorite:
    """Add or remove a product id; returns ``True`` when it is now a favorite."""

    storage: KeyValueStorePort
    events: Optional[EventChannel] = None

    def __call__(self, product_id: ProductId) -> bool:
        ids = read_favorite_ids(self.storage)
        pid = int(product_id)
        if pid in ids:
            ids.remove(pid)
            favorite = False
        else:
            ids.append(pid)
            favorite = True
        self.storage.set_json(FAVORITES_KEY, ids)
        if self.events is not None:
            self.events.publish(
                FAVORITES_CHANGED, {"product_id": pid, "favorite": favorite, "count": len(ids)}
            )
        return favorite


__all__ = ["LoadFavorites", "ToggleFavorite", "read_favorite_ids"]
