"""REST adapters for products, categories and image uploads."""

from __future__ import annotations

import base64
import logging
from typing import Any, List, Mapping, Optional, Sequence

from preloved.adapters.api_errors import ApiError
from preloved.adapters.http_client import ApiSession
from preloved.adapters.rest_base import RestAdapter
from preloved.domain.entities import Category, Product
from preloved.domain.ports import (
    CategoryPort,
    ProductId,
    ProductPort,
    UploadFile,
    UploadPort,
    UserId,
)
from preloved.domain.util import as_int
from preloved.domain.validation import MAX_UPLOAD_IMAGES


class ProductRestAdapter(RestAdapter, ProductPort):
    def list_products(self, params: Optional[Mapping[str, Any]] = None) -> List[Product]:
        ctx = "products"
        resp = self.http.get(self._url("/products"), params=params, auth=False)
        self._ensure_ok(resp, ctx)
        return [Product.from_payload(item) for item in self._data_list(resp, ctx)]

    def get_product(self, product_id: ProductId) -> Product:
        ctx = f"product[{product_id}]"
        resp = self.http.get(self._url(f"/products/{int(product_id)}"), auth=False)
        self._ensure_ok(resp, ctx)
        return Product.from_payload(self._data_dict(resp, ctx))

    def list_by_user(self, user_id: UserId) -> List[Product]:
        ctx = f"products_by_user[{user_id}]"
        resp = self.http.get(self._url(f"/products/user/{int(user_id)}"))
        self._ensure_ok(resp, ctx)
        return [Product.from_payload(item) for item in self._data_list(resp, ctx)]

    def create_product(self, payload: Mapping[str, Any]) -> Optional[ProductId]:
        ctx = "create_product"
        resp = self.http.post(self._url("/products"), json_body=dict(payload))
        self._ensure_ok(resp, ctx)
        try:
            data = self._json_dict(resp, ctx)
        except ApiError:
            return None
        nested = data.get("data") if isinstance(data.get("data"), Mapping) else {}
        product_id = as_int(data.get("product_id") or data.get("id") or nested.get("id"))
        return product_id or None

    def update_product(self, product_id: ProductId, payload: Mapping[str, Any]) -> None:
        resp = self.http.put(self._url(f"/products/{int(product_id)}"), json_body=dict(payload))
        self._ensure_ok(resp, f"update_product[{product_id}]")

    def delete_product(self, product_id: ProductId) -> None:
        resp = self.http.delete(self._url(f"/products/{int(product_id)}"))
        self._ensure_ok(resp, f"delete_product[{product_id}]")


class CategoryRestAdapter(RestAdapter, CategoryPort):
    def list_categories(self) -> List[Category]:
        ctx = "categories"
        resp = self.http.get(self._url("/categories"), auth=False)
        self._ensure_ok(resp, ctx)
        return [Category.from_payload(item) for item in self._data_list(resp, ctx)]


class UploadRestAdapter(RestAdapter, UploadPort):
    """``POST /upload`` with ``{"files": [{"name": ..., "base64": ...}]}``."""

    def __init__(self, base_url: str, http: ApiSession) -> None:
        super().__init__(base_url, http)
        self._log = logging.getLogger(__name__)

    def upload_images(self, files: Sequence[UploadFile]) -> List[str]:
        ctx = "upload"
        batch = list(files)[:MAX_UPLOAD_IMAGES]
        if len(files) > MAX_UPLOAD_IMAGES:
            self._log.info("Upload limited to %d of %d files", MAX_UPLOAD_IMAGES, len(files))
        encoded = [
            {"name": name, "base64": base64.b64encode(content).decode("ascii")}
            for name, content in batch
        ]
        resp = self.http.post(
            self._url("/upload"),
            json_body={"files": encoded},
            timeout=self.http.cfg.upload_timeout_s,
        )
        self._ensure_ok(resp, ctx)
        data = self._json_dict(resp, ctx)
        if data.get("success") is False:
            raise ApiError(
                str(data.get("message") or "Gagal mengunggah file gambar"),
                payload=data,
                context=ctx,
            )
        paths: List[str] = []
        for entry in data.get("files") or []:
            if isinstance(entry, Mapping) and entry.get("path"):
                paths.append(str(entry["path"]))
        return paths


__all__ = ["CategoryRestAdapter", "ProductRestAdapter", "UploadRestAdapter"]
