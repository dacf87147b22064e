"""Seller listing management: publish, edit and delete products."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from preloved.domain.ports import (
    ProductId,
    ProductPort,
    UploadFile,
    UploadPort,
    UseCaseError,
)
from preloved.domain.session_store import SessionStore
from preloved.domain.validation import MAX_UPLOAD_IMAGES, validate_product_form
from preloved.usecases.error_mapping import map_api_error

log = logging.getLogger(__name__)

CONDITIONS = ("like_new", "good", "fair", "poor")


def _product_payload(form: Mapping[str, Any], images: List[str]) -> Dict[str, Any]:
    condition = str(form.get("condition") or "like_new")
    if condition not in CONDITIONS:
        condition = "good"
    return {
        "name": str(form.get("name") or "").strip(),
        "category_id": int(form["category_id"]),
        "price": int(float(str(form["price"]))),
        "condition": condition,
        "description": str(form.get("description") or "").strip(),
        "images": images,
        "stock": int(float(str(form.get("stock") or 0))),
    }


def _raise_invalid(errors: Dict[str, str]) -> None:
    if errors:
        first = next(iter(errors.values()))
        raise UseCaseError("VALIDATION_PRODUCT", first, meta={"errors": errors})


@dataclass
class PublishProduct:
    """Validate the sell form, upload its images, then create the listing."""

    products: ProductPort
    uploads: UploadPort
    store: SessionStore

    def __call__(self, form: Mapping[str, Any]) -> Optional[ProductId]:
        if not self.store.session.is_authenticated:
            raise UseCaseError(
                "NOT_AUTHENTICATED",
                "Silakan login terlebih dahulu sebelum menjual barang.",
            )
        _raise_invalid(validate_product_form(form))

        files: Sequence[UploadFile] = list(form.get("images") or ())[:MAX_UPLOAD_IMAGES]
        try:
            paths = self.uploads.upload_images(files)
        except Exception as exc:
            raise map_api_error(
                exc, default_code="UPLOAD_FAILED", default_message="Gagal mengunggah gambar"
            ) from exc

        try:
            product_id = self.products.create_product(_product_payload(form, paths))
        except Exception as exc:
            raise map_api_error(
                exc, default_code="PUBLISH_FAILED", default_message="Gagal menambahkan produk"
            ) from exc
        log.info("Published product %s with %d image(s)", product_id, len(paths))
        return product_id


@dataclass
class EditProduct:
    """``PUT /products/{id}``; image paths are passed through unchanged."""

    products: ProductPort

    def __call__(self, product_id: ProductId, form: Mapping[str, Any]) -> None:
        errors = validate_product_form(form, require_images=False)
        if "stock" not in form:
            errors.pop("stock", None)
        _raise_invalid(errors)
        images = [str(path) for path in form.get("images") or () if isinstance(path, str)]
        payload = _product_payload(form, images)
        if "stock" not in form:
            payload.pop("stock")
        try:
            self.products.update_product(product_id, payload)
        except Exception as exc:
            raise map_api_error(
                exc, default_code="EDIT_FAILED", default_message="Gagal memperbarui produk"
            ) from exc


@dataclass
class DeleteProduct:
    products: ProductPort

    def __call__(self, product_id: ProductId) -> None:
        try:
            self.products.delete_product(product_id)
        except Exception as exc:
            raise map_api_error(
                exc, default_code="DELETE_FAILED", default_message="Gagal menghapus produk"
            ) from exc


__all__ = ["CONDITIONS", "DeleteProduct", "EditProduct", "PublishProduct"]
