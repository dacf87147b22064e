"""Catalog browsing: product lists, filters and the product detail page.

Independent reads are fanned out over a small thread pool and awaited
together; secondary reads on the detail page degrade to ``None`` instead of
failing the page.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional

from preloved.domain.entities import Category, Product, UserProfile
from preloved.domain.ports import CategoryPort, ProductId, ProductPort, UserPort
from preloved.usecases.error_mapping import map_api_error

log = logging.getLogger(__name__)

SORT_NEWEST = "newest"
SORT_PRICE_ASC = "price_asc"
SORT_PRICE_DESC = "price_desc"
SORT_KEYS = (SORT_NEWEST, SORT_PRICE_ASC, SORT_PRICE_DESC)


@dataclass
class CatalogFilters:
    category_id: Optional[int] = None
    search: str = ""
    sort: str = SORT_NEWEST


@dataclass
class CatalogPage:
    products: List[Product] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)


def apply_filters(products: List[Product], filters: CatalogFilters) -> List[Product]:
    """Client-side category filter, title search and price sort."""
    result = list(products)
    if filters.category_id:
        result = [p for p in result if p.category_id == filters.category_id]
    needle = filters.search.strip().lower()
    if needle:
        result = [p for p in result if needle in p.name.lower()]
    if filters.sort == SORT_PRICE_ASC:
        result.sort(key=lambda p: p.price)
    elif filters.sort == SORT_PRICE_DESC:
        result.sort(key=lambda p: p.price, reverse=True)
    return result


@dataclass
class LoadCatalog:
    products: ProductPort
    categories: CategoryPort

    def __call__(self, filters: Optional[CatalogFilters] = None) -> CatalogPage:
        filters = filters or CatalogFilters()
        with ThreadPoolExecutor(max_workers=2) as pool:
            products_future = pool.submit(self.products.list_products)
            categories_future = pool.submit(self.categories.list_categories)
            try:
                products = products_future.result()
            except Exception as exc:
                raise map_api_error(
                    exc, default_code="CATALOG_FAILED", default_message="Gagal memuat produk"
                ) from exc
            try:
                categories = categories_future.result()
            except Exception as exc:
                log.warning("Categories unavailable: %s", exc)
                categories = []
        return CatalogPage(products=apply_filters(products, filters), categories=categories)


@dataclass
class ProductDetail:
    product: Product
    seller: Optional[UserProfile] = None
    category: Optional[Category] = None


@dataclass
class LoadProductDetail:
    products: ProductPort
    users: UserPort
    categories: CategoryPort

    def __call__(self, product_id: ProductId) -> ProductDetail:
        try:
            product = self.products.get_product(product_id)
        except Exception as exc:
            raise map_api_error(
                exc, default_code="PRODUCT_FAILED", default_message="Produk tidak ditemukan"
            ) from exc

        seller: Optional[UserProfile] = None
        category: Optional[Category] = None
        with ThreadPoolExecutor(max_workers=2) as pool:
            seller_future = pool.submit(self.users.get_user, product.user_id) if product.user_id else None
            categories_future = pool.submit(self.categories.list_categories)
            if seller_future is not None:
                try:
                    seller = seller_future.result()
                except Exception as exc:
                    log.warning("Seller %s unavailable: %s", product.user_id, exc)
            try:
                category = next(
                    (c for c in categories_future.result() if c.id == product.category_id),
                    None,
                )
            except Exception as exc:
                log.warning("Categories unavailable: %s", exc)
        return ProductDetail(product=product, seller=seller, category=category)


__all__ = [
    "CatalogFilters",
    "CatalogPage",
    "LoadCatalog",
    "LoadProductDetail",
    "ProductDetail",
    "SORT_KEYS",
    "apply_filters",
]
