from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from preloved.domain.entities import Product
from preloved.domain.ports import ProductPort, UseCaseError
from preloved.domain.session_store import SessionStore
from preloved.usecases.error_mapping import map_api_error


@dataclass
class DashboardStats:
    total_products: int = 0
    sold_products: int = 0
    total_views: int = 0
    total_earnings: float = 0.0


@dataclass
class SellerDashboard:
    stats: DashboardStats
    products: List[Product] = field(default_factory=list)


def compute_stats(products: List[Product]) -> DashboardStats:
    sold = [p for p in products if p.is_sold]
    return DashboardStats(
        total_products=len(products),
        sold_products=len(sold),
        total_views=sum(p.view_count for p in products),
        total_earnings=sum(p.price for p in sold),
    )


@dataclass
class LoadSellerDashboard:
    """Listings of the signed-in seller plus aggregate stats."""

    products: ProductPort
    store: SessionStore

    def __call__(self) -> SellerDashboard:
        user = self.store.user
        if user is None:
            raise UseCaseError("NOT_AUTHENTICATED", "Silakan login terlebih dahulu")
        if not user.is_seller:
            raise UseCaseError("NOT_SELLER", "Akun ini belum terdaftar sebagai penjual")
        try:
            listings = self.products.list_by_user(user.id)
        except Exception as exc:
            raise map_api_error(
                exc, default_code="DASHBOARD_FAILED", default_message="Gagal memuat produk"
            ) from exc
        return SellerDashboard(stats=compute_stats(listings), products=listings)


__all__ = ["DashboardStats", "LoadSellerDashboard", "SellerDashboard", "compute_stats"]
