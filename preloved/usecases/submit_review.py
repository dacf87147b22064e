from __future__ import annotations

from dataclasses import dataclass

from preloved.domain.entities import Order, Review
from preloved.domain.order_flow import can_review
from preloved.domain.ports import OrderPort, UseCaseError
from preloved.usecases.error_mapping import map_api_error

MIN_RATING = 1
MAX_RATING = 5


@dataclass
class SubmitReview:
    """Post a rating for a delivered order; the backend accepts one per order."""

    orders: OrderPort

    def __call__(self, order: Order, rating: int, comment: str = "") -> Review:
        if not can_review(order):
            raise UseCaseError(
                "VALIDATION_REVIEW",
                "Ulasan hanya dapat diberikan untuk pesanan yang sudah diterima",
            )
        if order.review:
            raise UseCaseError("VALIDATION_REVIEW", "Ulasan sudah dikirim")
        try:
            rating_value = int(rating)
        except (TypeError, ValueError):
            rating_value = 0
        if not MIN_RATING <= rating_value <= MAX_RATING:
            raise UseCaseError("VALIDATION_RATING", "Rating harus antara 1 dan 5")
        review = Review(order_id=order.id, rating=rating_value, comment=(comment or "").strip())
        try:
            self.orders.add_review(order.id, review.to_payload())
        except Exception as exc:
            raise map_api_error(
                exc, default_code="REVIEW_FAILED", default_message="Gagal mengirim ulasan"
            ) from exc
        return review


__all__ = ["MAX_RATING", "MIN_RATING", "SubmitReview"]
