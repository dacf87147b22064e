from __future__ import annotations

"""Domain value objects shared across adapters, use-cases, and view models."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Literal, Mapping, Optional, Tuple

from preloved.domain.util import (
    as_flag,
    as_float,
    as_int,
    as_optional_int,
    as_text,
    first_image,
    split_images,
)

OrderStatus = Literal["pending", "confirmed", "shipped", "delivered", "cancelled"]
PaymentMethod = Literal["transfer", "cod", "ewallet"]

ORDER_STATUSES: Tuple[str, ...] = ("pending", "confirmed", "shipped", "delivered", "cancelled")
PAYMENT_METHODS: Tuple[str, ...] = ("transfer", "cod", "ewallet")


@dataclass(frozen=True)
class UserProfile:
    """Profile of the signed-in user as returned by ``/users``."""

    id: int
    name: str
    email: str
    phone: Optional[str] = None
    avatar: Optional[str] = None
    is_seller: bool = False
    rating: Optional[float] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)
    """Server fields the client does not model; kept so the cache round-trips."""

    def __post_init__(self) -> None:
        if not isinstance(self.is_seller, bool):
            object.__setattr__(self, "is_seller", as_flag(self.is_seller))

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "UserProfile":
        if not isinstance(payload, Mapping):
            raise ValueError("User payload must be an object.")
        user_id = as_int(payload.get("id"))
        if user_id <= 0:
            raise ValueError("User payload is missing an id.")
        known = {"id", "name", "email", "phone", "avatar", "is_seller", "rating"}
        rating_raw = payload.get("rating")
        return cls(
            id=user_id,
            name=as_text(payload.get("name")),
            email=as_text(payload.get("email")),
            phone=as_text(payload.get("phone")) or None,
            avatar=as_text(payload.get("avatar")) or None,
            is_seller=as_flag(payload.get("is_seller")),
            rating=None if rating_raw is None else as_float(rating_raw),
            extra={k: v for k, v in payload.items() if k not in known},
        )

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = dict(self.extra)
        payload.update(
            {
                "id": self.id,
                "name": self.name,
                "email": self.email,
                "phone": self.phone,
                "avatar": self.avatar,
                "is_seller": self.is_seller,
            }
        )
        if self.rating is not None:
            payload["rating"] = self.rating
        return payload

    def as_seller(self) -> "UserProfile":
        return replace(self, is_seller=True)


@dataclass(frozen=True)
class Session:
    """Immutable snapshot of the authenticated identity."""

    token: Optional[str] = None
    user: Optional[UserProfile] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def has_profile(self) -> bool:
        """True only when a token is backed by a fetched or cached profile."""
        return self.is_authenticated and self.user is not None

    @property
    def is_seller(self) -> bool:
        return bool(self.user and self.user.is_seller)


@dataclass(frozen=True)
class CartItem:
    """One line in the server-side cart."""

    id: int
    product_id: int
    product_name: str
    price: float
    quantity: int
    image: str = ""
    seller_id: Optional[int] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "CartItem":
        return cls(
            id=as_int(payload.get("id")),
            product_id=as_int(payload.get("product_id")),
            product_name=as_text(payload.get("name") or payload.get("product_name"), "Produk"),
            price=as_float(payload.get("price")),
            quantity=max(1, as_int(payload.get("quantity"), default=1)),
            image=first_image(payload.get("images") or payload.get("image")),
            seller_id=as_optional_int(payload.get("seller_id")),
        )

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity


@dataclass(frozen=True)
class Review:
    order_id: int
    rating: int
    comment: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return {"rating": self.rating, "comment": self.comment}


@dataclass(frozen=True)
class Order:
    """Backend-owned order; the client only reads and forwards transitions."""

    id: int
    status: str
    total_amount: float = 0.0
    payment_method: str = ""
    shipping_address: str = ""
    created_at: str = ""
    product_id: Optional[int] = None
    product_name: str = ""
    quantity: int = 1
    seller_id: Optional[int] = None
    seller_name: str = ""
    buyer_id: Optional[int] = None
    buyer_name: str = ""
    review: Optional[Dict[str, Any]] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Order":
        if not isinstance(payload, Mapping):
            raise ValueError("Order payload must be an object.")
        order_id = as_int(payload.get("id") or payload.get("order_id"))
        if order_id <= 0:
            raise ValueError("Order payload is missing an id.")
        total = payload.get("total_amount")
        if total is None:
            total = payload.get("total_price")
        review = payload.get("review")
        return cls(
            id=order_id,
            status=as_text(payload.get("status"), "pending").lower(),
            total_amount=as_float(total),
            payment_method=as_text(payload.get("payment_method")),
            shipping_address=as_text(payload.get("shipping_address")),
            created_at=as_text(payload.get("created_at")),
            product_id=as_optional_int(payload.get("product_id")),
            product_name=as_text(payload.get("product_name")),
            quantity=max(1, as_int(payload.get("quantity"), default=1)),
            seller_id=as_optional_int(payload.get("seller_id")),
            seller_name=as_text(payload.get("seller_name")),
            buyer_id=as_optional_int(payload.get("buyer_id")),
            buyer_name=as_text(payload.get("buyer_name")),
            review=dict(review) if isinstance(review, Mapping) else None,
        )

    def with_status(self, status: str) -> "Order":
        return replace(self, status=status)


@dataclass(frozen=True)
class OrderDraft:
    """Payload for one ``POST /orders`` call (one product per order)."""

    product_id: int
    seller_id: Optional[int]
    quantity: int
    payment_method: str
    shipping_address: str
    notes: str = ""

    @classmethod
    def from_cart_item(
        cls, item: CartItem, *, payment_method: str, shipping_address: str
    ) -> "OrderDraft":
        return cls(
            product_id=item.product_id,
            seller_id=item.seller_id,
            quantity=item.quantity,
            payment_method=payment_method,
            shipping_address=shipping_address,
        )

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "product_id": self.product_id,
            "seller_id": self.seller_id,
            "quantity": self.quantity,
            "payment_method": self.payment_method,
            "shipping_address": self.shipping_address,
        }
        if self.notes:
            payload["notes"] = self.notes
        return payload


@dataclass(frozen=True)
class Category:
    id: int
    name: str
    icon: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Category":
        return cls(
            id=as_int(payload.get("id")),
            name=as_text(payload.get("name")),
            icon=as_text(payload.get("icon")),
        )


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    price: float
    condition: str = ""
    description: str = ""
    images: Tuple[str, ...] = ()
    category_id: int = 0
    user_id: int = 0
    stock: Optional[int] = None
    is_sold: bool = False
    view_count: int = 0
    created_at: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Product":
        stock_raw = payload.get("stock")
        return cls(
            id=as_int(payload.get("id")),
            name=as_text(payload.get("name") or payload.get("title"), "Produk"),
            price=as_float(payload.get("price")),
            condition=as_text(payload.get("condition")),
            description=as_text(payload.get("description")),
            images=tuple(split_images(payload.get("images"))),
            category_id=as_int(payload.get("category_id", payload.get("categoryId"))),
            user_id=as_int(payload.get("user_id", payload.get("userId"))),
            stock=None if stock_raw is None else as_int(stock_raw),
            is_sold=as_flag(payload.get("is_sold")),
            view_count=as_int(payload.get("view_count")),
            created_at=as_text(payload.get("created_at", payload.get("createdAt"))),
        )

    @property
    def image(self) -> str:
        return self.images[0] if self.images else ""


__all__ = [
    "CartItem",
    "Category",
    "ORDER_STATUSES",
    "Order",
    "OrderDraft",
    "OrderStatus",
    "PAYMENT_METHODS",
    "PaymentMethod",
    "Product",
    "Review",
    "Session",
    "UserProfile",
]
