from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from preloved.domain.entities import CartItem, Category, Order, Product, UserProfile

OrderId = int
UserId = int
ProductId = int
UploadFile = Tuple[str, bytes]  # (file name, raw bytes)


# ---- Error model ----
class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str, *, meta: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.meta = dict(meta or {})


# ---- Ports (Hexagonal boundaries) ----
class TokenSource(Protocol):
    """Anything that can hand out the bearer token at request time."""

    def current_token(self) -> Optional[str]: ...


class AuthPort(Protocol):
    """``/auth`` endpoints of the marketplace backend."""

    def login(self, email: str, password: str) -> Tuple[str, UserProfile]: ...
    def register(
        self, name: str, email: str, password: str, phone: Optional[str] = None
    ) -> Dict[str, Any]: ...


class UserPort(Protocol):
    def get_profile(self) -> UserProfile: ...  # GET /users/profile/me
    def get_user(self, user_id: UserId) -> UserProfile: ...
    def update_user(self, user_id: UserId, fields: Mapping[str, Any]) -> UserProfile: ...
    def become_seller(self, user_id: UserId) -> None: ...


class OrderPort(Protocol):
    def create_order(self, payload: Mapping[str, Any]) -> OrderId: ...
    def list_orders(self, params: Optional[Mapping[str, Any]] = None) -> List[Order]: ...
    def get_order(self, order_id: OrderId) -> Order: ...
    def set_status(self, order_id: OrderId, status: str) -> None: ...
    def add_review(self, order_id: OrderId, payload: Mapping[str, Any]) -> None: ...


class CartPort(Protocol):
    def list_items(self) -> List[CartItem]: ...
    def add_item(self, product_id: ProductId, quantity: int = 1) -> None: ...
    def update_item(self, item_id: int, quantity: int) -> None: ...
    def remove_item(self, item_id: int) -> None: ...


class ProductPort(Protocol):
    def list_products(self, params: Optional[Mapping[str, Any]] = None) -> List[Product]: ...
    def get_product(self, product_id: ProductId) -> Product: ...
    def list_by_user(self, user_id: UserId) -> List[Product]: ...
    def create_product(self, payload: Mapping[str, Any]) -> Optional[ProductId]: ...
    def update_product(self, product_id: ProductId, payload: Mapping[str, Any]) -> None: ...
    def delete_product(self, product_id: ProductId) -> None: ...


class CategoryPort(Protocol):
    def list_categories(self) -> List[Category]: ...


class UploadPort(Protocol):
    """``POST /upload`` accepting at most five base64 images per call."""

    def upload_images(self, files: Sequence[UploadFile]) -> List[str]: ...


class KeyValueStorePort(Protocol):
    """Durable local key/value store (device storage stand-in)."""

    def get_text(self, key: str) -> Optional[str]: ...
    def set_text(self, key: str, value: str) -> None: ...
    def get_json(self, key: str) -> Any: ...
    def set_json(self, key: str, value: Any) -> None: ...
    def delete(self, key: str) -> None: ...


class SessionProviderPort(Protocol):
    """Optional external auth/database provider holding a persisted session."""

    def get_access_token(self) -> Optional[str]: ...
    def sign_out(self) -> None: ...
