from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set, Tuple

from preloved.adapters.api_errors import ApiClientError, ApiError, ApiServerError
from preloved.domain.entities import CartItem, Category, Order, Product, UserProfile
from preloved.domain.order_flow import is_forward
from preloved.domain.ports import (
    AuthPort,
    CartPort,
    CategoryPort,
    OrderPort,
    ProductPort,
    TokenSource,
    UploadFile,
    UploadPort,
    UserPort,
)


def _reject(message: str, *, status: int = 400, ctx: str = "mock") -> ApiError:
    """Build the error the REST adapters would raise for this response."""
    text = f"{ctx}: {message} (HTTP {status})"
    payload = {"message": message}
    if status >= 500:
        return ApiServerError(text, status=status, payload=payload, context=ctx)
    return ApiClientError(text, status=status, hint=message, payload=payload, context=ctx)


@dataclass
class MarketplaceMock(AuthPort, UserPort, OrderPort, CartPort, ProductPort, CategoryPort, UploadPort):
    """Offline substitute for the REST adapters with deterministic behavior.

    The current user is resolved through ``token_source`` exactly like the
    real backend resolves the bearer header. Status transitions are enforced
    forward-only and reviews are accepted once per delivered order.
    """

    token_source: Optional[TokenSource] = None
    shipping_fee: int = 0

    def __post_init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._users: Dict[int, Dict[str, Any]] = {}
        self._passwords: Dict[str, Tuple[str, int]] = {}
        self._tokens: Dict[str, int] = {}
        self._products: Dict[int, Dict[str, Any]] = {}
        self._categories: Dict[int, Dict[str, Any]] = {}
        self._cart: Dict[int, Dict[str, Any]] = {}
        self._orders: Dict[int, Dict[str, Any]] = {}
        self._reviews: Dict[int, Dict[str, Any]] = {}
        self.fail_create_for: Dict[int, str] = {}
        self.fail_status_for: Set[int] = set()
        self.calls: List[Tuple[str, Any]] = []

    # ---------- seeding helpers ----------

    def seed_user(
        self,
        *,
        email: str,
        password: str,
        name: str = "User",
        token: Optional[str] = None,
        is_seller: bool = False,
        user_id: Optional[int] = None,
    ) -> int:
        with self._lock:
            uid = user_id or next(self._ids)
            self._users[uid] = {
                "id": uid,
                "name": name,
                "email": email,
                "phone": None,
                "avatar": None,
                "is_seller": 1 if is_seller else 0,
            }
            self._passwords[email] = (password, uid)
            if token:
                self._tokens[token] = uid
            return uid

    def seed_category(self, name: str, icon: str = "") -> int:
        with self._lock:
            cid = next(self._ids)
            self._categories[cid] = {"id": cid, "name": name, "icon": icon}
            return cid

    def seed_product(
        self,
        *,
        name: str,
        price: float,
        seller_id: int,
        category_id: int = 0,
        stock: int = 1,
        is_sold: bool = False,
        view_count: int = 0,
    ) -> int:
        with self._lock:
            pid = next(self._ids)
            self._products[pid] = {
                "id": pid,
                "name": name,
                "price": price,
                "user_id": seller_id,
                "category_id": category_id,
                "stock": stock,
                "images": [],
                "is_sold": 1 if is_sold else 0,
                "view_count": view_count,
                "condition": "good",
                "description": "",
            }
            return pid

    def seed_order(self, *, buyer_id: int, product_id: int, status: str = "pending") -> int:
        with self._lock:
            product = self._products[product_id]
            oid = next(self._ids)
            self._orders[oid] = self._order_record(oid, buyer_id, product, 1, "transfer", "")
            self._orders[oid]["status"] = status
            return oid

    def order_status(self, order_id: int) -> str:
        with self._lock:
            return str(self._orders[order_id]["status"])

    def count_calls(self, name: str) -> int:
        with self._lock:
            return sum(1 for call, _ in self.calls if call == name)

    # ---------- AuthPort ----------

    def login(self, email: str, password: str) -> Tuple[str, UserProfile]:
        with self._lock:
            self.calls.append(("login", email))
            entry = self._passwords.get(email)
            if entry is None or entry[0] != password:
                raise _reject("Email atau password salah", status=401, ctx="login")
            uid = entry[1]
            token = next((t for t, u in self._tokens.items() if u == uid), None)
            if token is None:
                token = f"T{uid}"
                self._tokens[token] = uid
            return token, UserProfile.from_payload(self._users[uid])

    def register(
        self, name: str, email: str, password: str, phone: Optional[str] = None
    ) -> Dict[str, Any]:
        with self._lock:
            self.calls.append(("register", email))
            if email in self._passwords:
                raise _reject("Email sudah terdaftar", status=409, ctx="register")
        uid = self.seed_user(email=email, password=password, name=name)
        with self._lock:
            self._users[uid]["phone"] = phone
        return {"success": True, "user_id": uid}

    # ---------- UserPort ----------

    def get_profile(self) -> UserProfile:
        with self._lock:
            uid = self._require_user("profile")
            return UserProfile.from_payload(self._users[uid])

    def get_user(self, user_id: int) -> UserProfile:
        with self._lock:
            record = self._users.get(int(user_id))
            if record is None:
                raise _reject("User tidak ditemukan", status=404, ctx="user")
            return UserProfile.from_payload(record)

    def update_user(self, user_id: int, fields: Mapping[str, Any]) -> UserProfile:
        with self._lock:
            uid = self._require_user("update_user")
            if uid != int(user_id):
                raise _reject("Tidak diizinkan", status=403, ctx="update_user")
            record = self._users[uid]
            for key in ("name", "phone", "avatar", "address"):
                if key in fields:
                    record[key] = fields[key]
            if "email" in fields:
                # Server-side normalization the client must adopt verbatim.
                record["email"] = str(fields["email"]).strip().lower()
            return UserProfile.from_payload(record)

    def become_seller(self, user_id: int) -> None:
        with self._lock:
            self.calls.append(("become_seller", user_id))
            uid = self._require_user("become_seller")
            if uid != int(user_id):
                raise _reject("Tidak diizinkan", status=403, ctx="become_seller")
            self._users[uid]["is_seller"] = 1

    # ---------- OrderPort ----------

    def create_order(self, payload: Mapping[str, Any]) -> int:
        with self._lock:
            self.calls.append(("create_order", dict(payload)))
            uid = self._require_user("create_order")
            product_id = int(payload.get("product_id") or 0)
            if product_id in self.fail_create_for:
                raise _reject(self.fail_create_for[product_id], ctx="create_order")
            product = self._products.get(product_id)
            if product is None:
                raise _reject("Produk tidak ditemukan", status=404, ctx="create_order")
            quantity = int(payload.get("quantity") or 1)
            if int(product.get("stock") or 0) < quantity:
                raise _reject("Out of stock", ctx="create_order")
            product["stock"] = int(product["stock"]) - quantity
            oid = next(self._ids)
            self._orders[oid] = self._order_record(
                oid,
                uid,
                product,
                quantity,
                str(payload.get("payment_method") or ""),
                str(payload.get("shipping_address") or ""),
            )
            return oid

    def list_orders(self, params: Optional[Mapping[str, Any]] = None) -> List[Order]:
        with self._lock:
            uid = self._require_user("orders")
            role = (params or {}).get("role")
            result = []
            for record in self._orders.values():
                if role == "seller" and record["seller_id"] != uid:
                    continue
                if role != "seller" and uid not in (record["buyer_id"], record["seller_id"]):
                    continue
                result.append(Order.from_payload(self._with_review(record)))
            return result

    def get_order(self, order_id: int) -> Order:
        with self._lock:
            self.calls.append(("get_order", order_id))
            uid = self._require_user("order")
            record = self._orders.get(int(order_id))
            if record is None or uid not in (record["buyer_id"], record["seller_id"]):
                raise _reject("Pesanan tidak ditemukan", status=404, ctx="order")
            return Order.from_payload(self._with_review(record))

    def set_status(self, order_id: int, status: str) -> None:
        with self._lock:
            self.calls.append(("set_status", (order_id, status)))
            self._require_user("order_status")
            if int(order_id) in self.fail_status_for:
                raise _reject("Gagal memperbarui status", status=500, ctx="order_status")
            record = self._orders.get(int(order_id))
            if record is None:
                raise _reject("Pesanan tidak ditemukan", status=404, ctx="order_status")
            if not is_forward(record["status"], status):
                raise _reject(
                    f"Status tidak dapat diubah dari {record['status']} ke {status}",
                    ctx="order_status",
                )
            record["status"] = status

    def add_review(self, order_id: int, payload: Mapping[str, Any]) -> None:
        with self._lock:
            self.calls.append(("add_review", order_id))
            uid = self._require_user("review")
            record = self._orders.get(int(order_id))
            if record is None or record["buyer_id"] != uid:
                raise _reject("Pesanan tidak ditemukan", status=404, ctx="review")
            if record["status"] != "delivered":
                raise _reject("Pesanan belum selesai", ctx="review")
            if int(order_id) in self._reviews:
                raise _reject("Review sudah dikirim", status=409, ctx="review")
            self._reviews[int(order_id)] = {
                "rating": int(payload.get("rating") or 0),
                "comment": str(payload.get("comment") or ""),
            }

    # ---------- CartPort ----------

    def list_items(self) -> List[CartItem]:
        with self._lock:
            uid = self._require_user("cart")
            return [
                CartItem.from_payload(item)
                for item in self._cart.values()
                if item["user_id"] == uid
            ]

    def add_item(self, product_id: int, quantity: int = 1) -> None:
        with self._lock:
            uid = self._require_user("cart_add")
            product = self._products.get(int(product_id))
            if product is None:
                raise _reject("Produk tidak ditemukan", status=404, ctx="cart_add")
            for item in self._cart.values():
                if item["user_id"] == uid and item["product_id"] == product["id"]:
                    item["quantity"] += int(quantity)
                    return
            item_id = next(self._ids)
            self._cart[item_id] = {
                "id": item_id,
                "user_id": uid,
                "product_id": product["id"],
                "name": product["name"],
                "price": product["price"],
                "quantity": int(quantity),
                "images": list(product.get("images") or []),
                "seller_id": product["user_id"],
            }

    def update_item(self, item_id: int, quantity: int) -> None:
        with self._lock:
            item = self._own_cart_item(int(item_id), "cart_update")
            item["quantity"] = int(quantity)

    def remove_item(self, item_id: int) -> None:
        with self._lock:
            self._own_cart_item(int(item_id), "cart_remove")
            del self._cart[int(item_id)]

    # ---------- ProductPort / CategoryPort / UploadPort ----------

    def list_products(self, params: Optional[Mapping[str, Any]] = None) -> List[Product]:
        with self._lock:
            return [Product.from_payload(p) for p in self._products.values()]

    def get_product(self, product_id: int) -> Product:
        with self._lock:
            record = self._products.get(int(product_id))
            if record is None:
                raise _reject("Produk tidak ditemukan", status=404, ctx="product")
            return Product.from_payload(record)

    def list_by_user(self, user_id: int) -> List[Product]:
        with self._lock:
            return [
                Product.from_payload(p)
                for p in self._products.values()
                if p["user_id"] == int(user_id)
            ]

    def create_product(self, payload: Mapping[str, Any]) -> Optional[int]:
        with self._lock:
            uid = self._require_user("create_product")
            pid = next(self._ids)
            record = dict(payload)
            record.update({"id": pid, "user_id": uid, "is_sold": 0, "view_count": 0})
            self._products[pid] = record
            return pid

    def update_product(self, product_id: int, payload: Mapping[str, Any]) -> None:
        with self._lock:
            record = self._own_product(int(product_id), "update_product")
            record.update(dict(payload))

    def delete_product(self, product_id: int) -> None:
        with self._lock:
            self._own_product(int(product_id), "delete_product")
            del self._products[int(product_id)]

    def list_categories(self) -> List[Category]:
        with self._lock:
            return [Category.from_payload(c) for c in self._categories.values()]

    def upload_images(self, files: Sequence[UploadFile]) -> List[str]:
        with self._lock:
            self._require_user("upload")
            return [f"/uploads/{name}" for name, _ in list(files)[:5]]

    # ---------- internals ----------

    def _require_user(self, ctx: str) -> int:
        token = self.token_source.current_token() if self.token_source else None
        uid = self._tokens.get(token or "")
        if uid is None:
            raise _reject("Token tidak valid", status=401, ctx=ctx)
        return uid

    def _own_cart_item(self, item_id: int, ctx: str) -> Dict[str, Any]:
        uid = self._require_user(ctx)
        item = self._cart.get(item_id)
        if item is None or item["user_id"] != uid:
            raise _reject("Item tidak ditemukan", status=404, ctx=ctx)
        return item

    def _own_product(self, product_id: int, ctx: str) -> Dict[str, Any]:
        uid = self._require_user(ctx)
        record = self._products.get(product_id)
        if record is None or record["user_id"] != uid:
            raise _reject("Produk tidak ditemukan", status=404, ctx=ctx)
        return record

    def _order_record(
        self,
        oid: int,
        buyer_id: int,
        product: Mapping[str, Any],
        quantity: int,
        payment_method: str,
        shipping_address: str,
    ) -> Dict[str, Any]:
        seller = self._users.get(int(product["user_id"]), {})
        buyer = self._users.get(buyer_id, {})
        return {
            "id": oid,
            "status": "pending",
            "total_price": float(product["price"]) * quantity + self.shipping_fee,
            "payment_method": payment_method,
            "shipping_address": shipping_address,
            "created_at": datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
            "product_id": product["id"],
            "product_name": product["name"],
            "quantity": quantity,
            "seller_id": product["user_id"],
            "seller_name": seller.get("name", ""),
            "buyer_id": buyer_id,
            "buyer_name": buyer.get("name", ""),
        }

    def _with_review(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        data = dict(record)
        review = self._reviews.get(int(record["id"]))
        if review:
            data["review"] = dict(review)
        return data


__all__ = ["MarketplaceMock"]
