from __future__ import annotations

from typing import List, Optional

from preloved.adapters.marketplace_mock import MarketplaceMock
from preloved.adapters.storage_local import StorageLocal
from preloved.app.config import AppConfig
from preloved.app.controller import AppController
from preloved.domain.events import CART_CHANGED, SESSION_CHANGED
from preloved.domain.session_store import TOKEN_KEY, USER_KEY


class _Provider:
    def __init__(self, token: Optional[str]) -> None:
        self.token = token
        self.signed_out = False

    def get_access_token(self) -> Optional[str]:
        return self.token

    def sign_out(self) -> None:
        self.signed_out = True


def _seeded() -> tuple:
    backend = MarketplaceMock()
    buyer = backend.seed_user(email="b@x.id", password="pw", name="Budi", token="TB")
    seller = backend.seed_user(email="s@x.id", password="pw", is_seller=True)
    product = backend.seed_product(name="Sepatu", price=150000, seller_id=seller, stock=2)
    return backend, buyer, product


def test_login_cart_checkout_and_logout(tmp_path) -> None:
    backend, _, product = _seeded()
    routes: List[str] = []
    app = AppController(AppConfig(data_dir=str(tmp_path)), backend=backend, navigate=routes.append)
    events = []
    app.events.subscribe(CART_CHANGED, events.append)

    assert app.start().is_authenticated is False
    app.uc_login("b@x.id", "pw")
    app.uc_cart_add(product)
    result = app.uc_checkout(app.uc_cart(), payment_method="cod", shipping_address="Jl. A")

    assert result.proceed
    assert backend.order_status(result.order_ids[0]) == "confirmed"
    assert len(events) == 1

    app.uc_logout(redirect=True)
    storage = StorageLocal(str(tmp_path))
    assert storage.get_json(TOKEN_KEY) is None
    assert storage.get_json(USER_KEY) is None
    assert routes == ["/login"]


def test_restart_restores_persisted_session(tmp_path) -> None:
    backend, buyer, _ = _seeded()
    first = AppController(AppConfig(data_dir=str(tmp_path)), backend=backend)
    first.start()
    first.uc_login("b@x.id", "pw")

    second = AppController(AppConfig(data_dir=str(tmp_path)), backend=backend)
    session = second.start()

    assert session.is_authenticated
    assert session.user is not None and session.user.id == buyer
    assert second.start() is not None
    assert backend.count_calls("login") == 1


def test_provider_token_wins_and_is_signed_out(tmp_path) -> None:
    backend, buyer, _ = _seeded()
    provider = _Provider("TB")
    app = AppController(AppConfig(data_dir=str(tmp_path)), backend=backend, provider=provider)
    seen = []
    app.events.subscribe(SESSION_CHANGED, seen.append)

    session = app.start()
    assert session.token == "TB"
    assert session.user is not None and session.user.id == buyer

    app.uc_logout()
    assert provider.signed_out is True
    assert app.session.is_authenticated is False
    assert seen


def test_rest_wiring_without_backend(tmp_path) -> None:
    app = AppController(AppConfig(data_dir=str(tmp_path), api_url="http://shop.test"))
    assert app.offline is False
    assert app.provider is None
    assert app.http.cfg.request_timeout_s == 10
