from __future__ import annotations

import pytest

from preloved.adapters.marketplace_mock import MarketplaceMock
from preloved.adapters.storage_local import StorageLocal
from preloved.domain.entities import UserProfile
from preloved.domain.events import CART_CHANGED, FAVORITES_CHANGED, EventChannel
from preloved.domain.ports import UseCaseError
from preloved.domain.session_store import FAVORITES_KEY, SessionStore
from preloved.usecases.favorites import LoadFavorites, ToggleFavorite
from preloved.usecases.manage_cart import AddToCart, LoadCart, RemoveCartItem, UpdateCartItem, cart_total


@pytest.fixture
def shop(tmp_path):
    storage = StorageLocal(str(tmp_path))
    events = EventChannel()
    store = SessionStore(storage, events)
    backend = MarketplaceMock(token_source=store)
    buyer = backend.seed_user(email="b@x.id", password="pw", token="T1")
    seller = backend.seed_user(email="s@x.id", password="pw", is_seller=True)
    p1 = backend.seed_product(name="Sepatu", price=150000, seller_id=seller)
    p2 = backend.seed_product(name="Jaket", price=90000, seller_id=seller)
    store.establish("T1", UserProfile(id=buyer, name="B", email="b@x.id"))
    return storage, events, store, backend, p1, p2


def test_each_mutation_refetches_and_publishes_once(shop) -> None:
    _, events, store, backend, p1, p2 = shop
    seen = []
    events.subscribe(CART_CHANGED, seen.append)

    items = AddToCart(backend, store, events)(p1)
    assert len(seen) == 1
    items = AddToCart(backend, store, events)(p2, 2)
    assert [i.product_id for i in items] == [p1, p2]
    assert cart_total(items) == 150000 + 2 * 90000

    items = UpdateCartItem(backend, store, events)(items[1].id, 1)
    assert items[1].quantity == 1
    items = RemoveCartItem(backend, store, events)(items[0].id)
    assert [i.product_id for i in items] == [p2]
    assert [e["reason"] for e in seen] == ["add", "add", "update", "remove"]
    assert seen[-1]["count"] == 1


def test_quantity_below_one_rejected(shop) -> None:
    _, events, store, backend, p1, _ = shop
    items = AddToCart(backend, store, events)(p1)
    with pytest.raises(UseCaseError) as excinfo:
        UpdateCartItem(backend, store, events)(items[0].id, 0)
    assert excinfo.value.code == "VALIDATION_QUANTITY"


def test_anonymous_cart_is_empty_and_mutations_need_login(tmp_path) -> None:
    store = SessionStore(StorageLocal(str(tmp_path)))
    backend = MarketplaceMock(token_source=store)
    assert LoadCart(backend, store)() == []
    with pytest.raises(UseCaseError):
        AddToCart(backend, store)(1)


def test_toggle_favorite_persists_and_publishes(shop) -> None:
    storage, events, _, backend, p1, p2 = shop
    seen = []
    events.subscribe(FAVORITES_CHANGED, seen.append)
    toggle = ToggleFavorite(storage, events)

    assert toggle(p1) is True
    assert toggle(p2) is True
    assert toggle(p1) is False

    assert storage.get_json(FAVORITES_KEY) == [p2]
    assert [e["favorite"] for e in seen] == [True, True, False]
    favorites = LoadFavorites(backend, storage)()
    assert [p.id for p in favorites] == [p2]


def test_corrupt_favorites_start_empty(tmp_path) -> None:
    (tmp_path / "favorites.json").write_text("[1,", encoding="utf-8")
    storage = StorageLocal(str(tmp_path))
    assert ToggleFavorite(storage)(5) is True
    assert storage.get_json(FAVORITES_KEY) == [5]
