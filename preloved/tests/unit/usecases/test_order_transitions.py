from __future__ import annotations

import pytest

from preloved.adapters.marketplace_mock import MarketplaceMock
from preloved.adapters.storage_local import StorageLocal
from preloved.domain.entities import Order, Product, UserProfile
from preloved.domain.ports import UseCaseError
from preloved.domain.session_store import SessionStore
from preloved.usecases.buy_now import BuyNow
from preloved.usecases.load_orders import LoadOrder, LoadOrders
from preloved.usecases.set_order_status import MarkReceived, MarkShipped, PayOrder, SetOrderStatus
from preloved.usecases.submit_review import SubmitReview


@pytest.fixture
def market(tmp_path):
    store = SessionStore(StorageLocal(str(tmp_path)))
    backend = MarketplaceMock(token_source=store)
    buyer = backend.seed_user(email="b@x.id", password="pw", name="Buyer", token="TB")
    seller = backend.seed_user(email="s@x.id", password="pw", name="Seller", token="TS", is_seller=True)
    product = backend.seed_product(name="Sepatu", price=150000, seller_id=seller, stock=3)
    store.establish("TB", UserProfile(id=buyer, name="Buyer", email="b@x.id"))
    return store, backend, buyer, seller, product


def test_guard_rejects_out_of_order_transition_without_network(market) -> None:
    _, backend, buyer, _, product = market
    order_id = backend.seed_order(buyer_id=buyer, product_id=product, status="pending")
    order = LoadOrder(backend)(order_id)

    with pytest.raises(UseCaseError) as excinfo:
        MarkReceived(SetOrderStatus(backend))(order)

    assert excinfo.value.code == "INVALID_TRANSITION"
    assert backend.count_calls("set_status") == 0
    assert backend.order_status(order_id) == "pending"


def test_pay_moves_pending_to_confirmed(market) -> None:
    _, backend, buyer, _, product = market
    order_id = backend.seed_order(buyer_id=buyer, product_id=product)

    updated = PayOrder(SetOrderStatus(backend))(LoadOrder(backend)(order_id))

    assert updated.status == "confirmed"
    assert backend.order_status(order_id) == "confirmed"


def test_seller_ships_then_buyer_receives_and_reviews_once(market) -> None:
    store, backend, buyer, seller, product = market
    order_id = backend.seed_order(buyer_id=buyer, product_id=product, status="confirmed")
    set_status = SetOrderStatus(backend)

    store.establish("TS", UserProfile(id=seller, name="Seller", email="s@x.id", is_seller=True))
    MarkShipped(set_status)(LoadOrder(backend)(order_id))

    store.establish("TB", UserProfile(id=buyer, name="Buyer", email="b@x.id"))
    delivered = MarkReceived(set_status)(LoadOrder(backend)(order_id))
    assert delivered.status == "delivered"

    review = SubmitReview(backend)(delivered, 5, "  Mantap  ")
    assert review.comment == "Mantap"

    with pytest.raises(UseCaseError):
        SubmitReview(backend)(delivered, 4, "lagi")
    refreshed = LoadOrder(backend)(order_id)
    assert refreshed.review == {"rating": 5, "comment": "Mantap"}
    with pytest.raises(UseCaseError) as excinfo:
        SubmitReview(backend)(refreshed, 4, "lagi")
    assert excinfo.value.message == "Ulasan sudah dikirim"
    assert backend.count_calls("add_review") == 2


def test_backend_rejection_surfaces_message(market) -> None:
    _, backend, buyer, _, product = market
    order_id = backend.seed_order(buyer_id=buyer, product_id=product)
    backend.fail_status_for.add(order_id)

    with pytest.raises(UseCaseError) as excinfo:
        PayOrder(SetOrderStatus(backend))(LoadOrder(backend)(order_id))

    assert excinfo.value.message == "Gagal memperbarui status"
    assert backend.order_status(order_id) == "pending"


@pytest.mark.parametrize("rating", [0, 6, "x"])
def test_review_rating_out_of_range(rating) -> None:
    with pytest.raises(UseCaseError) as excinfo:
        SubmitReview(orders=None)(Order(id=1, status="delivered"), rating)  # type: ignore[arg-type]
    assert excinfo.value.code == "VALIDATION_RATING"


def test_review_requires_delivered() -> None:
    with pytest.raises(UseCaseError) as excinfo:
        SubmitReview(orders=None)(Order(id=1, status="shipped"), 5)  # type: ignore[arg-type]
    assert excinfo.value.code == "VALIDATION_REVIEW"


def test_unknown_status_rejected_locally() -> None:
    with pytest.raises(UseCaseError):
        SetOrderStatus(orders=None)(1, "teleported")  # type: ignore[arg-type]


def test_buy_now_creates_and_confirms(market) -> None:
    store, backend, _, seller, product = market

    result = BuyNow(backend, store)(Product(id=product, name="Sepatu", price=150000, user_id=seller))

    assert result.notice == f"Pesanan dibuat (#{result.order_id}) dan ditandai terbayar"
    assert backend.order_status(result.order_id) == "confirmed"
    payload = backend.calls[[c for c, _ in backend.calls].index("create_order")][1]
    assert payload["payment_method"] == "transfer"
    assert payload["quantity"] == 1
    assert payload["shipping_address"] == ""


def test_buy_now_failure_message(market) -> None:
    store, backend, _, seller, product = market
    backend.fail_create_for[product] = "Produk sudah terjual"

    with pytest.raises(UseCaseError) as excinfo:
        BuyNow(backend, store)(Product(id=product, name="Sepatu", price=1, user_id=seller))
    assert excinfo.value.message == "Produk sudah terjual"


def test_load_orders_by_role(market) -> None:
    store, backend, buyer, seller, product = market
    backend.seed_order(buyer_id=buyer, product_id=product)

    assert len(LoadOrders(backend, store)()) == 1
    store.establish("TS", UserProfile(id=seller, name="Seller", email="s@x.id", is_seller=True))
    assert len(LoadOrders(backend, store)("seller")) == 1
