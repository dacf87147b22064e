from __future__ import annotations

from typing import List

import pytest

from preloved.adapters.marketplace_mock import MarketplaceMock
from preloved.adapters.storage_local import StorageLocal
from preloved.domain.entities import UserProfile
from preloved.domain.session_store import SessionStore
from preloved.usecases.load_orders import LoadOrder, LoadOrders
from preloved.usecases.set_order_status import MarkReceived, MarkShipped, PayOrder, SetOrderStatus
from preloved.usecases.submit_review import SubmitReview
from preloved.viewmodels.order_detail_vm import OrderDetailVM
from preloved.viewmodels.orders_vm import OrdersVM


@pytest.fixture
def env(tmp_path):
    store = SessionStore(StorageLocal(str(tmp_path)))
    backend = MarketplaceMock(token_source=store)
    buyer = backend.seed_user(email="b@x.id", password="pw", name="Buyer", token="TB")
    seller = backend.seed_user(email="s@x.id", password="pw", name="Seller", token="TS", is_seller=True)
    product = backend.seed_product(name="Sepatu", price=150000, seller_id=seller, stock=5)
    store.establish("TB", UserProfile(id=buyer, name="Buyer", email="b@x.id"))
    return store, backend, buyer, seller, product


def _detail_vm(backend, order_id, alerts: List[str]) -> OrderDetailVM:
    set_status = SetOrderStatus(backend)
    return OrderDetailVM(
        order_id=order_id,
        load_order=LoadOrder(backend),
        pay_order=PayOrder(set_status),
        mark_received=MarkReceived(set_status),
        submit_review=SubmitReview(backend),
        on_alert=alerts.append,
    )


def test_detail_pay_refetches_order(env) -> None:
    _, backend, buyer, _, product = env
    order_id = backend.seed_order(buyer_id=buyer, product_id=product)
    vm = _detail_vm(backend, order_id, [])
    vm.load()

    assert vm.actions == ["pay"]
    assert vm.header()["progress"] == 0.25
    assert vm.header()["status"] == "Menunggu Pembayaran"

    assert vm.pay() is True
    assert vm.order.status == "confirmed"
    assert vm.actions == []
    assert [s["done"] for s in vm.steps()] == [True, True, False, False]
    assert backend.count_calls("get_order") == 2


def test_detail_failed_transition_keeps_status(env) -> None:
    _, backend, buyer, _, product = env
    order_id = backend.seed_order(buyer_id=buyer, product_id=product)
    backend.fail_status_for.add(order_id)
    alerts: List[str] = []
    vm = _detail_vm(backend, order_id, alerts)
    vm.load()

    assert vm.pay() is False
    assert vm.order.status == "pending"
    assert alerts == ["Gagal memperbarui status"]
    assert vm.busy is False


def test_detail_receive_then_review_once(env) -> None:
    _, backend, buyer, _, product = env
    order_id = backend.seed_order(buyer_id=buyer, product_id=product, status="shipped")
    alerts: List[str] = []
    vm = _detail_vm(backend, order_id, alerts)
    vm.load()
    assert vm.show_review_form is False

    assert vm.receive() is True
    assert vm.order.status == "delivered"
    assert vm.header()["progress"] == 1.0
    assert vm.show_review_form is True

    vm.rating = 4
    vm.comment = "Barang sesuai"
    assert vm.send_review() is True
    assert alerts[-1] == "Review berhasil dikirim!"
    assert vm.comment == ""
    assert vm.show_review_form is False
    assert vm.send_review() is False
    assert backend.count_calls("add_review") == 1


def test_orders_list_rows_and_receive(env) -> None:
    store, backend, buyer, _, product = env
    pending = backend.seed_order(buyer_id=buyer, product_id=product)
    shipped = backend.seed_order(buyer_id=buyer, product_id=product, status="shipped")
    set_status = SetOrderStatus(backend)
    vm = OrdersVM(
        load_orders=LoadOrders(backend, store),
        mark_received=MarkReceived(set_status),
        mark_shipped=MarkShipped(set_status),
    )
    vm.load()
    assert {order.id for order in vm.orders} == {pending, shipped}

    rows = {row.order_id: row for row in vm.rows()}
    assert rows[pending].actions == []
    assert rows[shipped].actions == ["receive"]
    assert rows[shipped].status_label == "Dikirim"
    assert rows[shipped].total == "Rp 150.000"

    assert vm.confirm_received(shipped) is True
    assert backend.order_status(shipped) == "delivered"
    assert {row.order_id: row for row in vm.rows()}[shipped].status == "delivered"
    assert vm.confirm_received(pending) is False


def test_seller_orders_ship(env) -> None:
    store, backend, buyer, seller, product = env
    order_id = backend.seed_order(buyer_id=buyer, product_id=product, status="confirmed")
    store.establish("TS", UserProfile(id=seller, name="Seller", email="s@x.id", is_seller=True))
    set_status = SetOrderStatus(backend)
    alerts: List[str] = []
    vm = OrdersVM(
        load_orders=LoadOrders(backend, store),
        mark_received=MarkReceived(set_status),
        mark_shipped=MarkShipped(set_status),
        role="seller",
        on_alert=alerts.append,
    )
    vm.load()

    assert [row.actions for row in vm.rows()] == [["ship"]]
    assert vm.confirm_shipped(order_id) is True
    assert vm.rows()[0].status == "shipped"
    assert vm.confirm_shipped(order_id) is False
    assert alerts and vm.rows()[0].status == "shipped"
