"""Command line front-end for the storefront client.

Examples::

    preloved login budi@example.com rahasia
    preloved checkout --address "Jl. Merdeka 1, Bandung" --payment cod
    preloved --offline catalog --sort price_asc
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from ..adapters.marketplace_mock import MarketplaceMock
from ..domain.ports import UseCaseError
from ..usecases.catalog import SORT_KEYS, CatalogFilters
from ..utils import logging as logging_utils
from ..viewmodels.checkout_vm import CheckoutVM
from ..viewmodels.orders_vm import OrdersVM
from ..viewmodels.status_format import condition_label, format_price, status_label
from .config import AppConfig
from .controller import AppController

DEMO_TOKEN = "demo-token"


def demo_backend() -> MarketplaceMock:
    """Small seeded offline marketplace used by ``--offline``."""
    backend = MarketplaceMock()
    buyer = backend.seed_user(
        email="demo@preloved.id", password="demo", name="Demo", token=DEMO_TOKEN
    )
    seller = backend.seed_user(
        email="toko@preloved.id",
        password="toko",
        name="Toko Bekas",
        token="demo-seller-token",
        is_seller=True,
    )
    fashion = backend.seed_category("Fashion", "👕")
    gadget = backend.seed_category("Elektronik", "📱")
    shoe = backend.seed_product(name="Sepatu Kets", price=150000, seller_id=seller, category_id=fashion, stock=2)
    backend.seed_product(name="Jaket Denim", price=90000, seller_id=seller, category_id=fashion, stock=1)
    backend.seed_product(name="HP Bekas", price=1250000, seller_id=seller, category_id=gadget, stock=1)
    backend.seed_order(buyer_id=buyer, product_id=shoe, status="shipped")
    return backend


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="preloved", description="Preloved marketplace client")
    parser.add_argument("--api-url", help="Backend URL (default from PRELOVED_API_URL)")
    parser.add_argument("--data-dir", help="Directory for the local session store")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    parser.add_argument("--offline", action="store_true", help="Use the built-in demo backend")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("login")
    p.add_argument("email")
    p.add_argument("password")
    sub.add_parser("logout")
    sub.add_parser("whoami")
    sub.add_parser("become-seller")
    sub.add_parser("cart")

    p = sub.add_parser("add-to-cart")
    p.add_argument("product_id", type=int)
    p.add_argument("--quantity", type=int, default=1)

    p = sub.add_parser("catalog")
    p.add_argument("--category", type=int)
    p.add_argument("--search", default="")
    p.add_argument("--sort", choices=SORT_KEYS, default=SORT_KEYS[0])

    p = sub.add_parser("checkout")
    p.add_argument("--address", required=True)
    p.add_argument("--payment", default="transfer")

    p = sub.add_parser("orders")
    p.add_argument("--seller", action="store_true", help="List sales instead of purchases")

    for name in ("pay", "ship", "receive"):
        p = sub.add_parser(name)
        p.add_argument("order_id", type=int)

    p = sub.add_parser("review")
    p.add_argument("order_id", type=int)
    p.add_argument("rating", type=int)
    p.add_argument("--comment", default="")
    return parser


def _config_from_args(args: argparse.Namespace) -> AppConfig:
    return AppConfig.from_env().apply_dict(
        {
            "api_url": args.api_url,
            "data_dir": args.data_dir,
            "request_timeout_s": args.timeout,
        }
    )


def _run(app: AppController, args: argparse.Namespace) -> int:
    cmd = args.command
    if cmd == "login":
        session = app.uc_login(args.email, args.password)
        print(f"Masuk sebagai {session.user.name if session.user else '-'}")
    elif cmd == "logout":
        app.uc_logout()
        print("Keluar")
    elif cmd == "whoami":
        session = app.session
        if not session.is_authenticated:
            print("Belum login")
            return 1
        user = session.user
        if user is None:
            print("Token tersimpan, profil belum tersedia")
        else:
            role = "penjual" if user.is_seller else "pembeli"
            print(f"{user.name} <{user.email}> ({role})")
    elif cmd == "become-seller":
        user = app.uc_become_seller()
        print("Akun kini terdaftar sebagai penjual" if user else "Belum login")
    elif cmd == "cart":
        for item in app.uc_cart():
            print(f"[{item.id}] {item.product_name} x{item.quantity}  {format_price(item.subtotal)}")
    elif cmd == "add-to-cart":
        items = app.uc_cart_add(args.product_id, args.quantity)
        print(f"Keranjang berisi {len(items)} item")
    elif cmd == "catalog":
        page = app.uc_catalog(
            CatalogFilters(category_id=args.category, search=args.search, sort=args.sort)
        )
        for product in page.products:
            print(
                f"[{product.id}] {product.name}  {format_price(product.price)}"
                f"  {condition_label(product.condition)}"
            )
    elif cmd == "checkout":
        vm = CheckoutVM(app.uc_checkout, app.uc_cart)
        vm.load()
        vm.payment_method = args.payment
        vm.shipping_address = args.address
        result = vm.submit()
        if vm.error:
            print(vm.error, file=sys.stderr)
            return 1
        ids = ", ".join(f"#{oid}" for oid in (result.order_ids if result else []))
        print(f"Pesanan dibuat: {ids}  total {vm.summary()['total']}")
    elif cmd == "orders":
        vm = OrdersVM(
            app.uc_orders,
            app.uc_receive,
            app.uc_ship,
            role="seller" if args.seller else "buyer",
        )
        vm.load()
        if vm.error:
            print(vm.error, file=sys.stderr)
            return 1
        for row in vm.rows():
            actions = ",".join(row.actions) or "-"
            print(f"#{row.order_id} {row.title}  {row.status_label}  {row.total}  {row.date}  [{actions}]")
    elif cmd in ("pay", "ship", "receive"):
        command = {"pay": app.uc_pay, "ship": app.uc_ship, "receive": app.uc_receive}[cmd]
        order = command(app.uc_order(args.order_id))
        print(f"Pesanan #{order.id}: {status_label(order.status)}")
    elif cmd == "review":
        order = app.uc_order(args.order_id)
        app.uc_review(order, args.rating, args.comment)
        print("Review berhasil dikirim!")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    logging_utils.configure_root(logging.DEBUG if args.verbose else logging.WARNING)
    log = logging.getLogger(__name__)

    try:
        config = _config_from_args(args)
    except ValueError as exc:
        parser.error(str(exc))
    backend = demo_backend() if args.offline else None
    app = AppController(config, backend=backend)
    app.start()
    try:
        return _run(app, args)
    except UseCaseError as exc:
        log.debug("Command %s failed with %s", args.command, exc.code)
        print(exc.message, file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
