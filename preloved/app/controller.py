"""Composition root: adapters, session context and use cases.

One ``AppController`` per process owns the ``SessionStore``, the
``EventChannel`` and the shared ``ApiSession``; every use case receives its
collaborators from here. ``start()`` must run before any dependent read.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from ..adapters.auth_rest import AuthRestAdapter, UserRestAdapter
from ..adapters.cart_rest import CartRestAdapter
from ..adapters.catalog_rest import CategoryRestAdapter, ProductRestAdapter, UploadRestAdapter
from ..adapters.http_client import ApiSession, HttpConfig
from ..adapters.marketplace_mock import MarketplaceMock
from ..adapters.order_rest import OrderRestAdapter
from ..adapters.session_provider_rest import SessionProviderRest
from ..adapters.storage_local import StorageLocal
from ..domain.entities import Session
from ..domain.events import EventChannel
from ..domain.ports import KeyValueStorePort, SessionProviderPort
from ..domain.session_store import SessionStore
from ..usecases.buy_now import BuyNow
from ..usecases.catalog import LoadCatalog, LoadProductDetail
from ..usecases.checkout_cart import CheckoutCart
from ..usecases.favorites import LoadFavorites, ToggleFavorite
from ..usecases.load_orders import LoadOrder, LoadOrders
from ..usecases.login import Login, Register
from ..usecases.logout import Logout
from ..usecases.manage_cart import AddToCart, LoadCart, RemoveCartItem, UpdateCartItem
from ..usecases.publish_product import DeleteProduct, EditProduct, PublishProduct
from ..usecases.restore_session import RestoreSession
from ..usecases.seller_dashboard import LoadSellerDashboard
from ..usecases.set_order_status import MarkReceived, MarkShipped, PayOrder, SetOrderStatus
from ..usecases.submit_review import SubmitReview
from ..usecases.update_profile import BecomeSeller, RefreshProfile, UpdateProfile
from .config import AppConfig


class AppController:
    """Create adapters and use cases from an :class:`AppConfig`.

    Call chain:
        ``preloved.app.main`` builds one instance, calls ``start()`` and then
        invokes the ``uc_*`` callables. Tests pass ``backend`` (usually a
        :class:`MarketplaceMock`) and an in-memory ``storage``.
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        storage: Optional[KeyValueStorePort] = None,
        backend: Optional[MarketplaceMock] = None,
        provider: Optional[SessionProviderPort] = None,
        navigate: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._log = logging.getLogger(__name__)
        self.config = config
        self.events = EventChannel()
        self.storage: KeyValueStorePort = storage or StorageLocal(config.data_dir)
        self.store = SessionStore(self.storage, self.events)
        self.http = ApiSession(
            HttpConfig(
                request_timeout_s=config.request_timeout_s,
                upload_timeout_s=config.upload_timeout_s,
            ),
            token_source=self.store,
        )

        if backend is not None:
            backend.token_source = self.store
            auth = users = orders = cart = products = categories = uploads = backend
            self.offline = True
        else:
            base = config.api_base_url
            auth = AuthRestAdapter(base, self.http)
            users = UserRestAdapter(base, self.http)
            orders = OrderRestAdapter(base, self.http)
            cart = CartRestAdapter(base, self.http)
            products = ProductRestAdapter(base, self.http)
            categories = CategoryRestAdapter(base, self.http)
            uploads = UploadRestAdapter(base, self.http)
            self.offline = False

        if provider is None and config.provider_enabled and backend is None:
            provider = SessionProviderRest(
                config.auth_url,
                config.auth_anon_key,
                self.storage,
                cfg=self.http.cfg,
            )
        self.provider = provider

        workers = config.max_workers

        # Session
        self.uc_restore = RestoreSession(self.store, users, provider)
        self.uc_login = Login(auth, self.store)
        self.uc_register = Register(auth, self.uc_login)
        self.uc_logout = Logout(self.store, provider, navigate)
        self.uc_become_seller = BecomeSeller(users, self.store)
        self.uc_update_profile = UpdateProfile(users, self.store)
        self.uc_refresh_profile = RefreshProfile(users, self.store)

        # Orders
        self.uc_checkout = CheckoutCart(orders, self.store, max_workers=workers)
        self.uc_buy_now = BuyNow(orders, self.store)
        self.uc_set_status = SetOrderStatus(orders)
        self.uc_pay = PayOrder(self.uc_set_status)
        self.uc_ship = MarkShipped(self.uc_set_status)
        self.uc_receive = MarkReceived(self.uc_set_status)
        self.uc_review = SubmitReview(orders)
        self.uc_orders = LoadOrders(orders, self.store)
        self.uc_order = LoadOrder(orders)

        # Cart, favorites, catalog
        self.uc_cart = LoadCart(cart, self.store)
        self.uc_cart_add = AddToCart(cart, self.store, self.events)
        self.uc_cart_update = UpdateCartItem(cart, self.store, self.events)
        self.uc_cart_remove = RemoveCartItem(cart, self.store, self.events)
        self.uc_favorites = LoadFavorites(products, self.storage)
        self.uc_toggle_favorite = ToggleFavorite(self.storage, self.events)
        self.uc_catalog = LoadCatalog(products, categories)
        self.uc_product = LoadProductDetail(products, users, categories)
        self.uc_publish = PublishProduct(products, uploads, self.store)
        self.uc_edit_product = EditProduct(products)
        self.uc_delete_product = DeleteProduct(products)
        self.uc_dashboard = LoadSellerDashboard(products, self.store)

        self._started = False

    @property
    def session(self) -> Session:
        return self.store.session

    def start(self) -> Session:
        """Restore the persisted session once; later calls are no-ops."""
        if not self._started:
            session = self.uc_restore()
            self._started = True
            self._log.info(
                "Session restored (authenticated=%s, profile=%s)",
                session.is_authenticated,
                session.has_profile,
            )
        return self.store.session


__all__ = ["AppController"]
