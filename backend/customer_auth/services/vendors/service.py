# customer_auth/services/vendors/service.py
from __future__ import annotations

import logging
from collections.abc import Mapping

from customer_auth.services._shared.base import BaseService, ServiceContext
from customer_auth.services._shared.errors import (
    InvalidInstallSignatureError,
    MissingAuthorizationCodeError,
    StoreNotFoundError,
    VendorIdNotFoundError,
)
from customer_auth.services._shared.ports.vendor_api import VendorAPI
from customer_auth.services.vendors.dto import RegisterStoreIn, StoreOut

log = logging.getLogger(__name__)

REDIRECT_PATH = "/vendors/redirect"


class VendorService(BaseService):
    """
    Tenant onboarding over the platform's OAuth handshake.

    ``handle_install`` sends the merchant to the platform's consent screen;
    ``handle_redirect`` receives the authorization code, trades it for an
    offline admin token plus a storefront delegate token and stores both.
    """

    def __init__(
        self,
        *,
        vendor_api: VendorAPI,
        app_base_url: str,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        :param vendor_api: Unscoped upstream client; scoped per call.
        :param app_base_url: Public URL of this service (including any
            API prefix) used to build the OAuth ``redirect_uri``.
        :param ctx: Request-scoped context used for logging.
        """
        super().__init__(ctx=ctx)
        self.vendor_api = vendor_api
        self.app_base_url = app_base_url.rstrip("/")

    @property
    def redirect_url(self) -> str:
        return f"{self.app_base_url}{REDIRECT_PATH}"

    def handle_install(self, vendor_id: str | None) -> str:
        """
        Build the OAuth consent URL for a registered tenant.

        :param vendor_id: Shop domain from the ``shop`` query parameter.
        :returns: URL the merchant must be redirected to.
        :raises VendorIdNotFoundError: ``vendor_id`` is empty.
        :raises StoreNotFoundError: Tenant is not registered.
        """
        if not vendor_id:
            raise VendorIdNotFoundError()
        with self.ro_uow() as uow:
            store = uow.stores.get_by_vendor_id(vendor_id)
            if store is None:
                log.info("vendor.install.store_not_found", extra=self.log_extra(vendor_id=vendor_id))
                raise StoreNotFoundError()
            url = self.vendor_api.with_store(store).build_install_url(self.redirect_url)

        log.info("vendor.install.ok", extra=self.log_extra(vendor_id=vendor_id))
        return url

    def handle_redirect(self, vendor_id: str | None, query: Mapping[str, str]) -> StoreOut:
        """
        Complete installation from the OAuth callback.

        :param vendor_id: Shop domain from the ``shop`` query parameter.
        :param query: Full callback query (``code``, ``hmac``, ``timestamp``...).
        :returns: Updated tenant view.
        :raises VendorIdNotFoundError: ``vendor_id`` is empty.
        :raises StoreNotFoundError: Tenant is not registered.
        :raises InvalidInstallSignatureError: ``hmac`` missing or wrong.
        :raises MissingAuthorizationCodeError: ``code`` missing.
        """
        if not vendor_id:
            raise VendorIdNotFoundError()
        store = self.load_store(vendor_id)
        if store is None:
            log.info("vendor.redirect.store_not_found", extra=self.log_extra(vendor_id=vendor_id))
            raise StoreNotFoundError()

        api = self.vendor_api.with_store(store)
        if not api.verify_hmac(query):
            log.warning("vendor.redirect.invalid_hmac", extra=self.log_extra(vendor_id=vendor_id))
            raise InvalidInstallSignatureError()
        code = query.get("code")
        if not code:
            raise MissingAuthorizationCodeError()

        credentials = api.exchange_code(code)
        storefront_token = api.get_storefront_access_token(credentials.access_token)

        with self.rw_uow() as uow:
            installed = uow.stores.update(
                store.id,
                access_token=credentials.access_token,
                scope=credentials.scope,
                storefront_access_token=storefront_token,
            )
            if installed is None:
                raise StoreNotFoundError()
            out = StoreOut.from_model(installed)

        log.info("vendor.redirect.installed", extra=self.log_extra(vendor_id=vendor_id))
        return out

    # ------------------------------------------------------------------ #
    # Operator commands
    # ------------------------------------------------------------------ #

    def register_store(self, dto: RegisterStoreIn) -> tuple[StoreOut, bool]:
        """
        Create a tenant, or update the app credentials of an existing one.

        :returns: ``(store, created)``.
        """
        with self.rw_uow() as uow:
            store = uow.stores.get_by_vendor_id(dto.vendor_id)
            created = store is None
            if store is None:
                store = uow.stores.create(
                    vendor_id=dto.vendor_id,
                    client_id=dto.client_id,
                    client_secret=dto.client_secret,
                )
            else:
                uow.stores.update(store.id, client_id=dto.client_id, client_secret=dto.client_secret)
            out = StoreOut.from_model(store)
        return out, created

    def list_stores(self) -> list[StoreOut]:
        with self.ro_uow() as uow:
            return [StoreOut.from_model(s) for s in uow.stores.list_all()]
