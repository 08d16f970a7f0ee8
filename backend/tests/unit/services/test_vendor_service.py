# tests/unit/services/test_vendor_service.py
from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

import pytest
from customer_auth.models.store import Store
from customer_auth.services._shared.errors import (
    InvalidInstallSignatureError,
    MissingAuthorizationCodeError,
    StoreNotFoundError,
    VendorIdNotFoundError,
)
from customer_auth.services._shared.ports import VendorCredentials
from customer_auth.services.vendors import RegisterStoreIn, VendorService
from tests.factories.store import StoreFactory


@pytest.fixture()
def service(db, vendor_api) -> VendorService:
    return VendorService(vendor_api=vendor_api, app_base_url="https://auth.example.com/")


@pytest.fixture()
def pending_store():
    return StoreFactory(vendor_id="acme.myshopify.com", pending=True)


class TestInstall:
    def test_redirect_url_is_built_from_base_url(self, service):
        assert service.redirect_url == "https://auth.example.com/vendors/redirect"

    def test_returns_authorize_url(self, service, pending_store, vendor_api):
        url = service.handle_install("acme.myshopify.com")

        parts = urlsplit(url)
        assert parts.netloc == "acme.myshopify.com"
        assert parse_qs(parts.query)["redirect_uri"] == ["https://auth.example.com/vendors/redirect"]
        assert vendor_api.calls == [("build_install_url", "acme.myshopify.com")]

    @pytest.mark.parametrize("vendor_id", [None, ""])
    def test_missing_vendor_id(self, service, vendor_id):
        with pytest.raises(VendorIdNotFoundError):
            service.handle_install(vendor_id)

    def test_unknown_store(self, service):
        with pytest.raises(StoreNotFoundError):
            service.handle_install("ghost.myshopify.com")


class TestRedirect:
    QUERY = {"shop": "acme.myshopify.com", "code": "auth-code", "hmac": "sig", "timestamp": "1"}

    def test_installs_store(self, service, pending_store, vendor_api, session):
        vendor_api.credentials = VendorCredentials(access_token="shpat_live", scope="read_customers")
        vendor_api.storefront_token = "sf_live"

        out = service.handle_redirect("acme.myshopify.com", self.QUERY)

        assert out.installed is True
        assert out.scope == "read_customers"
        session.expire_all()
        row = session.get(Store, pending_store.id)
        assert row.access_token == "shpat_live"
        assert row.storefront_access_token == "sf_live"
        assert [name for name, _ in vendor_api.calls] == [
            "verify_hmac",
            "exchange_code",
            "get_storefront_access_token",
        ]

    def test_token_exchange_runs_outside_a_transaction(self, service, pending_store, upstream_tx_log):
        service.handle_redirect("acme.myshopify.com", self.QUERY)

        assert upstream_tx_log == [
            ("verify_hmac", False),
            ("exchange_code", False),
            ("get_storefront_access_token", False),
        ]

    def test_invalid_hmac(self, service, pending_store, vendor_api, session):
        vendor_api.valid_hmac = False

        with pytest.raises(InvalidInstallSignatureError) as excinfo:
            service.handle_redirect("acme.myshopify.com", self.QUERY)

        assert excinfo.value.code == "invalid_hmac"
        session.expire_all()
        assert session.get(Store, pending_store.id).access_token is None

    def test_missing_code(self, service, pending_store):
        query = {k: v for k, v in self.QUERY.items() if k != "code"}

        with pytest.raises(MissingAuthorizationCodeError):
            service.handle_redirect("acme.myshopify.com", query)

    def test_missing_vendor_id(self, service):
        with pytest.raises(VendorIdNotFoundError):
            service.handle_redirect(None, self.QUERY)

    def test_unknown_store(self, service):
        with pytest.raises(StoreNotFoundError):
            service.handle_redirect("ghost.myshopify.com", self.QUERY)


class TestOperatorCommands:
    def test_register_then_update(self, service, session):
        created, was_created = service.register_store(
            RegisterStoreIn(vendor_id="Acme.myshopify.com", client_id="id-1", client_secret="s-1")
        )
        updated, was_created_again = service.register_store(
            RegisterStoreIn(vendor_id="acme.myshopify.com", client_id="id-2", client_secret="s-2")
        )

        assert was_created is True
        assert was_created_again is False
        assert updated.id == created.id
        assert created.installed is False
        session.expire_all()
        assert session.get(Store, created.id).client_id == "id-2"

    def test_register_does_not_leak_secret_in_repr(self):
        dto = RegisterStoreIn(vendor_id="acme.myshopify.com", client_id="id", client_secret="s3cr3t")

        assert "s3cr3t" not in repr(dto)

    def test_list_stores(self, service):
        StoreFactory(vendor_id="a.myshopify.com")
        StoreFactory(vendor_id="b.myshopify.com", pending=True)

        stores = {s.vendor_id: s for s in service.list_stores()}

        assert stores["a.myshopify.com"].installed is True
        assert stores["b.myshopify.com"].installed is False
