"""End-to-end tests for the ``/customers`` endpoints through the Flask client."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from customer_auth.models.customer import Customer
from customer_auth.services._shared.ports import VendorAPIError, VendorCustomer
from freezegun import freeze_time
from tests.factories.store import StoreFactory

SHOP = "acme.myshopify.com"
SHOP_HEADERS = {"X-Shopify-Shop-Domain": SHOP}
NOW = datetime(2024, 5, 1, 8, 0, 0, tzinfo=UTC)


@pytest.fixture()
def store(db):
    return StoreFactory(vendor_id=SHOP)


@pytest.fixture()
def account(vendor_api):
    vendor_api.accounts[("ada@example.com", "pw")] = "7001"
    vendor_api.profiles["7001"] = VendorCustomer(first_name="Ada")
    return {"email": "ada@example.com", "password": "pw"}


def _login(client, account, headers=SHOP_HEADERS, **kwargs):
    return client.post("/customers/login", json=account, headers=headers, **kwargs)


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}", **SHOP_HEADERS}


class TestLogin:
    def test_returns_access_token_only(self, client, store, account):
        resp = _login(client, account)

        assert resp.status_code == 200
        body = resp.get_json()
        assert list(body) == ["accessToken"]
        assert resp.headers["X-Request-ID"]

    @pytest.mark.parametrize(
        ("headers", "query"),
        [
            ({}, {"shop": SHOP}),
            ({"Origin": f"https://{SHOP}"}, {}),
            ({"X-Shopify-Shop-Domain": SHOP.upper()}, {}),
        ],
    )
    def test_tenant_resolution(self, client, store, account, headers, query):
        resp = _login(client, account, headers=headers, query_string=query)

        assert resp.status_code == 200

    def test_invalid_credentials(self, client, store, account):
        resp = _login(client, {"email": "ada@example.com", "password": "wrong"})

        assert resp.status_code == 422
        assert resp.mimetype == "application/problem+json"
        body = resp.get_json()
        assert body["code"] == "invalid_email_or_password"
        assert body["message"] == "invalid email or password"

    def test_unknown_store(self, client, account):
        resp = _login(client, account)

        assert resp.status_code == 422
        assert resp.get_json()["code"] == "store_not_found"

    def test_no_tenant(self, client, store, account):
        resp = _login(client, account, headers={})

        assert resp.status_code == 422
        assert resp.get_json()["code"] == "store_not_found"

    @pytest.mark.parametrize(
        "payload",
        [{}, {"email": "not-an-email", "password": "pw"}, {"email": "ada@example.com", "password": ""}],
    )
    def test_validation_errors(self, client, store, payload):
        resp = client.post("/customers/login", json=payload, headers=SHOP_HEADERS)

        assert resp.status_code == 422
        body = resp.get_json()
        assert body["code"] == "validation_error"
        assert "errors" in body["details"]

    def test_upstream_failure_is_opaque_500(self, client, store, account, vendor_api, monkeypatch):
        def boom(self, email, password):
            raise VendorAPIError("failed to login customer: http status 502", status_code=502)

        monkeypatch.setattr(type(vendor_api), "login_customer", boom)

        resp = _login(client, account)

        assert resp.status_code == 500
        body = resp.get_json()
        assert body["code"] == "internal_server_error"
        assert "502" not in body["message"]

    def test_second_login_reuses_customer(self, client, store, account, session):
        with freeze_time(NOW) as frozen:
            _login(client, account)
            frozen.tick(timedelta(seconds=5))
            _login(client, account)

        assert session.query(Customer).filter_by(vendor_customer_id="7001").count() == 1


class TestMe:
    def test_returns_profile(self, client, store, account, session):
        token = _login(client, account).get_json()["accessToken"]

        resp = client.get("/customers/me", headers=_bearer(token))

        assert resp.status_code == 200
        customer = session.query(Customer).one()
        assert resp.get_json() == {"id": customer.id, "firstName": "Ada"}

    @pytest.mark.parametrize("header", [None, "Basic abc", "Bearer "])
    def test_missing_or_malformed_header(self, client, header):
        headers = {"Authorization": header} if header is not None else {}

        resp = client.get("/customers/me", headers=headers)

        assert resp.status_code == 401
        assert resp.get_json()["code"] == "unauthorized"

    def test_invalid_token(self, client, store):
        resp = client.get("/customers/me", headers=_bearer("garbage"))

        assert resp.status_code == 401
        assert resp.get_json()["code"] == "invalid_token"

    def test_expired_token(self, client, store, account):
        with freeze_time(NOW) as frozen:
            token = _login(client, account).get_json()["accessToken"]
            frozen.move_to(NOW + timedelta(hours=2))

            resp = client.get("/customers/me", headers=_bearer(token))

        assert resp.status_code == 401
        body = resp.get_json()
        assert body["code"] == "token_expired"
        assert body["message"] == "access token expired"

    def test_deleted_customer_is_unauthorized(self, client, store, account, session):
        token = _login(client, account).get_json()["accessToken"]
        session.query(Customer).delete()
        session.commit()

        resp = client.get("/customers/me", headers=_bearer(token))

        assert resp.status_code == 401
        body = resp.get_json()
        assert (body["code"], body["message"]) == ("customer_not_found", "customer not found")

    def test_customer_missing_upstream(self, client, store, account, vendor_api):
        token = _login(client, account).get_json()["accessToken"]
        vendor_api.profiles.clear()

        resp = client.get("/customers/me", headers=_bearer(token))

        assert resp.status_code == 422
        assert resp.get_json()["message"] == "customer not found in vendor"


class TestRefresh:
    def test_refresh_with_expired_access_token(self, client, store, account):
        with freeze_time(NOW) as frozen:
            token = _login(client, account).get_json()["accessToken"]
            frozen.move_to(NOW + timedelta(hours=3))

            resp = client.post("/customers/refresh-token", headers=_bearer(token))
            assert resp.status_code == 200
            new_token = resp.get_json()["accessToken"]

            me = client.get("/customers/me", headers=_bearer(new_token))
            assert me.status_code == 200

    def test_refresh_after_refresh_token_expiry(self, client, store, account):
        with freeze_time(NOW) as frozen:
            token = _login(client, account).get_json()["accessToken"]
            frozen.move_to(NOW + timedelta(days=2))

            resp = client.post("/customers/refresh-token", headers=_bearer(token))

        assert resp.status_code == 422
        assert resp.get_json()["code"] == "token_expired"

    def test_refresh_requires_bearer(self, client):
        resp = client.post("/customers/refresh-token")

        assert resp.status_code == 401

    def test_refresh_with_garbage(self, client):
        resp = client.post("/customers/refresh-token", headers=_bearer("garbage"))

        assert resp.status_code == 422
        assert resp.get_json()["code"] == "invalid_token"
