"""Shopify implementation of the :class:`VendorAPI` port over ``requests``."""

from __future__ import annotations

import hashlib
import hmac
import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

import requests

from customer_auth.models.store import Store
from customer_auth.services._shared.errors import InvalidCredentialsError
from customer_auth.services._shared.ports.vendor_api import (
    VendorAPI,
    VendorAPIError,
    VendorCredentials,
    VendorCustomer,
)

log = logging.getLogger(__name__)

CUSTOMER_GID_PREFIX = "gid://shopify/Customer/"
UNIDENTIFIED_CUSTOMER = "UNIDENTIFIED_CUSTOMER"

SIGN_IN_MUTATION = """
mutation SignInWithEmailAndPassword($email: String!, $password: String!) {
  customerAccessTokenCreate(input: {email: $email, password: $password}) {
    customerAccessToken {
      accessToken
    }
    customerUserErrors {
      code
      message
    }
  }
}
"""

CUSTOMER_BY_TOKEN_QUERY = """
query GetCustomerByAccessToken($accessToken: String!) {
  customer(customerAccessToken: $accessToken) {
    id
  }
}
"""


def shop_name(vendor_id: str) -> str:
    """Return the shop handle from a ``<shop>.myshopify.com`` vendor id."""
    return vendor_id.split(".")[0]


def _hmac_escape(text: str, *, key: bool = False) -> str:
    """Escape a callback parameter the way Shopify does before signing it."""
    text = text.replace("%", "%25").replace("&", "%26")
    return text.replace("=", "%3D") if key else text


class ShopifyAPI(VendorAPI):
    """
    Identity bridge and OAuth onboarding client for one Shopify shop.

    The instance built at app start is unscoped and owns the
    :class:`requests.Session`. :meth:`with_store` returns a fresh client
    bound to a tenant that reuses that session, so every tenant shares one
    connection pool; the admin token header is sent per request.
    """

    def __init__(
        self,
        *,
        api_version: str = "2023-01",
        scopes: str = "read_customers",
        timeout: float = 10,
        store: Store | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.api_version = api_version
        self.scopes = scopes
        self.timeout = timeout
        self.store = store
        if session is None:
            session = requests.Session()
            session.headers.update({"Content-Type": "application/json", "Accept": "application/json"})
        self._http = session

    # ------------------------------------------------------------------ #
    # Scoping
    # ------------------------------------------------------------------ #

    def with_store(self, store: Store) -> ShopifyAPI:
        return ShopifyAPI(
            api_version=self.api_version,
            scopes=self.scopes,
            timeout=self.timeout,
            store=store,
            session=self._http,
        )

    def _scoped(self) -> Store:
        if self.store is None:
            raise RuntimeError("ShopifyAPI is not scoped to a store; call with_store() first.")
        return self.store

    @property
    def admin_base_url(self) -> str:
        return f"https://{shop_name(self._scoped().vendor_id)}.myshopify.com"

    @property
    def graphql_url(self) -> str:
        return f"{self.admin_base_url}/api/{self.api_version}/graphql.json"

    # ------------------------------------------------------------------ #
    # Transport
    # ------------------------------------------------------------------ #

    def _send(self, method: str, url: str, *, what: str, **kwargs: Any) -> requests.Response:
        store = self._scoped()
        kwargs.setdefault("timeout", self.timeout)
        # Per-call headers (delegate token exchange) override the tenant token
        kwargs["headers"] = {
            "X-Shopify-Access-Token": store.access_token or "",
            **kwargs.get("headers", {}),
        }
        try:
            return self._http.request(method, url, **kwargs)
        except requests.RequestException as exc:
            log.error(
                "shopify.%s.transport_error",
                what,
                extra={"vendor_id": store.vendor_id},
                exc_info=True,
            )
            raise VendorAPIError(f"failed to send {what} request: {exc}") from exc

    def _expect_ok(self, resp: requests.Response, *, what: str) -> dict[str, Any]:
        store = self._scoped()
        if resp.status_code != requests.codes.ok:
            log.error(
                "shopify.%s.failed",
                what,
                extra={"vendor_id": store.vendor_id, "status": resp.status_code},
            )
            raise VendorAPIError(
                f"failed to {what}: http status {resp.status_code}",
                status_code=resp.status_code,
                body=resp.text,
            )
        try:
            data = resp.json()
        except ValueError as exc:
            raise VendorAPIError(
                f"failed to {what}: response is not JSON",
                status_code=resp.status_code,
                body=resp.text,
            ) from exc
        if not isinstance(data, dict):
            raise VendorAPIError(f"failed to {what}: unexpected response shape", body=resp.text)
        return data

    def _graphql(
        self, query: str, variables: Mapping[str, Any], *, what: str
    ) -> dict[str, Any]:
        store = self._scoped()
        resp = self._send(
            "POST",
            self.graphql_url,
            what=what,
            json={"query": query, "variables": dict(variables)},
            headers={"Shopify-Storefront-Private-Token": store.storefront_access_token or ""},
        )
        data = self._expect_ok(resp, what=what).get("data")
        if not isinstance(data, dict):
            raise VendorAPIError(f"failed to {what}: response has no data", body=resp.text)
        return data

    # ------------------------------------------------------------------ #
    # Identity bridge
    # ------------------------------------------------------------------ #

    def login_customer(self, email: str, password: str) -> str:
        """
        Check credentials against the Storefront API.

        :returns: Numeric Shopify customer id (``gid`` prefix stripped).
        :raises InvalidCredentialsError: Shopify reports ``UNIDENTIFIED_CUSTOMER``.
        :raises VendorAPIError: Any other failure.
        """
        store = self._scoped()
        created = (
            self._graphql(
                SIGN_IN_MUTATION,
                {"email": email, "password": password},
                what="login customer",
            ).get("customerAccessTokenCreate")
            or {}
        )
        user_errors = created.get("customerUserErrors") or []
        if user_errors and user_errors[0].get("code") == UNIDENTIFIED_CUSTOMER:
            log.info("shopify.login_customer.invalid_credentials", extra={"vendor_id": store.vendor_id})
            raise InvalidCredentialsError()

        storefront_token = (created.get("customerAccessToken") or {}).get("accessToken")
        if not storefront_token:
            raise VendorAPIError(f"failed to login customer: {user_errors or 'no access token'}")

        customer = self._graphql(
            CUSTOMER_BY_TOKEN_QUERY,
            {"accessToken": storefront_token},
            what="get customer by access token",
        ).get("customer") or {}
        gid = customer.get("id")
        if not gid:
            raise VendorAPIError("failed to get customer by access token: customer id missing")

        vendor_customer_id = str(gid).replace(CUSTOMER_GID_PREFIX, "", 1)
        log.info("shopify.login_customer.ok", extra={"vendor_id": store.vendor_id})
        return vendor_customer_id

    def get_customer(self, vendor_customer_id: str) -> VendorCustomer | None:
        """Fetch a customer profile from the Admin API; ``None`` on 404."""
        store = self._scoped()
        url = f"{self.admin_base_url}/admin/api/{self.api_version}/customers/{vendor_customer_id}.json"
        resp = self._send("GET", url, what="get shopify customer")
        if resp.status_code == requests.codes.not_found:
            log.info("shopify.get_customer.not_found", extra={"vendor_id": store.vendor_id})
            return None
        customer = self._expect_ok(resp, what="get shopify customer").get("customer")
        if not customer:
            return None
        return VendorCustomer(first_name=customer.get("first_name") or "")

    # ------------------------------------------------------------------ #
    # OAuth onboarding
    # ------------------------------------------------------------------ #

    def build_install_url(self, redirect_url: str) -> str:
        store = self._scoped()
        params = {
            "client_id": store.client_id,
            "scope": self.scopes,
            "redirect_uri": redirect_url,
            "state": "",
            "grant_options[]": "offline",
        }
        return f"https://{store.vendor_id}/admin/oauth/authorize?{urlencode(params)}"

    def verify_hmac(self, query: Mapping[str, str]) -> bool:
        """
        Check the ``hmac`` Shopify appends to OAuth callbacks.

        The message is every other query parameter sorted by key and joined
        as ``k=v`` pairs with ``&``, signed with the app's client secret.
        ``%`` and ``&`` are escaped in keys and values, ``=`` in keys only.
        """
        store = self._scoped()
        provided = query.get("hmac")
        if not provided or not store.client_secret:
            return False
        message = "&".join(
            f"{_hmac_escape(key, key=True)}={_hmac_escape(value)}"
            for key, value in sorted(query.items())
            if key not in {"hmac", "signature"}
        )
        expected = hmac.new(
            store.client_secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256
        ).hexdigest()
        return hmac.compare_digest(expected, provided)

    def exchange_code(self, code: str) -> VendorCredentials:
        store = self._scoped()
        resp = self._send(
            "POST",
            f"https://{store.vendor_id}/admin/oauth/access_token",
            what="get shopify access token",
            json={
                "client_id": store.client_id,
                "client_secret": store.client_secret,
                "code": code,
            },
        )
        data = self._expect_ok(resp, what="get shopify access token")
        access_token = data.get("access_token")
        if not access_token:
            raise VendorAPIError("failed to get shopify access token: token missing")
        return VendorCredentials(access_token=str(access_token), scope=str(data.get("scope") or ""))

    def get_storefront_access_token(self, admin_access_token: str) -> str:
        """Mint a delegate token the Storefront API accepts for customer reads."""
        store = self._scoped()
        resp = self._send(
            "POST",
            f"https://{store.vendor_id}/admin/access_tokens/delegate.json",
            what="get storefront access token",
            json={"delegate_access_scope": [s.strip() for s in self.scopes.split(",") if s.strip()]},
            headers={"X-Shopify-Access-Token": admin_access_token},
        )
        token = self._expect_ok(resp, what="get storefront access token").get("access_token")
        if not token:
            raise VendorAPIError("failed to get storefront access token: token missing")
        return str(token)
