from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from customer_auth.services._shared.errors import InvalidCredentialsError

if TYPE_CHECKING:
    from customer_auth.models.store import Store


class VendorAPIError(Exception):
    """
    Unexpected failure talking to the upstream platform.

    :param message: Short description of the failed call.
    :param status_code: HTTP status returned upstream, if any.
    :param body: Raw response body, kept for logs only.
    """

    def __init__(
        self, message: str, *, status_code: int | None = None, body: str | None = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


@dataclass(frozen=True, slots=True)
class VendorCustomer:
    """
    Live profile attributes fetched from the upstream platform.

    :param first_name: Customer display name.
    :type first_name: str
    """

    first_name: str


@dataclass(frozen=True, slots=True)
class VendorCredentials:
    """
    Admin credentials returned by the OAuth code exchange.

    :param access_token: Offline admin API token.
    :type access_token: str
    :param scope: Comma-separated scopes actually granted.
    :type scope: str
    """

    access_token: str
    scope: str


class VendorAPI(Protocol):
    """
    Port for the upstream commerce platform (identity bridge + onboarding).

    Instances are either *unscoped* (only :meth:`with_store` is valid) or
    scoped to one tenant by :meth:`with_store`, which must return a new
    instance instead of mutating the receiver.
    """

    def with_store(self, store: Store) -> VendorAPI: ...

    def login_customer(self, email: str, password: str) -> str:
        """Return the upstream customer id or raise :class:`InvalidCredentialsError`."""
        ...

    def get_customer(self, vendor_customer_id: str) -> VendorCustomer | None: ...

    def build_install_url(self, redirect_url: str) -> str: ...

    def verify_hmac(self, query: Mapping[str, str]) -> bool: ...

    def exchange_code(self, code: str) -> VendorCredentials: ...

    def get_storefront_access_token(self, admin_access_token: str) -> str: ...


@dataclass
class InMemoryVendorAPI:
    """
    Deterministic vendor double used in unit tests.

    ``accounts`` maps ``(email, password)`` to an upstream customer id and
    ``profiles`` maps that id to a :class:`VendorCustomer`. Every call is
    recorded in ``calls`` as ``(method, vendor_id)``.
    """

    accounts: dict[tuple[str, str], str] = field(default_factory=dict)
    profiles: dict[str, VendorCustomer] = field(default_factory=dict)
    credentials: VendorCredentials = field(
        default_factory=lambda: VendorCredentials(access_token="shpat_test", scope="read_customers")
    )
    storefront_token: str = "storefront_test"
    valid_hmac: bool = True
    calls: list[tuple[str, str | None]] = field(default_factory=list)
    store: Store | None = None

    def with_store(self, store: Store) -> InMemoryVendorAPI:
        return InMemoryVendorAPI(
            accounts=self.accounts,
            profiles=self.profiles,
            credentials=self.credentials,
            storefront_token=self.storefront_token,
            valid_hmac=self.valid_hmac,
            calls=self.calls,
            store=store,
        )

    def _record(self, method: str) -> None:
        if self.store is None:
            raise RuntimeError("vendor API is not scoped to a store")
        self.calls.append((method, self.store.vendor_id))

    def login_customer(self, email: str, password: str) -> str:
        self._record("login_customer")
        try:
            return self.accounts[(email, password)]
        except KeyError:
            raise InvalidCredentialsError() from None

    def get_customer(self, vendor_customer_id: str) -> VendorCustomer | None:
        self._record("get_customer")
        return self.profiles.get(vendor_customer_id)

    def build_install_url(self, redirect_url: str) -> str:
        self._record("build_install_url")
        assert self.store is not None
        return f"https://{self.store.vendor_id}/admin/oauth/authorize?redirect_uri={redirect_url}"

    def verify_hmac(self, query: Mapping[str, str]) -> bool:
        self._record("verify_hmac")
        return self.valid_hmac

    def exchange_code(self, code: str) -> VendorCredentials:
        self._record("exchange_code")
        return self.credentials

    def get_storefront_access_token(self, admin_access_token: str) -> str:
        self._record("get_storefront_access_token")
        return self.storefront_token
