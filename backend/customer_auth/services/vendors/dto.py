# customer_auth/services/vendors/dto.py
from __future__ import annotations

from dataclasses import dataclass

from customer_auth.models.store import Store


@dataclass(frozen=True, slots=True)
class RegisterStoreIn:
    """
    Input DTO for registering (or re-keying) a tenant.

    :param vendor_id: Shop domain, e.g. ``acme.myshopify.com``.
    :type vendor_id: str
    :param client_id: App API key.
    :type client_id: str
    :param client_secret: App API secret.
    :type client_secret: str
    """

    vendor_id: str
    client_id: str
    client_secret: str

    def __repr__(self) -> str:
        return f"RegisterStoreIn(vendor_id={self.vendor_id!r}, client_id={self.client_id!r})"


@dataclass(frozen=True, slots=True)
class StoreOut:
    """
    Public view of a tenant; never includes secrets or tokens.

    :param id: Local store id.
    :type id: str
    :param vendor_id: Shop domain.
    :type vendor_id: str
    :param scope: Granted scopes, once installed.
    :type scope: str | None
    :param installed: Whether the OAuth exchange completed.
    :type installed: bool
    """

    id: str
    vendor_id: str
    scope: str | None
    installed: bool

    @classmethod
    def from_model(cls, store: Store) -> StoreOut:
        return cls(
            id=store.id,
            vendor_id=store.vendor_id,
            scope=store.scope,
            installed=store.is_installed,
        )
