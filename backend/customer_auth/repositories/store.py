"""Store repository for tenant lookup and credential updates."""

from __future__ import annotations

from customer_auth.models.store import Store
from customer_auth.repositories.base import BaseRepository


class StoreRepository(BaseRepository[Store]):
    """Persistence-only repository for :class:`Store`."""

    model = Store

    def _filterable_fields(self):
        return {"vendor_id": Store.vendor_id}

    def _updatable_fields(self):
        return {
            "client_id",
            "client_secret",
            "scope",
            "access_token",
            "storefront_access_token",
        }

    def get_by_vendor_id(self, vendor_id: str) -> Store | None:
        """Fetch a store by shop domain (case-insensitive, trimmed).

        :param vendor_id: Shop domain, e.g. ``acme.myshopify.com``.
        :type vendor_id: str
        :returns: Store or ``None``.
        :rtype: Store | None
        """
        return self.find_one(vendor_id=vendor_id.strip().lower())

    def create(self, *, vendor_id: str, client_id: str, client_secret: str) -> Store:
        return self.add(
            Store(
                vendor_id=vendor_id.strip().lower(),
                client_id=client_id,
                client_secret=client_secret,
            )
        )
