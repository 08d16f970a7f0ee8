"""Customer repository: identity mapping and refresh-token persistence."""

from __future__ import annotations

from customer_auth.models.customer import Customer
from customer_auth.repositories.base import BaseRepository


class CustomerRepository(BaseRepository[Customer]):
    """Persistence-only repository for :class:`Customer`."""

    model = Customer

    def _filterable_fields(self):
        return {
            "id": Customer.id,
            "vendor_customer_id": Customer.vendor_customer_id,
        }

    def _updatable_fields(self):
        return {"refresh_token"}

    def find(
        self,
        *,
        id: str | None = None,
        vendor_customer_id: str | None = None,
    ) -> Customer | None:
        """Find a customer by local id and/or upstream id.

        Both filters are optional but at least one must be given; when both
        are, the row must match both.

        :param id: Local customer id.
        :type id: str | None
        :param vendor_customer_id: Upstream customer id.
        :type vendor_customer_id: str | None
        :returns: Matching customer or ``None``.
        :rtype: Customer | None
        :raises ValueError: If neither filter is supplied.
        """
        filters = {
            key: value
            for key, value in (("id", id), ("vendor_customer_id", vendor_customer_id))
            if value is not None
        }
        if not filters:
            raise ValueError("CustomerRepository.find requires id or vendor_customer_id.")
        return self.find_one(**filters)

    def create(self, *, vendor_customer_id: str, refresh_token: str | None = None) -> Customer:
        """Insert a customer and flush so its generated id is available."""
        return self.add(Customer(vendor_customer_id=vendor_customer_id, refresh_token=refresh_token))
