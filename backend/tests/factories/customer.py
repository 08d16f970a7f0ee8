"""Factory Boy definition for :class:`customer_auth.models.customer.Customer`."""

from __future__ import annotations

import factory
from customer_auth.models.customer import Customer
from tests.factories import BaseFactory


class CustomerFactory(BaseFactory):
    """Build persisted customers with a unique upstream id and no session."""

    class Meta:
        model = Customer

    vendor_customer_id = factory.Sequence(lambda n: str(6_000_000_000 + n))
    refresh_token = None
