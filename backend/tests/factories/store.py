"""Factory Boy definition for :class:`customer_auth.models.store.Store`."""

from __future__ import annotations

import factory
from customer_auth.models.store import Store
from tests.factories import BaseFactory


class StoreFactory(BaseFactory):
    """
    Build persisted, fully installed stores.

    Notes
    -----
    - Use ``StoreFactory(pending=True)`` for a registered store whose OAuth
      installation has not completed yet.
    """

    class Meta:
        model = Store

    vendor_id = factory.Sequence(lambda n: f"shop{n}.myshopify.com")
    client_id = factory.Faker("md5")
    client_secret = factory.Faker("sha1")
    scope = "read_customers"
    access_token = factory.Sequence(lambda n: f"shpat_{n:032d}")
    storefront_access_token = factory.Faker("sha256")

    class Params:
        pending = factory.Trait(scope=None, access_token=None, storefront_access_token=None)
