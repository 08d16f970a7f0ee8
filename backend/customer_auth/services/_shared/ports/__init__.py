"""
customer_auth.services._shared.ports
====================================

Collection of *ports* (hexagonal interfaces) that the customer and vendor
services depend on.

Modules
-------
- :mod:`token_codec`:
    Defines :class:`~.TokenCodec` and :class:`~.TokenClaims`, plus the
    verification failures :class:`~.TokenInvalid`, :class:`~.TokenNotYetValid`
    and :class:`~.TokenExpired`.

- :mod:`vendor_api`:
    Defines :class:`~.VendorAPI`, the upstream commerce platform bridge, its
    value objects and :class:`~.InMemoryVendorAPI` for tests.

Concrete adapters live under ``customer_auth.infra``.
"""

from __future__ import annotations

from .token_codec import (
    TokenClaims,
    TokenCodec,
    TokenExpired,
    TokenInvalid,
    TokenNotYetValid,
    TokenVerificationError,
)
from .vendor_api import (
    InMemoryVendorAPI,
    VendorAPI,
    VendorAPIError,
    VendorCredentials,
    VendorCustomer,
)

__all__ = [
    "TokenClaims",
    "TokenCodec",
    "TokenExpired",
    "TokenInvalid",
    "TokenNotYetValid",
    "TokenVerificationError",
    "InMemoryVendorAPI",
    "VendorAPI",
    "VendorAPIError",
    "VendorCredentials",
    "VendorCustomer",
]
