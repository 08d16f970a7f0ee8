"""Tenant onboarding: OAuth install/redirect and store registration."""

from .dto import RegisterStoreIn, StoreOut
from .service import VendorService

__all__ = ["RegisterStoreIn", "StoreOut", "VendorService"]
