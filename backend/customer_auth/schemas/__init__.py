"""Convenience exports for application schemas."""

from __future__ import annotations

from .customer import AccessTokenSchema, CustomerSchema, LoginSchema
from .vendor import InstalledSchema

__all__ = [
    "AccessTokenSchema",
    "CustomerSchema",
    "InstalledSchema",
    "LoginSchema",
]
