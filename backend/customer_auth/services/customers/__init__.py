"""Customer session service: login, refresh, verification and profile."""

from .dto import AuthTokenConfig, CustomerOut, GetCustomerIn, LoginIn, TokenPairOut
from .service import CustomerService

__all__ = [
    "AuthTokenConfig",
    "CustomerOut",
    "CustomerService",
    "GetCustomerIn",
    "LoginIn",
    "TokenPairOut",
]
