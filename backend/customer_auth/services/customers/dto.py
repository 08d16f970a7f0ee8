# customer_auth/services/customers/dto.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from customer_auth.models.customer import Customer

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for storefront login.

    :param email: Customer email as typed on the storefront.
    :type email: str
    :param password: Raw password, forwarded upstream and never stored.
    :type password: str
    :param vendor_id: Tenant (shop domain) the login is for.
    :type vendor_id: str
    """

    email: str
    password: str
    vendor_id: str

    def __repr__(self) -> str:
        return f"LoginIn(email={self.email!r}, vendor_id={self.vendor_id!r})"


@dataclass(frozen=True, slots=True)
class GetCustomerIn:
    """
    Input DTO for profile retrieval.

    :param customer_id: Local customer id (from the verified access token).
    :type customer_id: str
    :param vendor_id: Tenant whose upstream profile should be read.
    :type vendor_id: str | None
    """

    customer_id: str
    vendor_id: str | None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Access/refresh pair minted for one customer.

    :param access_token: Short-lived token returned to the client.
    :type access_token: str
    :param refresh_token: Long-lived token persisted on the customer row.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class CustomerOut:
    """
    Snapshot of a customer record.

    :param id: Local customer id.
    :type id: str
    :param vendor_customer_id: Upstream customer id.
    :type vendor_customer_id: str
    :param first_name: Live display name, when it was fetched.
    :type first_name: str | None
    """

    id: str
    vendor_customer_id: str
    first_name: str | None = None

    @classmethod
    def from_model(cls, customer: Customer) -> CustomerOut:
        return cls(
            id=customer.id,
            vendor_customer_id=customer.vendor_customer_id,
            first_name=customer.first_name,
        )


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration.

    :param issuer: ``iss`` claim.
    :type issuer: str
    :param secret: Shared signing secret.
    :type secret: str
    :param access_expires: Access token lifetime.
    :type access_expires: timedelta
    :param refresh_expires: Refresh token lifetime.
    :type refresh_expires: timedelta
    """

    issuer: str
    secret: str
    access_expires: timedelta
    refresh_expires: timedelta

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> AuthTokenConfig:
        """Build from Flask config keys (``AUTH_*``; lifetimes in seconds)."""
        return cls(
            issuer=str(config.get("AUTH_TOKEN_ISSUER", "API")),
            secret=str(config["AUTH_TOKEN_SECRET_KEY"]),
            access_expires=timedelta(seconds=int(config.get("AUTH_ACCESS_TOKEN_LIFETIME", 3600))),
            refresh_expires=timedelta(
                seconds=int(config.get("AUTH_REFRESH_TOKEN_LIFETIME", 86400))
            ),
        )

    def __repr__(self) -> str:
        return (
            f"AuthTokenConfig(issuer={self.issuer!r}, access_expires={self.access_expires!r}, "
            f"refresh_expires={self.refresh_expires!r})"
        )
