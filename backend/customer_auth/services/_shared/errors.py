"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP. They are the *expected* failures of the customer and vendor
flows: each carries a stable ``code`` that the HTTP layer exposes verbatim.

Anything that is not a :class:`ServiceError` (upstream transport failures,
database errors) is *unexpected* and surfaces as an opaque 5xx.
"""

from __future__ import annotations

from typing import Any

# --------------------------------------------------------------------------- #
# Base type
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    :param message: Human-readable message, safe to show to clients.
    :param code: Stable machine-readable code.
    :param details: Optional structured context.
    """

    default_message = "service error"
    default_code = "service_error"

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)


# --------------------------------------------------------------------------- #
# Customer flows
# --------------------------------------------------------------------------- #


class InvalidCredentialsError(ServiceError):
    """Raised when the upstream platform does not recognize email/password."""

    default_message = "invalid email or password"
    default_code = "invalid_email_or_password"


class StoreNotFoundError(ServiceError):
    """Raised when no tenant is registered for the resolved vendor id."""

    default_message = "store not found"
    default_code = "store_not_found"


class CustomerNotFoundError(ServiceError):
    """Raised when a token references a customer that no longer exists."""

    default_message = "customer not found"
    default_code = "customer_not_found"


class CustomerNotFoundInStorageError(CustomerNotFoundError):
    default_message = "customer not found in storage"


class CustomerNotFoundInVendorError(CustomerNotFoundError):
    default_message = "customer not found in vendor"


class InvalidTokenError(ServiceError):
    """Raised when a token is malformed, tampered with or not yet valid."""

    default_message = "invalid token"
    default_code = "invalid_token"


class TokenExpiredError(ServiceError):
    """Raised when a token is past its expiration."""

    default_message = "token expired"
    default_code = "token_expired"


# --------------------------------------------------------------------------- #
# Vendor onboarding
# --------------------------------------------------------------------------- #


class VendorIdNotFoundError(ServiceError):
    """Raised when the OAuth callbacks arrive without a ``shop`` parameter."""

    default_message = "vendor id not found"
    default_code = "vendor_id_not_found"


class InvalidInstallSignatureError(ServiceError):
    """Raised when the OAuth redirect carries a missing or wrong ``hmac``."""

    default_message = "invalid request signature"
    default_code = "invalid_hmac"


class MissingAuthorizationCodeError(ServiceError):
    """Raised when the OAuth redirect carries no ``code`` parameter."""

    default_message = "authorization code not found"
    default_code = "authorization_code_not_found"
