from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Claims carried by a signed customer token.

    :param issuer: ``iss`` claim.
    :type issuer: str
    :param expires_at: ``exp`` claim (required).
    :type expires_at: datetime
    :param issued_at: ``iat`` claim; omitted from the token when ``None``.
    :type issued_at: datetime | None
    :param not_before: ``nbf`` claim; omitted from the token when ``None``.
    :type not_before: datetime | None
    :param payload: Opaque application data; omitted when ``None``.
    :type payload: Mapping[str, Any] | None
    """

    issuer: str
    expires_at: datetime
    issued_at: datetime | None = None
    not_before: datetime | None = None
    payload: Mapping[str, Any] | None = None


class TokenVerificationError(Exception):
    """Base class for every reason a token can be rejected."""


class TokenInvalid(TokenVerificationError):
    """Signature mismatch, malformed structure or unexpected algorithm."""


class TokenNotYetValid(TokenVerificationError):
    """Current time precedes the ``nbf`` claim."""


class TokenExpired(TokenVerificationError):
    """Current time is past the ``exp`` claim."""


class TokenCodec(Protocol):
    """Port for signing and verifying compact signed tokens."""

    def sign(self, claims: TokenClaims, secret: str) -> str: ...

    def verify(
        self,
        token: str,
        secret: str,
        *,
        skip_expiration_check: bool = False,
    ) -> TokenClaims: ...
