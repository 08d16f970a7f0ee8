"""HS256 token codec backed by PyJWT."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import jwt

from customer_auth.services._shared.ports.token_codec import (
    TokenClaims,
    TokenCodec,
    TokenExpired,
    TokenInvalid,
    TokenNotYetValid,
)

ALGORITHM = "HS256"
PAYLOAD_CLAIM = "payload"


def _to_epoch(value: datetime | None) -> int:
    if value is None:
        return 0
    return int(value.timestamp())


def _from_epoch(value: Any) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), tz=UTC)


class PyJWTTokenCodec(TokenCodec):
    """
    Sign and verify compact JWS tokens with a shared secret.

    Registered claims are written as integer epoch seconds, so timestamps
    survive a round trip at one-second granularity. ``iat`` and ``nbf`` are
    written only when non-zero; the application payload lives under the
    ``payload`` claim.
    """

    def __init__(self, *, algorithm: str = ALGORITHM, leeway: int = 0) -> None:
        self.algorithm = algorithm
        self.leeway = leeway

    def sign(self, claims: TokenClaims, secret: str) -> str:
        """
        Encode ``claims`` into a signed compact token.

        :param claims: Claims to encode; ``expires_at`` is mandatory.
        :param secret: Shared HMAC secret.
        :returns: Compact JWS string.
        :raises TokenInvalid: If PyJWT refuses to encode the claims.
        """
        body: dict[str, Any] = {
            "iss": claims.issuer,
            "exp": _to_epoch(claims.expires_at),
        }
        iat = _to_epoch(claims.issued_at)
        if iat:
            body["iat"] = iat
        nbf = _to_epoch(claims.not_before)
        if nbf:
            body["nbf"] = nbf
        if claims.payload is not None:
            body[PAYLOAD_CLAIM] = dict(claims.payload)
        try:
            return jwt.encode(body, secret, algorithm=self.algorithm)
        except (TypeError, ValueError, jwt.PyJWTError) as exc:
            raise TokenInvalid(f"unable to sign token: {exc}") from exc

    def verify(
        self,
        token: str,
        secret: str,
        *,
        skip_expiration_check: bool = False,
    ) -> TokenClaims:
        """
        Verify signature and validity window, returning the decoded claims.

        :param token: Compact JWS string.
        :param secret: Shared HMAC secret.
        :param skip_expiration_check: Ignore ``exp`` (still decoded and returned).
        :returns: Decoded claims.
        :raises TokenExpired: ``exp`` is in the past and the check is enabled.
        :raises TokenNotYetValid: ``nbf`` is in the future.
        :raises TokenInvalid: Anything else (signature, structure, algorithm).
        """
        try:
            decoded = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                leeway=self.leeway,
                options={
                    "require": ["exp", "iss"],
                    "verify_exp": not skip_expiration_check,
                },
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpired(str(exc)) from exc
        except jwt.ImmatureSignatureError as exc:
            raise TokenNotYetValid(str(exc)) from exc
        except jwt.InvalidTokenError as exc:
            raise TokenInvalid(str(exc)) from exc

        payload = decoded.get(PAYLOAD_CLAIM)
        if payload is not None and not isinstance(payload, Mapping):
            raise TokenInvalid("payload claim must be an object")

        expires_at = _from_epoch(decoded["exp"])
        assert expires_at is not None
        return TokenClaims(
            issuer=str(decoded["iss"]),
            expires_at=expires_at,
            issued_at=_from_epoch(decoded.get("iat")),
            not_before=_from_epoch(decoded.get("nbf")),
            payload=dict(payload) if payload is not None else None,
        )
