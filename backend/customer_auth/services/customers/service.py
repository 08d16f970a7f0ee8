# customer_auth/services/customers/service.py
from __future__ import annotations

import logging
from dataclasses import replace
from datetime import UTC, datetime, timedelta

from customer_auth.services._shared.base import BaseService, ServiceContext
from customer_auth.services._shared.errors import (
    CustomerNotFoundError,
    CustomerNotFoundInStorageError,
    CustomerNotFoundInVendorError,
    InvalidTokenError,
    StoreNotFoundError,
    TokenExpiredError,
)
from customer_auth.services._shared.ports.token_codec import (
    TokenClaims,
    TokenCodec,
    TokenExpired,
    TokenVerificationError,
)
from customer_auth.services._shared.ports.vendor_api import VendorAPI
from customer_auth.services.customers.dto import (
    AuthTokenConfig,
    CustomerOut,
    GetCustomerIn,
    LoginIn,
    TokenPairOut,
)

log = logging.getLogger(__name__)

# Payload key shared with tokens minted by earlier deployments
CUSTOMER_ID_KEY = "userId"


class CustomerService(BaseService):
    """
    Customer session lifecycle (login / refresh / verify / profile).

    Credentials are checked by the upstream platform through a tenant-scoped
    :class:`VendorAPI`; this service only maps the upstream identity to a
    local customer and mints its own tokens via a :class:`TokenCodec`.

    Refresh is authenticated by the (possibly expired) access token: its
    customer id selects the refresh token stored server-side, which is never
    handed to the client. The refresh token is not rotated on refresh, only
    on login.
    """

    def __init__(
        self,
        *,
        token_codec: TokenCodec,
        vendor_api: VendorAPI,
        token_cfg: AuthTokenConfig,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param token_codec: Adapter for signing/verifying tokens.
        :param vendor_api: Unscoped upstream client; scoped per call.
        :param token_cfg: Issuer, secret and lifetimes.
        :param ctx: Request-scoped context used for logging.
        """
        super().__init__(ctx=ctx)
        self.tokens = token_codec
        self.vendor_api = vendor_api
        self.cfg = token_cfg

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login_customer(self, dto: LoginIn) -> str:
        """
        Authenticate upstream, upsert the local customer and issue tokens.

        :param dto: Credentials and tenant.
        :returns: Access token. The refresh token is stored, not returned.
        :raises StoreNotFoundError: Tenant is not registered.
        :raises InvalidCredentialsError: Upstream rejected the credentials.
        """
        store = self.load_store(dto.vendor_id)
        if store is None:
            log.info("customer.login.store_not_found", extra=self.log_extra(vendor_id=dto.vendor_id))
            raise StoreNotFoundError()

        vendor_customer_id = self.vendor_api.with_store(store).login_customer(dto.email, dto.password)

        with self.rw_uow() as uow:
            customer = uow.customers.find(vendor_customer_id=vendor_customer_id)
            if customer is None:
                customer = uow.customers.create(vendor_customer_id=vendor_customer_id)
                log.debug("customer.login.created", extra=self.log_extra(customer_id=customer.id))

            tokens = self.generate_customer_tokens(customer.id)
            # Overwrite: at most one valid refresh token per customer
            uow.customers.update(customer.id, refresh_token=tokens.refresh_token)
            customer_id = customer.id

        log.info("customer.login.ok", extra=self.log_extra(customer_id=customer_id))
        return tokens.access_token

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def refresh_customer_access_token(self, access_token: str) -> str:
        """
        Issue a new access token from a possibly expired one.

        :param access_token: Access token previously issued by this service.
        :returns: New access token.
        :raises InvalidTokenError: Access token or stored refresh token is
            malformed, tampered with or not yet valid.
        :raises CustomerNotFoundError: Referenced customer no longer exists.
        :raises TokenExpiredError: Stored refresh token has expired.
        """
        try:
            claims = self.tokens.verify(access_token, self.cfg.secret, skip_expiration_check=True)
        except TokenVerificationError as exc:
            log.info("customer.refresh.invalid_access_token", extra=self.log_extra(reason=str(exc)))
            raise InvalidTokenError("invalid access token") from exc
        customer_id = self._customer_id(claims)

        with self.ro_uow() as uow:
            customer = uow.customers.find(id=customer_id)
            if customer is None:
                log.info("customer.refresh.customer_not_found", extra=self.log_extra(customer_id=customer_id))
                raise CustomerNotFoundError()
            refresh_token = customer.refresh_token

        if not refresh_token:
            raise InvalidTokenError("invalid refresh token")
        try:
            self.tokens.verify(refresh_token, self.cfg.secret)
        except TokenExpired as exc:
            log.info("customer.refresh.refresh_token_expired", extra=self.log_extra(customer_id=customer_id))
            raise TokenExpiredError("refresh token expired") from exc
        except TokenVerificationError as exc:
            log.info("customer.refresh.invalid_refresh_token", extra=self.log_extra(customer_id=customer_id))
            raise InvalidTokenError("invalid refresh token") from exc

        new_access = self._sign(customer_id, self.cfg.access_expires)
        log.info("customer.refresh.ok", extra=self.log_extra(customer_id=customer_id))
        return new_access

    # ------------------------------------------------------------------ #
    # Verify
    # ------------------------------------------------------------------ #

    def verify_customer_access_token(self, access_token: str) -> CustomerOut:
        """
        Verify an access token and return the customer it belongs to.

        :raises TokenExpiredError: Token is past its expiration.
        :raises InvalidTokenError: Any other verification failure.
        :raises CustomerNotFoundError: Referenced customer no longer exists.
        """
        try:
            claims = self.tokens.verify(access_token, self.cfg.secret)
        except TokenExpired as exc:
            raise TokenExpiredError("access token expired") from exc
        except TokenVerificationError as exc:
            raise InvalidTokenError("invalid access token") from exc
        customer_id = self._customer_id(claims)

        with self.ro_uow() as uow:
            customer = uow.customers.find(id=customer_id)
            if customer is None:
                raise CustomerNotFoundError()
            out = CustomerOut.from_model(customer)

        log.debug("customer.verify.ok", extra=self.log_extra(customer_id=customer_id))
        return out

    # ------------------------------------------------------------------ #
    # Token pair
    # ------------------------------------------------------------------ #

    def generate_customer_tokens(self, customer_id: str) -> TokenPairOut:
        """Mint an access/refresh pair carrying ``customer_id``."""
        return TokenPairOut(
            access_token=self._sign(customer_id, self.cfg.access_expires),
            refresh_token=self._sign(customer_id, self.cfg.refresh_expires),
        )

    # ------------------------------------------------------------------ #
    # Profile
    # ------------------------------------------------------------------ #

    def get_customer(self, dto: GetCustomerIn) -> CustomerOut:
        """
        Load the local record and merge the live upstream display name.

        :raises CustomerNotFoundInStorageError: No local record.
        :raises StoreNotFoundError: Tenant missing or not registered.
        :raises CustomerNotFoundInVendorError: Upstream has no such customer.
        """
        with self.ro_uow() as uow:
            customer = uow.customers.find(id=dto.customer_id)
            if customer is None:
                raise CustomerNotFoundInStorageError()
            out = CustomerOut.from_model(customer)

            store = uow.stores.get_by_vendor_id(dto.vendor_id) if dto.vendor_id else None
            if store is None:
                log.info("customer.get.store_not_found", extra=self.log_extra(vendor_id=dto.vendor_id))
                raise StoreNotFoundError()
            uow.stores.detach(store)

        profile = self.vendor_api.with_store(store).get_customer(out.vendor_customer_id)
        if profile is None:
            log.info("customer.get.not_found_in_vendor", extra=self.log_extra(customer_id=out.id))
            raise CustomerNotFoundInVendorError()

        out = replace(out, first_name=profile.first_name)

        log.info("customer.get.ok", extra=self.log_extra(customer_id=out.id))
        return out

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _sign(self, customer_id: str, lifetime: timedelta) -> str:
        now = self.now_utc()
        return self.tokens.sign(
            TokenClaims(
                issuer=self.cfg.issuer,
                expires_at=now + lifetime,
                issued_at=now,
                not_before=now,
                payload={CUSTOMER_ID_KEY: customer_id},
            ),
            self.cfg.secret,
        )

    @staticmethod
    def _customer_id(claims: TokenClaims) -> str:
        """Extract the customer id from the token payload."""
        value = (claims.payload or {}).get(CUSTOMER_ID_KEY)
        if not isinstance(value, str) or not value:
            raise InvalidTokenError("invalid token payload")
        return value

    @staticmethod
    def now_utc() -> datetime:
        return datetime.now(UTC)
