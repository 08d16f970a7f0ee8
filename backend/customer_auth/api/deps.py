"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from http import HTTPStatus
from typing import Any, TypeVar
from urllib.parse import urlsplit

from flask import Response, current_app, g, jsonify, request

from customer_auth.core.errors import APIError, Unauthorized
from customer_auth.core.extensions import get_token_codec, get_vendor_api
from customer_auth.core.logger import ensure_request_id
from customer_auth.services._shared.base import ServiceContext
from customer_auth.services._shared.errors import ServiceError
from customer_auth.services.customers import AuthTokenConfig, CustomerOut, CustomerService
from customer_auth.services.vendors import VendorService

F = TypeVar("F", bound=Callable[..., Any])

SHOP_DOMAIN_HEADER = "X-Shopify-Shop-Domain"
BEARER_PREFIX = "bearer "


# ------------------------------ Request parsing ------------------------------


def resolve_vendor_id() -> str | None:
    """Resolve the tenant (shop domain) the current request belongs to.

    Order: ``X-Shopify-Shop-Domain`` header, ``shop`` query parameter, then
    the host of the ``Origin`` header (storefront scripts run on the shop's
    own domain).
    """

    candidate = request.headers.get(SHOP_DOMAIN_HEADER) or request.args.get("shop")
    if not candidate:
        origin = request.headers.get("Origin")
        candidate = urlsplit(origin).hostname if origin else None
    if not candidate:
        return None
    return candidate.strip().lower() or None


def bearer_token() -> str:
    """Return the bearer token from ``Authorization`` or raise 401."""

    header = request.headers.get("Authorization", "")
    if not header.lower().startswith(BEARER_PREFIX):
        raise Unauthorized("invalid authorization header")
    token = header[len(BEARER_PREFIX) :].strip()
    if not token:
        raise Unauthorized("invalid authorization header")
    return token


# ------------------------------ Service wiring -------------------------------


def service_context() -> ServiceContext:
    """Build the explicit per-request context handed to services."""

    return ServiceContext(request_id=ensure_request_id(), vendor_id=resolve_vendor_id())


def customer_service() -> CustomerService:
    return CustomerService(
        token_codec=get_token_codec(),
        vendor_api=get_vendor_api(),
        token_cfg=AuthTokenConfig.from_mapping(current_app.config),
        ctx=service_context(),
    )


def vendor_service() -> VendorService:
    base_url = str(current_app.config.get("APP_BASE_URL", "")).rstrip("/")
    prefix = str(current_app.config.get("API_BASE_PREFIX", "")).strip("/")
    return VendorService(
        vendor_api=get_vendor_api(),
        app_base_url=f"{base_url}/{prefix}" if prefix else base_url,
        ctx=service_context(),
    )


# ------------------------------ Authentication -------------------------------


def require_customer(func: F) -> F:
    """Ensure the request carries a valid customer access token.

    The verified customer is stored on ``g.customer``. Token and lookup
    failures are rejected with 401 carrying the underlying error code.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = bearer_token()
        try:
            g.customer = customer_service().verify_customer_access_token(token)
        except ServiceError as err:
            raise APIError.from_service_error(err, status_code=HTTPStatus.UNAUTHORIZED) from err
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_customer() -> CustomerOut:
    """Return the customer attached by :func:`require_customer`."""

    return g.customer  # type: ignore[no-any-return]


# ------------------------------ Responses ------------------------------------


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
