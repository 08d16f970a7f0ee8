"""Storefront customer endpoints: login, token refresh and profile."""

from __future__ import annotations

from flask import Blueprint, request

from customer_auth.api.deps import (
    bearer_token,
    current_customer,
    customer_service,
    json_response,
    require_customer,
    resolve_vendor_id,
    timing,
)
from customer_auth.schemas import AccessTokenSchema, CustomerSchema, LoginSchema
from customer_auth.services.customers import GetCustomerIn, LoginIn

bp = Blueprint("customers", __name__)

login_schema = LoginSchema()
token_schema = AccessTokenSchema()
customer_schema = CustomerSchema()


@bp.post("/login")
@timing
def login():
    """Check credentials upstream and return a fresh access token."""

    data = login_schema.load(request.get_json(silent=True) or {})
    service = customer_service()
    access_token = service.login_customer(
        LoginIn(
            email=data["email"],
            password=data["password"],
            vendor_id=resolve_vendor_id() or "",
        )
    )
    return json_response(token_schema.dump({"access_token": access_token}))


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Exchange a (possibly expired) access token for a new one."""

    token = bearer_token()
    access_token = customer_service().refresh_customer_access_token(token)
    return json_response(token_schema.dump({"access_token": access_token}))


@bp.get("/me")
@require_customer
@timing
def me():
    """Return the authenticated customer with its live display name."""

    customer = customer_service().get_customer(
        GetCustomerIn(customer_id=current_customer().id, vendor_id=resolve_vendor_id())
    )
    return json_response(customer_schema.dump(customer))
