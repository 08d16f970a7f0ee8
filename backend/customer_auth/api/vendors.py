"""Tenant onboarding endpoints (OAuth install handshake)."""

from __future__ import annotations

from flask import Blueprint, redirect, request

from customer_auth.api.deps import json_response, timing, vendor_service
from customer_auth.schemas import InstalledSchema

bp = Blueprint("vendors", __name__)

installed_schema = InstalledSchema()


@bp.get("/install")
@timing
def install():
    """Redirect the merchant to the platform's consent screen."""

    url = vendor_service().handle_install(request.args.get("shop"))
    return redirect(url, code=302)


@bp.get("/redirect")
@timing
def oauth_redirect():
    """Complete installation from the platform's OAuth callback."""

    vendor_service().handle_redirect(request.args.get("shop"), request.args.to_dict(flat=True))
    return json_response(installed_schema.dump({"message": "successfully installed the app"}))
