"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from typing import cast

from flask import Flask, current_app
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

from customer_auth.services._shared.ports.token_codec import TokenCodec
from customer_auth.services._shared.ports.vendor_api import VendorAPI

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations and the outbound adapters.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`customer_auth.models` package to ensure SQLAlchemy metadata is
        ready for migrations.

    Notes
    -----
    The token codec and the unscoped Shopify client are stored under
    ``app.extensions`` so tests can swap them for doubles before the first
    request.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from customer_auth import models as _models  # noqa: F401

    migrate.init_app(app, db)

    from customer_auth.infra.jwt.pyjwt_token_codec import PyJWTTokenCodec
    from customer_auth.infra.shopify.shopify_api import ShopifyAPI

    app.extensions.setdefault("token_codec", PyJWTTokenCodec())
    app.extensions.setdefault(
        "vendor_api",
        ShopifyAPI(
            api_version=app.config.get("SHOPIFY_API_VERSION", "2023-01"),
            scopes=app.config.get("SHOPIFY_SCOPES", "read_customers"),
            timeout=app.config.get("SHOPIFY_HTTP_TIMEOUT", 10),
        ),
    )


def get_token_codec() -> TokenCodec:
    """Return the token codec registered on the current application."""
    codec = current_app.extensions.get("token_codec")
    if codec is None:
        raise RuntimeError("Token codec is not initialized. Call init_app() first.")
    return cast(TokenCodec, codec)


def get_vendor_api() -> VendorAPI:
    """Return the unscoped vendor API registered on the current application."""
    api = current_app.extensions.get("vendor_api")
    if api is None:
        raise RuntimeError("Vendor API is not initialized. Call init_app() first.")
    return cast(VendorAPI, api)
