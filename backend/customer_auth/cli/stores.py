"""Flask CLI commands for managing tenants (stores)."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from customer_auth.core.extensions import get_vendor_api
from customer_auth.services.vendors import RegisterStoreIn, VendorService

LOGGER = logging.getLogger(__name__)


def _public_base_url() -> str:
    base = str(current_app.config.get("APP_BASE_URL", "")).rstrip("/")
    prefix = str(current_app.config.get("API_BASE_PREFIX", "")).strip("/")
    return f"{base}/{prefix}" if prefix else base


def _service() -> VendorService:
    return VendorService(vendor_api=get_vendor_api(), app_base_url=_public_base_url())


@click.group("stores")
def stores_cli() -> None:
    """Register and inspect tenant stores."""


@stores_cli.command("register")
@click.option("--vendor-id", required=True, help="Shop domain, e.g. acme.myshopify.com.")
@click.option("--client-id", required=True, help="App API key.")
@click.option(
    "--client-secret",
    required=True,
    prompt=True,
    hide_input=True,
    help="App API secret key.",
)
@with_appcontext
def register_store(vendor_id: str, client_id: str, client_secret: str) -> None:
    """Create a store, or update its app credentials if it already exists."""
    store, created = _service().register_store(
        RegisterStoreIn(vendor_id=vendor_id, client_id=client_id, client_secret=client_secret)
    )
    LOGGER.info("stores.register", extra={"vendor_id": store.vendor_id})
    verb = "Registered" if created else "Updated"
    click.echo(f"{verb} store {store.vendor_id} (id={store.id})")
    if not store.installed:
        click.echo(f"Install it at {_public_base_url()}/vendors/install?shop={store.vendor_id}")


@stores_cli.command("list")
@with_appcontext
def list_stores() -> None:
    """Print registered stores and their installation state."""
    stores = _service().list_stores()
    if not stores:
        click.echo("(no stores)")
        return
    width = max(len(s.vendor_id) for s in stores)
    for store in stores:
        state = "installed" if store.installed else "pending"
        click.echo(f"{store.vendor_id.ljust(width)}  {state:<9}  scope={store.scope or '-'}")
