"""Store (tenant) model holding one shop's OAuth credentials."""

from __future__ import annotations

from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from customer_auth.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin


class Store(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    One upstream shop this app is installed into.

    Fields
    ------
    vendor_id : str
        Shop domain, e.g. ``acme.myshopify.com``. Unique.
    client_id, client_secret : str
        App credentials registered by an operator (``flask stores register``).
    scope : str | None
        Scopes granted by the last OAuth exchange.
    access_token : str | None
        Offline Admin API token; ``None`` until installation completes.
    storefront_access_token : str | None
        Delegate token used for Storefront GraphQL calls.
    """

    __tablename__ = "stores"

    vendor_id: Mapped[str] = mapped_column(String(255), nullable=False)
    client_id: Mapped[str] = mapped_column(String(255), nullable=False)
    client_secret: Mapped[str] = mapped_column(String(255), nullable=False)
    scope: Mapped[str | None] = mapped_column(String(255), nullable=True)
    access_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    storefront_access_token: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (UniqueConstraint("vendor_id", name="uq_stores_vendor_id"),)

    @property
    def is_installed(self) -> bool:
        """``True`` once the OAuth exchange stored an admin token."""
        return bool(self.access_token)
