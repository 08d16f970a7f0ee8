"""Customer model mapping an upstream identity to a local record."""

from __future__ import annotations

from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, reconstructor

from customer_auth.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin


class Customer(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Local customer record created on first successful storefront login.

    Fields
    ------
    id : str
        Locally generated UUID; this is what tokens carry.
    vendor_customer_id : str
        Customer id on the upstream platform. Unique.
    refresh_token : str | None
        Current refresh token. Overwritten on every login, so at most one is
        valid at a time.
    first_name : str | None
        Display name fetched live from the upstream platform. Transient,
        never persisted.
    """

    __tablename__ = "customers"

    vendor_customer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("vendor_customer_id", name="uq_customers_vendor_customer_id"),
    )

    def __init__(self, **kwargs) -> None:
        first_name = kwargs.pop("first_name", None)
        super().__init__(**kwargs)
        self.first_name: str | None = first_name

    @reconstructor
    def _init_on_load(self) -> None:
        self.first_name = None
