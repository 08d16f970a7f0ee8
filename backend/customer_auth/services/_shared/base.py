# customer_auth/services/_shared/base.py
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from customer_auth.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

if TYPE_CHECKING:
    from customer_auth.models.store import Store


@dataclass(slots=True)
class ServiceContext:
    """
    Per-request data a service needs but must not read from Flask globals.

    :param request_id: Correlation id copied into every log record.
    :param vendor_id: Shop domain the request was resolved to, if any.
    """

    request_id: str | None = None
    vendor_id: str | None = None


class BaseService:
    """
    Shared plumbing for the customer and vendor services.

    Subclasses open storage through :meth:`rw_uow` / :meth:`ro_uow` only and
    log through :meth:`log_extra` so records carry the request and tenant.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        self.ctx = ctx or ServiceContext()

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """Unit of Work that commits when its block exits cleanly."""
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """Unit of Work that refuses writes and always rolls back."""
        return SQLAlchemyReadOnlyUnitOfWork()

    def load_store(self, vendor_id: str) -> Store | None:
        """
        Read a tenant in a short read-only unit of work.

        The store comes back detached with its columns loaded, so upstream
        calls made with it do not hold a database transaction open.
        """
        with self.ro_uow() as uow:
            store = uow.stores.get_by_vendor_id(vendor_id)
            if store is not None:
                uow.stores.detach(store)
        return store

    def log_extra(self, **fields: Any) -> dict[str, Any]:
        """
        Build the ``extra`` mapping for a log call.

        ``None`` values are dropped so absent ids do not show up as nulls.

        :param fields: Structured keys such as ``customer_id``.
        :rtype: dict[str, Any]
        """
        extra: dict[str, Any] = {"request_id": self.ctx.request_id}
        if self.ctx.vendor_id:
            extra["vendor_id"] = self.ctx.vendor_id
        extra.update({k: v for k, v in fields.items() if v is not None})
        return extra
