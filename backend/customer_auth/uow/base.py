"""Transaction boundary contract the services program against."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from customer_auth.repositories import CustomerRepository, StoreRepository


class UnitOfWork(ABC):
    """
    One use-case's view of storage, used as a context manager.

    ``customers`` and ``stores`` share a single transaction. Whether leaving
    the block commits is up to the implementation; an exception always
    discards pending changes.
    """

    customers: CustomerRepository
    stores: StoreRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
