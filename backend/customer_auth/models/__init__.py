"""SQLAlchemy models; importing this package registers them on the metadata."""

from .customer import Customer
from .store import Store

__all__ = ["Customer", "Store"]
