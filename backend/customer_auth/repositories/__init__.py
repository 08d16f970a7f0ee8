"""Repository layer exports."""

from .base import BaseRepository
from .customer import CustomerRepository
from .store import StoreRepository

__all__ = ["BaseRepository", "CustomerRepository", "StoreRepository"]
