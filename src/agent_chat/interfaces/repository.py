from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TypeVar, Generic

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """
    Generic repository interface for data access.

    Deletion is a soft operation: `deactivate` flips the active flag.
    """

    @abstractmethod
    async def get(self, id: str) -> T | None:
        """Get entity by ID."""
        pass

    @abstractmethod
    async def create(self, entity: T) -> T:
        """Create new entity."""
        pass

    @abstractmethod
    async def save(self, entity: T, **values) -> T:
        """Apply values to a loaded entity and persist them."""
        pass

    @abstractmethod
    async def deactivate(self, id: str) -> bool:
        """Soft delete entity by ID."""
        pass
