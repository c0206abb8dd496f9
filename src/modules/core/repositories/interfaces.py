"""Generic repository contract.

Every module's repository interface extends ``IRepository[T]``; services
depend on these abstractions and never on the ORM.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    #: Used in "not found" messages raised by ``require``.
    entity_label = "Entity"

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Return the entity, or ``None`` for unknown or malformed ids."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[T]:
        """List entities matching optional ORM look-ups."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""

    def require(self, id: Any, error: Type[Exception]) -> T:
        """Like ``get_by_id`` but raises ``error`` when nothing matches."""
        entity = self.get_by_id(str(id))
        if entity is None:
            raise error(f"{self.entity_label} {id} not found.")
        return entity
