"""Catalog repository interface.

Besides plain look-ups, the contract exposes the two atomic stock
operations used by the order workflow.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.catalog.models import CatalogItem


class ICatalogRepository(IRepository["CatalogItem"]):
    """Repository contract for catalog items."""

    @abstractmethod
    def save(
        self, entity: CatalogItem, update_fields: Optional[List[str]] = None
    ) -> CatalogItem:
        """Persist an item; updates must name the columns they change."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Soft-delete an item; ``False`` when it does not exist."""

    @abstractmethod
    def get_many(self, ids: Iterable[UUID]) -> Dict[UUID, CatalogItem]:
        """Resolve ids to live items; unknown ids are simply absent."""

    @abstractmethod
    def list_selectable(self, category: Optional[str] = None) -> List[CatalogItem]:
        """Available, in-stock items sorted by name."""

    @abstractmethod
    def list_low_stock(self) -> List[CatalogItem]:
        """Available items whose stock is at or below their threshold."""

    @abstractmethod
    def decrement_stock(self, quantities: Dict[UUID, int]) -> None:
        """Atomically subtract stock; raises ``InsufficientStock`` on underflow."""

    @abstractmethod
    def increment_stock(self, quantities: Dict[UUID, int]) -> None:
        """Atomically add stock back."""
