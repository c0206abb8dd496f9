"""Catalog service layer (Use Cases).

Customer-facing listing queries and the admin inventory operations.
Stock changes made by orders do not go through here; the order workflow
calls the repository's atomic stock operations directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional

import structlog
from django.db import transaction

from modules.catalog.exceptions import CatalogItemNotFound
from modules.catalog.models import Category, CatalogItem, DEFAULT_IMAGE_URL

if TYPE_CHECKING:
    from modules.catalog.dtos import CreateCatalogItemDTO, UpdateCatalogItemDTO
    from modules.catalog.repositories.interfaces import ICatalogRepository

logger = structlog.get_logger(__name__)

_UPDATABLE_FIELDS = (
    "name",
    "category",
    "price",
    "description",
    "image",
    "low_stock_threshold",
    "is_available",
)


def group_by_category(items: List[CatalogItem]) -> Dict[str, List[CatalogItem]]:
    """Bucket items by category, keeping the input order inside each bucket."""
    grouped: Dict[str, List[CatalogItem]] = {}
    for item in items:
        grouped.setdefault(item.category, []).append(item)
    return grouped


class CatalogService:
    """Application service for catalog use-cases."""

    def __init__(self, repository: ICatalogRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands (admin)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_item(self, dto: CreateCatalogItemDTO) -> CatalogItem:
        item = CatalogItem(
            name=dto.name,
            category=dto.category,
            price=dto.price,
            description=dto.description,
            image=dto.image or DEFAULT_IMAGE_URL,
            stock=dto.stock,
            low_stock_threshold=dto.low_stock_threshold,
            is_available=dto.is_available,
        )
        item = self._repo.save(item)
        logger.info("catalog.item_created", item_id=str(item.id), category=item.category)
        return item

    @transaction.atomic
    def update_item(self, id: str, dto: UpdateCatalogItemDTO) -> CatalogItem:
        """Raises ``CatalogItemNotFound`` when the item does not exist."""
        item = self.get_item(id)
        changed = []
        for field in _UPDATABLE_FIELDS:
            value = getattr(dto, field)
            if value is not None:
                setattr(item, field, value)
                changed.append(field)
        if changed:
            item = self._repo.save(item, update_fields=changed)
        if dto.stock is not None:
            item = self.set_stock(id, dto.stock)
        logger.info("catalog.item_updated", item_id=str(id), fields=changed)
        return item

    @transaction.atomic
    def set_stock(self, id: str, stock: int) -> CatalogItem:
        """Overwrite the stock level (restocking).

        Only the ``stock`` column is written.
        """
        if stock < 0:
            raise ValueError("Stock cannot be negative.")
        item = self.get_item(id)
        item.stock = stock
        item = self._repo.save(item, update_fields=["stock"])
        logger.info("catalog.stock_set", item_id=str(id), stock=stock)
        return item

    @transaction.atomic
    def delete_item(self, id: str) -> None:
        if not self._repo.delete(id):
            raise CatalogItemNotFound(f"Catalog item {id} not found.")
        logger.info("catalog.item_deleted", item_id=str(id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_item(self, id: str) -> CatalogItem:
        return self._repo.require(id, CatalogItemNotFound)

    def list_selectable(self, category: Optional[str] = None) -> List[CatalogItem]:
        """Items a customer can pick right now, sorted by name."""
        if category is not None and category not in Category.values:
            raise ValueError(f"Unknown category '{category}'.")
        return self._repo.list_selectable(category)

    def list_varieties(self) -> Dict[str, List[CatalogItem]]:
        """Available items grouped by category."""
        return group_by_category(self._repo.list({"is_available": True}))

    def list_inventory(self, category: Optional[str] = None) -> Dict[str, List[CatalogItem]]:
        """Every live item (available or not) grouped by category."""
        filters = {"category": category} if category else None
        return group_by_category(self._repo.list(filters))

    def list_low_stock(self) -> List[CatalogItem]:
        return self._repo.list_low_stock()
