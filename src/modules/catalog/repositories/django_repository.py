"""Django ORM implementation of the Catalog repository.

Stock changes never read-modify-write in Python: each one is a single
``UPDATE`` with an ``F()`` expression.  Decrements are conditional on
``stock >= quantity`` so concurrent orders can never drive stock below
zero; an update that matches no row means the reservation lost the race.
Items are processed in id order so concurrent transactions take row
locks in the same sequence.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from modules.catalog.exceptions import CatalogItemNotFound, InsufficientStock
from modules.catalog.models import CatalogItem
from modules.catalog.repositories.interfaces import ICatalogRepository

logger = structlog.get_logger(__name__)


class CatalogDjangoRepository(ICatalogRepository):
    """Concrete catalog repository backed by Django ORM."""

    entity_label = "Catalog item"

    def get_by_id(self, id: str) -> Optional[CatalogItem]:
        """Return a live item, or ``None`` for missing/deleted/malformed ids."""
        try:
            return CatalogItem.objects.alive().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[CatalogItem]:
        """List live items ordered by category then name."""
        queryset = CatalogItem.objects.alive().order_by("category", "name")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(
        self, entity: CatalogItem, update_fields: Optional[List[str]] = None
    ) -> CatalogItem:
        """Insert, or write back only ``update_fields`` for an existing row."""
        entity.save(update_fields=update_fields)
        if update_fields is not None and "stock" not in update_fields:
            entity.refresh_from_db(fields=["stock"])
        logger.info("catalog_item.saved", item_id=str(entity.id), name=entity.name)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        item = self.get_by_id(id)
        if not item:
            return False
        item.delete()
        logger.info("catalog_item.soft_deleted", item_id=str(id))
        return True

    def get_many(self, ids: Iterable[UUID]) -> Dict[UUID, CatalogItem]:
        wanted = {i for i in ids if i is not None}
        if not wanted:
            return {}
        return {
            item.id: item for item in CatalogItem.objects.alive().filter(id__in=wanted)
        }

    def list_selectable(self, category: Optional[str] = None) -> List[CatalogItem]:
        queryset = CatalogItem.objects.alive().filter(is_available=True, stock__gt=0)
        if category:
            queryset = queryset.filter(category=category)
        return list(queryset.order_by("name"))

    def list_low_stock(self) -> List[CatalogItem]:
        return list(
            CatalogItem.objects.alive()
            .filter(is_available=True, stock__lte=F("low_stock_threshold"))
            .order_by("stock", "name")
        )

    # ------------------------------------------------------------------
    # Atomic stock adjustment
    # ------------------------------------------------------------------

    @transaction.atomic
    def decrement_stock(self, quantities: Dict[UUID, int]) -> None:
        now = timezone.now()
        for item_id in sorted(quantities, key=str):
            quantity = quantities[item_id]
            if quantity <= 0:
                continue
            updated = CatalogItem.objects.filter(
                id=item_id, stock__gte=quantity
            ).update(stock=F("stock") - quantity, updated_at=now)
            if updated:
                logger.info(
                    "catalog_item.stock_decremented",
                    item_id=str(item_id),
                    quantity=quantity,
                )
                continue

            item = CatalogItem.objects.filter(id=item_id).first()
            if item is None:
                raise CatalogItemNotFound(f"Catalog item {item_id} not found.")
            logger.warning(
                "catalog_item.insufficient_stock",
                item_id=str(item_id),
                requested=quantity,
                available=item.stock,
            )
            raise InsufficientStock(
                f"{item.name}: requested {quantity}, available {item.stock}."
            )

    @transaction.atomic
    def increment_stock(self, quantities: Dict[UUID, int]) -> None:
        now = timezone.now()
        for item_id in sorted(quantities, key=str):
            quantity = quantities[item_id]
            if quantity <= 0:
                continue
            updated = CatalogItem.objects.filter(id=item_id).update(
                stock=F("stock") + quantity, updated_at=now
            )
            if updated:
                logger.info(
                    "catalog_item.stock_restored",
                    item_id=str(item_id),
                    quantity=quantity,
                )
            else:
                logger.warning("catalog_item.restore_missing_item", item_id=str(item_id))
