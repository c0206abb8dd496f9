"""Catalog item model: every purchasable pizza ingredient.

Bases, sauces, cheeses, vegetables and meats share one shape and are
distinguished by ``category``.

Rules implemented:
- Unit price is never negative.
- Stock never goes negative (DB check constraint; decrements go through
  the conditional update in the repository).
- Items with ``is_available=False`` are not selectable for new orders.
- Soft delete via ``deleted_at`` keeps historical order references valid.
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import SoftDeleteModel

logger = structlog.get_logger(__name__)

DEFAULT_IMAGE_URL = "https://via.placeholder.com/300x200?text=Pizza"


class Category(models.TextChoices):
    BASE = "base", "Base"
    SAUCE = "sauce", "Sauce"
    CHEESE = "cheese", "Cheese"
    VEGETABLE = "vegetable", "Vegetable"
    MEAT = "meat", "Meat"


class CatalogItem(SoftDeleteModel):
    """A single ingredient with its price and stock level."""

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    image = models.URLField(max_length=500, blank=True, default=DEFAULT_IMAGE_URL)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    category = models.CharField(max_length=20, choices=Category.choices)
    is_available = models.BooleanField(default=True)
    stock = models.PositiveIntegerField(default=100)
    low_stock_threshold = models.PositiveIntegerField(default=20)

    class Meta:
        db_table = "catalog_items"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["category", "name"], name="catalog_category_name_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="catalog_items_price_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name="catalog_items_stock_non_negative",
            ),
        ]

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.low_stock_threshold

    @property
    def is_selectable(self) -> bool:
        """Whether a customer may pick this item for a new pizza."""
        return self.is_available and not self.is_deleted and self.stock > 0

    def clean(self) -> None:
        super().clean()
        if self.price is not None and self.price < 0:
            raise ValidationError({"price": "Price cannot be negative."})
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": "Stock cannot be negative."})

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "catalog_item_created",
                item_id=str(self.id),
                name=self.name,
                category=self.category,
            )

    def __str__(self) -> str:
        return f"{self.name} ({self.category})"
