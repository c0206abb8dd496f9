"""Catalog DTOs for the Service Layer.

Framework-agnostic Pydantic v2 models, immutable (``frozen=True``).

- ``CreateCatalogItemDTO`` / ``UpdateCatalogItemDTO``: admin inventory input.
- ``PizzaSelectionDTO``: the ingredient references a customer picked.
- ``PricedComponentDTO`` / ``PriceQuoteDTO``: Pricing Engine output.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from modules.catalog.models import Category

# ---------------------------------------------------------------------------
# Inventory input
# ---------------------------------------------------------------------------


class CreateCatalogItemDTO(BaseModel):
    """Validates price >= 0, stock >= 0 and threshold >= 0."""

    model_config = ConfigDict(frozen=True)

    name: str
    category: Category
    price: Decimal
    description: str = ""
    image: Optional[str] = None
    stock: int = 100
    low_stock_threshold: int = 20
    is_available: bool = True

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip()

    @field_validator("price")
    @classmethod
    def price_must_be_non_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @field_validator("stock", "low_stock_threshold")
    @classmethod
    def counts_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock values cannot be negative.")
        return v


class UpdateCatalogItemDTO(BaseModel):
    """All fields optional; only supplied fields are updated."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    category: Optional[Category] = None
    price: Optional[Decimal] = None
    description: Optional[str] = None
    image: Optional[str] = None
    stock: Optional[int] = None
    low_stock_threshold: Optional[int] = None
    is_available: Optional[bool] = None

    @field_validator("price")
    @classmethod
    def price_must_be_non_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @field_validator("stock", "low_stock_threshold")
    @classmethod
    def counts_must_be_non_negative(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("Stock values cannot be negative.")
        return v


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------


class PizzaSelectionDTO(BaseModel):
    """At most one base, sauce and cheese plus any vegetables and meats.

    Repeated vegetable/meat ids collapse to a single selection.
    """

    model_config = ConfigDict(frozen=True)

    base: Optional[UUID] = None
    sauce: Optional[UUID] = None
    cheese: Optional[UUID] = None
    vegetables: List[UUID] = []
    meats: List[UUID] = []

    @field_validator("vegetables", "meats")
    @classmethod
    def deduplicate(cls, v: List[UUID]) -> List[UUID]:
        return list(dict.fromkeys(v))

    def slots(self) -> List[tuple[str, UUID]]:
        """Every referenced id with the slot it was selected for, in order."""
        pairs: List[tuple[str, UUID]] = []
        for slot in ("base", "sauce", "cheese"):
            value = getattr(self, slot)
            if value is not None:
                pairs.append((slot, value))
        pairs.extend(("vegetable", v) for v in self.vegetables)
        pairs.extend(("meat", m) for m in self.meats)
        return pairs


class PricedComponentDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str
    category: str
    slot: str
    unit_price: Decimal


class PriceQuoteDTO(BaseModel):
    """Itemized price for one pizza, multiplied out by ``quantity``."""

    model_config = ConfigDict(frozen=True)

    components: List[PricedComponentDTO]
    unit_price: Decimal
    quantity: int
    total: Decimal

    @property
    def component_ids(self) -> List[UUID]:
        return [c.id for c in self.components]
