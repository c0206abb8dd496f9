"""Order DTOs for the Service Layer.

Framework-agnostic Pydantic v2 models, immutable (``frozen=True``).

- ``OrderLineDTO``: one pizza (ingredient selection + quantity).
- ``CreateOrderDTO``: order placement request.
- ``VerifyPaymentDTO``: client callback after checkout.

Clients may send totals; they are never part of these contracts and
are recomputed by the Pricing Engine.
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from modules.accounts.dtos import AddressDTO
from modules.catalog.dtos import PizzaSelectionDTO


class OrderLineDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    selection: PizzaSelectionDTO
    quantity: int = 1

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class CreateOrderDTO(BaseModel):
    """Validates that ``items`` contains at least one line."""

    model_config = ConfigDict(frozen=True)

    items: List[OrderLineDTO]
    delivery_address: Optional[AddressDTO] = None
    notes: str = ""

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(cls, v: List[OrderLineDTO]) -> List[OrderLineDTO]:
        if not v:
            raise ValueError("Order items are required.")
        return v


class VerifyPaymentDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: UUID
    payment_id: str
    signature: str
    gateway_order_id: Optional[str] = None

    @field_validator("payment_id", "signature")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Missing payment details.")
        return v.strip()
