"""Pricing Engine.

Turns a pizza selection into an itemized, server-side price.  Prices are
always read from the catalog at call time; nothing the client sends is
trusted.

Ids that do not resolve to a live catalog item are skipped without
error.  That permissive behavior is relied on by existing clients and is
kept as is.  No stock check happens here: stock is enforced when an order
is confirmed.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

import structlog

from modules.catalog.dtos import PriceQuoteDTO, PricedComponentDTO
from modules.catalog.exceptions import CatalogItemUnavailable

if TYPE_CHECKING:
    from modules.catalog.dtos import PizzaSelectionDTO
    from modules.catalog.repositories.interfaces import ICatalogRepository

logger = structlog.get_logger(__name__)


class PricingEngine:
    def __init__(self, repository: ICatalogRepository) -> None:
        self._repo = repository

    def quote(
        self,
        selection: PizzaSelectionDTO,
        quantity: int = 1,
        require_available: bool = False,
    ) -> PriceQuoteDTO:
        """Price ``selection``; ``total = unit_price * quantity``.

        With ``require_available`` set (order creation), a resolved item
        flagged unavailable raises ``CatalogItemUnavailable``.
        """
        if quantity < 1:
            raise ValueError("Quantity must be at least 1.")

        slots = selection.slots()
        items = self._repo.get_many(item_id for _, item_id in slots)

        components = []
        unit_price = Decimal("0.00")
        for slot, item_id in slots:
            item = items.get(item_id)
            if item is None:
                logger.info("pricing.unresolved_item", item_id=str(item_id), slot=slot)
                continue
            if require_available and not item.is_available:
                raise CatalogItemUnavailable(f"{item.name} is currently unavailable.")
            unit_price += item.price
            components.append(
                PricedComponentDTO(
                    id=item.id,
                    name=item.name,
                    category=item.category,
                    slot=slot,
                    unit_price=item.price,
                )
            )

        return PriceQuoteDTO(
            components=components,
            unit_price=unit_price,
            quantity=quantity,
            total=unit_price * quantity,
        )
