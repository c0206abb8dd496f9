"""Unit tests for the Pricing Engine."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.catalog.dtos import PizzaSelectionDTO
from modules.catalog.exceptions import CatalogItemUnavailable
from modules.catalog.pricing import PricingEngine
from modules.catalog.repositories.django_repository import CatalogDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def engine():
    return PricingEngine(CatalogDjangoRepository())


class TestQuote:
    def test_total_is_sum_of_component_prices(
        self, engine, thin_crust, tomato_sauce, mozzarella
    ):
        quote = engine.quote(
            PizzaSelectionDTO(
                base=thin_crust.id, sauce=tomato_sauce.id, cheese=mozzarella.id
            )
        )
        assert quote.unit_price == Decimal("210.00")
        assert quote.total == Decimal("210.00")
        assert [c.name for c in quote.components] == [
            "Thin Crust",
            "Tomato Sauce",
            "Mozzarella",
        ]

    def test_breakdown_carries_slot_and_category(self, engine, thin_crust, onions):
        quote = engine.quote(PizzaSelectionDTO(base=thin_crust.id, vegetables=[onions.id]))
        slots = {(c.slot, c.category) for c in quote.components}
        assert slots == {("base", "base"), ("vegetable", "vegetable")}

    def test_quantity_multiplies_line_total(self, engine, thin_crust, pepperoni):
        quote = engine.quote(
            PizzaSelectionDTO(base=thin_crust.id, meats=[pepperoni.id]), quantity=3
        )
        assert quote.unit_price == Decimal("210.00")
        assert quote.total == Decimal("630.00")

    def test_unknown_ids_are_ignored(self, engine, thin_crust):
        quote = engine.quote(
            PizzaSelectionDTO(base=thin_crust.id, sauce=uuid4(), vegetables=[uuid4()])
        )
        assert quote.component_ids == [thin_crust.id]
        assert quote.total == Decimal("150.00")

    def test_soft_deleted_items_do_not_resolve(self, engine, thin_crust, mozzarella):
        mozzarella.delete()
        quote = engine.quote(PizzaSelectionDTO(base=thin_crust.id, cheese=mozzarella.id))
        assert quote.total == Decimal("150.00")

    def test_empty_selection_prices_to_zero(self, engine):
        quote = engine.quote(PizzaSelectionDTO())
        assert quote.components == []
        assert quote.total == Decimal("0.00")

    def test_repeated_toppings_are_counted_once(self, engine, onions):
        quote = engine.quote(PizzaSelectionDTO(vegetables=[onions.id, onions.id]))
        assert quote.total == Decimal("20.00")

    def test_quantity_below_one_rejected(self, engine, thin_crust):
        with pytest.raises(ValueError):
            engine.quote(PizzaSelectionDTO(base=thin_crust.id), quantity=0)

    def test_unavailable_item_rejected_when_required(self, engine, thin_crust):
        thin_crust.is_available = False
        thin_crust.save()
        selection = PizzaSelectionDTO(base=thin_crust.id)

        assert engine.quote(selection).total == Decimal("150.00")
        with pytest.raises(CatalogItemUnavailable):
            engine.quote(selection, require_available=True)

    def test_prices_are_read_at_call_time(self, engine, thin_crust):
        selection = PizzaSelectionDTO(base=thin_crust.id)
        assert engine.quote(selection).total == Decimal("150.00")
        thin_crust.price = Decimal("175.00")
        thin_crust.save()
        assert engine.quote(selection).total == Decimal("175.00")
