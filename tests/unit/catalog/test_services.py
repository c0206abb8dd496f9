from __future__ import annotations

from decimal import Decimal

import pytest

from modules.catalog.dtos import CreateCatalogItemDTO, UpdateCatalogItemDTO
from modules.catalog.exceptions import CatalogItemNotFound
from modules.catalog.models import CatalogItem, Category
from modules.catalog.repositories.django_repository import CatalogDjangoRepository
from modules.catalog.services import CatalogService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return CatalogService(repository=CatalogDjangoRepository())


class TestInventoryCommands:
    def test_create_item(self, service):
        item = service.create_item(
            CreateCatalogItemDTO(name=" Basil ", category=Category.VEGETABLE, price=Decimal("15"))
        )
        assert item.name == "Basil"
        assert item.stock == 100
        assert item.low_stock_threshold == 20
        assert item.image

    def test_create_rejects_negative_price(self):
        with pytest.raises(ValueError):
            CreateCatalogItemDTO(name="Bad", category=Category.MEAT, price=Decimal("-1"))

    def test_update_only_supplied_fields(self, service, onions):
        item = service.update_item(
            str(onions.id), UpdateCatalogItemDTO(price=Decimal("22.50"))
        )
        assert item.price == Decimal("22.50")
        assert item.name == "Onions"

    def test_update_keeps_stock_decremented_after_load(self, onions):
        class RacingRepository(CatalogDjangoRepository):
            """An order confirms between the admin loading the item and saving it."""

            def get_by_id(self, id):
                item = super().get_by_id(id)
                self.decrement_stock({item.id: 3})
                return item

        service = CatalogService(repository=RacingRepository())
        item = service.update_item(
            str(onions.id), UpdateCatalogItemDTO(description="Red onions")
        )

        onions.refresh_from_db()
        assert onions.stock == 97
        assert onions.description == "Red onions"
        assert item.stock == 97

    def test_update_with_stock_overwrites_level(self, service, onions):
        item = service.update_item(
            str(onions.id), UpdateCatalogItemDTO(stock=5, is_available=False)
        )
        onions.refresh_from_db()
        assert (item.stock, onions.stock) == (5, 5)
        assert onions.is_available is False

    def test_update_missing_item(self, service):
        with pytest.raises(CatalogItemNotFound):
            service.update_item(
                "0190a000-0000-7000-8000-000000000000", UpdateCatalogItemDTO(name="x")
            )

    def test_set_stock(self, service, onions):
        assert service.set_stock(str(onions.id), 7).stock == 7

    def test_set_negative_stock_rejected(self, service, onions):
        with pytest.raises(ValueError):
            service.set_stock(str(onions.id), -1)
        onions.refresh_from_db()
        assert onions.stock == 100

    def test_delete_is_soft(self, service, onions):
        service.delete_item(str(onions.id))
        assert CatalogItem.objects.filter(id=onions.id).exists()
        assert not CatalogItem.objects.alive().filter(id=onions.id).exists()
        with pytest.raises(CatalogItemNotFound):
            service.get_item(str(onions.id))


class TestListings:
    def test_varieties_grouped_by_category(
        self, service, thin_crust, tomato_sauce, onions, pepperoni
    ):
        grouped = service.list_varieties()
        assert set(grouped) == {"base", "sauce", "vegetable", "meat"}
        assert grouped["base"] == [thin_crust]

    def test_inventory_filter_by_category(self, service, thin_crust, onions):
        grouped = service.list_inventory(Category.VEGETABLE)
        assert list(grouped) == ["vegetable"]

    def test_unknown_category_rejected(self, service):
        with pytest.raises(ValueError):
            service.list_selectable("dessert")
