import pytest

from modules.catalog.models import Category

pytestmark = pytest.mark.integration

CATALOG_URL = "/api/v1/catalog/"
PRICE_URL = "/api/v1/catalog/calculate-price/"


@pytest.fixture()
def storefront(thin_crust, tomato_sauce, mozzarella, onions, pepperoni, item_factory):
    item_factory("Thick Crust", Category.BASE, 180)
    item_factory("Sold Out Crust", Category.BASE, 200, stock=0)
    item_factory("Hidden Crust", Category.BASE, 210, is_available=False)


class TestCatalogListing:
    def test_lists_selectable_items(self, customer_client, storefront):
        response = customer_client.get(CATALOG_URL)
        assert response.status_code == 200
        names = [item["name"] for item in response.json()]
        assert "Sold Out Crust" not in names
        assert "Hidden Crust" not in names
        assert names == sorted(names)

    def test_filter_by_category(self, customer_client, storefront):
        response = customer_client.get(CATALOG_URL, {"category": "base"})
        assert [i["name"] for i in response.json()] == ["Thick Crust", "Thin Crust"]

    def test_unknown_category_is_400(self, customer_client, storefront):
        response = customer_client.get(CATALOG_URL, {"category": "dessert"})
        assert response.status_code == 400

    def test_varieties_grouped(self, customer_client, storefront):
        response = customer_client.get(f"{CATALOG_URL}varieties/")
        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"base", "sauce", "cheese", "vegetable", "meat"}
        assert "Hidden Crust" not in [i["name"] for i in body["base"]]


class TestCalculatePrice:
    def test_itemized_quote(self, customer_client, margherita):
        response = customer_client.post(PRICE_URL, margherita, format="json")
        assert response.status_code == 200
        body = response.json()
        assert body["total_price"] == "210.00"
        assert body["unit_price"] == "210.00"
        assert body["quantity"] == 1
        assert [c["slot"] for c in body["breakdown"]] == ["base", "sauce", "cheese"]

    def test_quantity_multiplies(self, customer_client, margherita):
        response = customer_client.post(
            PRICE_URL, {**margherita, "quantity": 2}, format="json"
        )
        assert response.json()["total_price"] == "420.00"

    def test_toppings_included(self, customer_client, thin_crust, onions, pepperoni):
        payload = {
            "base": str(thin_crust.id),
            "vegetables": [str(onions.id)],
            "meats": [str(pepperoni.id)],
        }
        response = customer_client.post(PRICE_URL, payload, format="json")
        assert response.json()["total_price"] == "230.00"

    def test_client_price_is_ignored(self, customer_client, margherita):
        response = customer_client.post(
            PRICE_URL, {**margherita, "total_price": "1.00"}, format="json"
        )
        assert response.json()["total_price"] == "210.00"

    def test_malformed_id_is_400(self, customer_client):
        response = customer_client.post(PRICE_URL, {"base": "not-a-uuid"}, format="json")
        assert response.status_code == 400

    def test_zero_quantity_is_400(self, customer_client, margherita):
        response = customer_client.post(
            PRICE_URL, {**margherita, "quantity": 0}, format="json"
        )
        assert response.status_code == 400
