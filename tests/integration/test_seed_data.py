import pytest
from django.core.management import call_command

from modules.accounts.models import User
from modules.catalog.models import CatalogItem
from modules.orders.models import Order

pytestmark = pytest.mark.integration


def test_seed_creates_catalog_and_accounts():
    call_command("seed_data")

    assert CatalogItem.objects.count() == 28
    assert User.objects.get(email="admin@pizzaapp.com").is_admin
    assert User.objects.get(username="customer").default_address() is not None


def test_seed_is_idempotent():
    call_command("seed_data")
    call_command("seed_data")
    assert CatalogItem.objects.count() == 28
    assert User.objects.count() == 2


def test_seed_places_orders():
    call_command("seed_data", orders=3)
    assert Order.objects.filter(status="confirmed").count() == 3
