from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from modules.accounts.models import User, UserRole
from modules.catalog.models import CatalogItem, Category
from modules.catalog.repositories.django_repository import CatalogDjangoRepository
from modules.notifications import reset_notifier, set_notifier
from modules.notifications.adapters import InMemoryNotificationGateway
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.payments import reset_gateway, set_gateway
from modules.payments.fake_adapter import FakeGateway


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def notifier():
    """In-memory notification channel, fresh for every test."""
    gateway = InMemoryNotificationGateway()
    set_notifier(gateway)
    yield gateway
    reset_notifier()


@pytest.fixture(autouse=True)
def payment_gateway(settings):
    gateway = FakeGateway(secret=settings.RAZORPAY_KEY_SECRET)
    set_gateway(gateway)
    yield gateway
    reset_gateway()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@pytest.fixture()
def customer():
    return User.objects.create_user(
        "alice",
        email="alice@example.com",
        password="secret123",
        first_name="Alice",
        phone="9876543210",
        street="12 MG Road",
        city="Bengaluru",
        state="KA",
        zip_code="560001",
    )


@pytest.fixture()
def other_customer():
    return User.objects.create_user(
        "bob", email="bob@example.com", password="secret123"
    )


@pytest.fixture()
def admin_user():
    return User.objects.create_user(
        "admin",
        email="admin@example.com",
        password="secret123",
        role=UserRole.ADMIN,
        is_staff=True,
    )


@pytest.fixture()
def customer_client(customer):
    client = APIClient()
    client.force_authenticate(user=customer)
    return client


@pytest.fixture()
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


def make_item(name, category, price, stock=100, threshold=20, **extra):
    return CatalogItem.objects.create(
        name=name,
        category=category,
        price=Decimal(str(price)),
        stock=stock,
        low_stock_threshold=threshold,
        **extra,
    )


@pytest.fixture()
def item_factory():
    return make_item


@pytest.fixture()
def thin_crust():
    return make_item("Thin Crust", Category.BASE, 150, stock=50, threshold=10)


@pytest.fixture()
def tomato_sauce():
    return make_item("Tomato Sauce", Category.SAUCE, 20)


@pytest.fixture()
def mozzarella():
    return make_item("Mozzarella", Category.CHEESE, 40)


@pytest.fixture()
def onions():
    return make_item("Onions", Category.VEGETABLE, 20)


@pytest.fixture()
def pepperoni():
    return make_item("Pepperoni", Category.MEAT, 60)


@pytest.fixture()
def margherita(thin_crust, tomato_sauce, mozzarella):
    """Customizations payload for a base + sauce + cheese pizza (210)."""
    return {
        "base": str(thin_crust.id),
        "sauce": str(tomato_sauce.id),
        "cheese": str(mozzarella.id),
    }


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_order_service():
    def _make(**kwargs):
        return OrderService(
            order_repository=OrderDjangoRepository(),
            catalog_repository=CatalogDjangoRepository(),
            **kwargs,
        )

    return _make
