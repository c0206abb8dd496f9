from __future__ import annotations

from decimal import Decimal

import pytest

from modules.catalog.dtos import PizzaSelectionDTO
from modules.catalog.models import Category
from modules.catalog.repositories.django_repository import CatalogDjangoRepository
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, OrderLineDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.reports.services import DashboardService

pytestmark = pytest.mark.unit


@pytest.fixture()
def dashboard_service():
    return DashboardService(OrderDjangoRepository(), CatalogDjangoRepository(), recent_limit=2)


def place(service, user, selection, quantity=1):
    dto = CreateOrderDTO(
        items=[OrderLineDTO(selection=PizzaSelectionDTO(**selection), quantity=quantity)]
    )
    return service.create_order(user, dto).order


def test_empty_dashboard(dashboard_service):
    dashboard = dashboard_service.build()
    assert dashboard.total_orders == 0
    assert dashboard.revenue == Decimal("0.00")
    assert set(dashboard.order_counts) == set(OrderStatus.values)
    assert set(dashboard.order_counts.values()) == {0}


def test_counts_revenue_and_recent(
    dashboard_service, make_order_service, customer, margherita
):
    paid = make_order_service(payments_enabled=False)
    pending = make_order_service(payments_enabled=True, test_mode=True)
    place(paid, customer, margherita)
    place(paid, customer, margherita, quantity=2)
    place(pending, customer, margherita)

    dashboard = dashboard_service.build()

    assert dashboard.order_counts[OrderStatus.CONFIRMED] == 2
    assert dashboard.order_counts[OrderStatus.PENDING] == 1
    assert dashboard.total_orders == 3
    assert dashboard.revenue == Decimal("630.00")
    assert len(dashboard.recent_orders) == 2


def test_low_stock_items_listed(dashboard_service, item_factory, thin_crust):
    low = item_factory("Olives", Category.VEGETABLE, 40, stock=5, threshold=20)
    assert dashboard_service.build().low_stock_items == [low]
