from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.accounts.models import UserRole
from modules.catalog.dtos import PizzaSelectionDTO
from modules.catalog.models import CatalogItem, Category
from modules.catalog.repositories.django_repository import CatalogDjangoRepository
from modules.orders.dtos import CreateOrderDTO, OrderLineDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService

# (name, description, price, category, stock, low_stock_threshold)
CATALOG = [
    ("Thin Crust", "Crispy thin crust base", 150, Category.BASE, 50, 10),
    ("Thick Crust", "Soft and fluffy thick crust", 180, Category.BASE, 50, 10),
    ("Cheese Burst", "Crust filled with melted cheese", 220, Category.BASE, 50, 10),
    ("Whole Wheat", "Healthy whole wheat base", 160, Category.BASE, 50, 10),
    ("Gluten Free", "Gluten-free base for special dietary needs", 200, Category.BASE, 50, 10),
    ("Tomato Sauce", "Classic tomato sauce", 20, Category.SAUCE, 100, 20),
    ("BBQ Sauce", "Smoky BBQ sauce", 25, Category.SAUCE, 100, 20),
    ("Alfredo Sauce", "Creamy alfredo sauce", 30, Category.SAUCE, 100, 20),
    ("Pesto Sauce", "Fresh basil pesto", 35, Category.SAUCE, 100, 20),
    ("Spicy Sauce", "Hot and spicy sauce", 25, Category.SAUCE, 100, 20),
    ("Mozzarella", "Classic mozzarella cheese", 40, Category.CHEESE, 100, 20),
    ("Cheddar", "Sharp cheddar cheese", 45, Category.CHEESE, 100, 20),
    ("Parmesan", "Aged parmesan cheese", 50, Category.CHEESE, 100, 20),
    ("Goat Cheese", "Creamy goat cheese", 55, Category.CHEESE, 100, 20),
    ("Vegan Cheese", "Plant-based cheese", 60, Category.CHEESE, 100, 20),
    ("Bell Peppers", "Fresh bell peppers", 30, Category.VEGETABLE, 100, 20),
    ("Onions", "Sliced onions", 20, Category.VEGETABLE, 100, 20),
    ("Mushrooms", "Fresh mushrooms", 35, Category.VEGETABLE, 100, 20),
    ("Olives", "Black olives", 40, Category.VEGETABLE, 100, 20),
    ("Tomatoes", "Fresh tomatoes", 25, Category.VEGETABLE, 100, 20),
    ("Spinach", "Fresh spinach leaves", 30, Category.VEGETABLE, 100, 20),
    ("Jalapeños", "Spicy jalapeños", 35, Category.VEGETABLE, 100, 20),
    ("Corn", "Sweet corn kernels", 25, Category.VEGETABLE, 100, 20),
    ("Pepperoni", "Classic pepperoni", 60, Category.MEAT, 100, 20),
    ("Chicken", "Grilled chicken", 70, Category.MEAT, 100, 20),
    ("Bacon", "Crispy bacon", 65, Category.MEAT, 100, 20),
    ("Sausage", "Italian sausage", 55, Category.MEAT, 100, 20),
    ("Ham", "Sliced ham", 50, Category.MEAT, 100, 20),
]


class Command(BaseCommand):
    help = "Seed the database with the storefront catalog and demo accounts."

    def add_arguments(self, parser):
        parser.add_argument(
            "--orders",
            type=int,
            default=0,
            help="Also place this many random orders for the demo customer.",
        )

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding data...")

        users_created, customer = self._seed_users()
        items_created = self._seed_catalog()
        orders_created = self._seed_orders(customer, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"catalog_items={items_created}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self):
        User = get_user_model()
        created = 0
        if not User.objects.filter(email__iexact="admin@pizzaapp.com").exists():
            User.objects.create_user(
                "admin",
                email="admin@pizzaapp.com",
                password="admin123",
                first_name="Admin",
                last_name="User",
                role=UserRole.ADMIN,
                is_staff=True,
            )
            created += 1
        customer = User.objects.filter(username="customer").first()
        if customer is None:
            customer = User.objects.create_user(
                "customer",
                email="customer@pizzaapp.com",
                password="customer123",
                first_name="Demo",
                last_name="Customer",
                phone="9999999999",
                street="221 Baker Street",
                city="Mumbai",
                state="MH",
                zip_code="400001",
            )
            created += 1
        return created, customer

    def _seed_catalog(self) -> int:
        self.stdout.write("Creating catalog items...")
        created = 0
        for name, description, price, category, stock, threshold in CATALOG:
            _, was_created = CatalogItem.objects.get_or_create(
                name=name,
                category=category,
                deleted_at__isnull=True,
                defaults={
                    "description": description,
                    "price": Decimal(price),
                    "stock": stock,
                    "low_stock_threshold": threshold,
                },
            )
            created += int(was_created)
        return created

    def _seed_orders(self, customer, count: int) -> int:
        if count <= 0:
            return 0
        self.stdout.write("Placing orders...")
        by_category = {
            category: list(CatalogItem.objects.alive().filter(category=category))
            for category in Category.values
        }
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            catalog_repository=CatalogDjangoRepository(),
        )
        for _ in range(count):
            selection = PizzaSelectionDTO(
                base=random.choice(by_category[Category.BASE]).id,
                sauce=random.choice(by_category[Category.SAUCE]).id,
                cheese=random.choice(by_category[Category.CHEESE]).id,
                vegetables=[
                    v.id for v in random.sample(by_category[Category.VEGETABLE], k=2)
                ],
                meats=[random.choice(by_category[Category.MEAT]).id],
            )
            service.create_order(
                customer,
                CreateOrderDTO(
                    items=[OrderLineDTO(selection=selection, quantity=random.randint(1, 2))]
                ),
            )
        return count
