from decimal import Decimal

import django.core.validators
import uuid6
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="CatalogItem",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "deleted_at",
                    models.DateTimeField(
                        blank=True, db_index=True, default=None, null=True
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                (
                    "image",
                    models.URLField(
                        blank=True,
                        default="https://via.placeholder.com/300x200?text=Pizza",
                        max_length=500,
                    ),
                ),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0.00"))
                        ],
                    ),
                ),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("base", "Base"),
                            ("sauce", "Sauce"),
                            ("cheese", "Cheese"),
                            ("vegetable", "Vegetable"),
                            ("meat", "Meat"),
                        ],
                        max_length=20,
                    ),
                ),
                ("is_available", models.BooleanField(default=True)),
                ("stock", models.PositiveIntegerField(default=100)),
                ("low_stock_threshold", models.PositiveIntegerField(default=20)),
            ],
            options={
                "db_table": "catalog_items",
                "ordering": ["name"],
                "indexes": [
                    models.Index(
                        fields=["category", "name"], name="catalog_category_name_idx"
                    )
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("price__gte", 0)),
                        name="catalog_items_price_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("stock__gte", 0)),
                        name="catalog_items_stock_non_negative",
                    ),
                ],
            },
        ),
    ]
