"""Catalog DRF serializers for API input/output."""

from __future__ import annotations

from rest_framework import serializers

from modules.catalog.models import CatalogItem, Category


class CatalogItemSerializer(serializers.ModelSerializer):
    """Read serializer for catalog items."""

    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = CatalogItem
        fields = [
            "id",
            "name",
            "description",
            "image",
            "price",
            "category",
            "is_available",
            "stock",
            "low_stock_threshold",
            "is_low_stock",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CatalogItemWriteSerializer(serializers.Serializer):
    """Admin create/update payload; ``partial=True`` for updates."""

    name = serializers.CharField(max_length=255)
    category = serializers.ChoiceField(choices=Category.choices)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    description = serializers.CharField(required=False, allow_blank=True)
    image = serializers.URLField(required=False, allow_blank=True, max_length=500)
    stock = serializers.IntegerField(required=False, min_value=0)
    low_stock_threshold = serializers.IntegerField(required=False, min_value=0)
    is_available = serializers.BooleanField(required=False)


class StockSerializer(serializers.Serializer):
    stock = serializers.IntegerField(min_value=0)


class PizzaSelectionSerializer(serializers.Serializer):
    """Ingredient references picked by the customer for one pizza."""

    base = serializers.UUIDField(required=False, allow_null=True)
    sauce = serializers.UUIDField(required=False, allow_null=True)
    cheese = serializers.UUIDField(required=False, allow_null=True)
    vegetables = serializers.ListField(
        child=serializers.UUIDField(), required=False, default=list
    )
    meats = serializers.ListField(
        child=serializers.UUIDField(), required=False, default=list
    )


class PriceRequestSerializer(PizzaSelectionSerializer):
    quantity = serializers.IntegerField(min_value=1, required=False, default=1)


class PricedComponentSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    category = serializers.CharField()
    slot = serializers.CharField()
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2)


class PriceQuoteSerializer(serializers.Serializer):
    breakdown = PricedComponentSerializer(source="components", many=True)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    quantity = serializers.IntegerField()
    total_price = serializers.DecimalField(source="total", max_digits=12, decimal_places=2)


def serialize_grouped(grouped: dict) -> dict:
    return {
        category: CatalogItemSerializer(items, many=True).data
        for category, items in grouped.items()
    }
