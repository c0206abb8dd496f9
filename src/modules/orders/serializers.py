"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.  Client supplied prices or totals are
not part of any input serializer and are dropped.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.accounts.models import User
from modules.accounts.serializers import AddressSerializer
from modules.catalog.models import CatalogItem
from modules.catalog.serializers import PizzaSelectionSerializer
from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem, OrderStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class OrderLineSerializer(serializers.Serializer):
    customizations = PizzaSelectionSerializer()
    quantity = serializers.IntegerField(min_value=1, required=False, default=1)


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order creation request payload."""

    items = OrderLineSerializer(many=True, allow_empty=False)
    delivery_address = AddressSerializer(required=False, allow_null=True)
    notes = serializers.CharField(required=False, default="", allow_blank=True)


class VerifyPaymentSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    payment_id = serializers.CharField(max_length=100)
    signature = serializers.CharField(max_length=255)
    gateway_order_id = serializers.CharField(
        max_length=100, required=False, allow_blank=True
    )


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    notes = serializers.CharField(required=False, default="", allow_blank=True)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class ComponentSerializer(serializers.ModelSerializer):
    class Meta:
        model = CatalogItem
        fields = ["id", "name", "category", "price", "image"]
        read_only_fields = fields


class OrderItemSerializer(serializers.ModelSerializer):
    """Line item with its resolved ingredients."""

    name = serializers.CharField(source="catalog_item.name", read_only=True)
    base = ComponentSerializer(read_only=True)
    sauce = ComponentSerializer(read_only=True)
    cheese = ComponentSerializer(read_only=True)
    vegetables = ComponentSerializer(many=True, read_only=True)
    meats = ComponentSerializer(many=True, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "catalog_item_id",
            "name",
            "base",
            "sauce",
            "cheese",
            "vegetables",
            "meats",
            "quantity",
            "unit_price",
            "line_total",
        ]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderStatusHistory
        fields = ["id", "old_status", "new_status", "notes", "created_at"]
        read_only_fields = fields


class OrderCustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "username", "email", "first_name", "last_name", "phone"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested items and history."""

    customer = OrderCustomerSerializer(source="user", read_only=True)
    delivery_address = serializers.DictField(read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "customer",
            "status",
            "payment_status",
            "payment_id",
            "gateway_order_id",
            "total_amount",
            "delivery_address",
            "estimated_delivery_time",
            "notes",
            "created_at",
            "updated_at",
            "items",
            "status_history",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order lists."""

    customer = OrderCustomerSerializer(source="user", read_only=True)
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "customer",
            "status",
            "payment_status",
            "total_amount",
            "estimated_delivery_time",
            "item_count",
            "created_at",
        ]
        read_only_fields = fields

    def get_item_count(self, obj: Order) -> int:
        return sum(item.quantity for item in obj.items.all())


class PaymentIntentSerializer(serializers.Serializer):
    id = serializers.CharField()
    amount = serializers.IntegerField(source="amount_minor")
    currency = serializers.CharField()
    receipt = serializers.CharField()
    notes = serializers.DictField()
