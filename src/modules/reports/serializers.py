from rest_framework import serializers

from modules.catalog.serializers import CatalogItemSerializer
from modules.orders.serializers import OrderListSerializer


class DashboardSerializer(serializers.Serializer):
    order_counts = serializers.DictField(child=serializers.IntegerField())
    total_orders = serializers.IntegerField()
    revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    recent_orders = OrderListSerializer(many=True)
    low_stock_items = CatalogItemSerializer(many=True)
