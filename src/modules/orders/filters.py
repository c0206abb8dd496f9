import django_filters

from modules.orders.constants import OrderStatus, PaymentStatus
from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    """Back-office filters; dates compare against the local creation day."""

    status = django_filters.ChoiceFilter(choices=OrderStatus.choices)
    payment_status = django_filters.ChoiceFilter(choices=PaymentStatus.choices)
    paid = django_filters.BooleanFilter(method="filter_paid")
    user = django_filters.UUIDFilter(field_name="user_id")
    order_number = django_filters.CharFilter(lookup_expr="istartswith")
    start_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    min_total = django_filters.NumberFilter(field_name="total_amount", lookup_expr="gte")
    max_total = django_filters.NumberFilter(field_name="total_amount", lookup_expr="lte")

    class Meta:
        model = Order
        fields = ["status", "payment_status", "user", "order_number"]

    def filter_paid(self, queryset, name, value):
        if value:
            return queryset.filter(payment_status=PaymentStatus.PAID)
        return queryset.exclude(payment_status=PaymentStatus.PAID)
