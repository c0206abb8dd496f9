"""Django ORM implementation of the Order repository.

Order numbers come from the single-row ``OrderSequence`` table, locked
with ``SELECT FOR UPDATE`` for the duration of the allocating
transaction.  The unique constraint on ``order_number`` backs it up: an
insert that still collides is retried with a fresh number a bounded
number of times.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Count, QuerySet, Sum

from modules.orders.constants import ORDER_NUMBER_MAX_RETRIES, PaymentStatus
from modules.orders.exceptions import OrderNumberUnavailable
from modules.orders.models import Order, OrderItem, OrderSequence, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

_PREFETCH = (
    "items__catalog_item",
    "items__base",
    "items__sauce",
    "items__cheese",
    "items__vegetables",
    "items__meats",
    "status_history",
)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    entity_label = "Order"

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        items = data.get("items", [])
        order = Order(user_id=data["user_id"], notes=data.get("notes", ""))
        order.set_delivery_address(data.get("delivery_address"))
        order.total_amount = sum(
            (item["unit_price"] * item["quantity"] for item in items),
            Decimal("0.00"),
        )
        self._insert_with_number(order)

        for item_data in items:
            item = OrderItem(
                order=order,
                catalog_item_id=item_data["catalog_item_id"],
                base_id=item_data.get("base_id"),
                sauce_id=item_data.get("sauce_id"),
                cheese_id=item_data.get("cheese_id"),
                quantity=item_data["quantity"],
                unit_price=item_data["unit_price"],
            )
            item.save()
            if item_data.get("vegetable_ids"):
                item.vegetables.set(item_data["vegetable_ids"])
            if item_data.get("meat_ids"):
                item.meats.set(item_data["meat_ids"])

        logger.info(
            "order.persisted",
            order_id=str(order.id),
            order_number=order.order_number,
            item_count=len(items),
            total_amount=str(order.total_amount),
        )
        return order

    def _insert_with_number(self, order: Order) -> None:
        for attempt in range(1, ORDER_NUMBER_MAX_RETRIES + 1):
            order.order_number = self.next_order_number()
            try:
                with transaction.atomic():
                    order.save(force_insert=True)
                return
            except IntegrityError:
                logger.warning(
                    "order.number_collision",
                    order_number=order.order_number,
                    attempt=attempt,
                )
        raise OrderNumberUnavailable(
            f"Failed to allocate a unique order_number after "
            f"{ORDER_NUMBER_MAX_RETRIES} attempts"
        )

    @transaction.atomic
    def next_order_number(self) -> str:
        sequence, _ = OrderSequence.objects.select_for_update().get_or_create(pk=1)
        sequence.last_value += 1
        sequence.save(update_fields=["last_value"])
        return Order.format_order_number(sequence.last_value)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        Returns ``None`` for non-existent or malformed ids.
        """
        try:
            return self.queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Items are prefetched so the caller can iterate over them while the
        row is locked.
        """
        try:
            return (
                Order.objects.select_for_update()
                .select_related("user")
                .prefetch_related(*_PREFETCH)
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def queryset(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        queryset = Order.objects.select_related("user").prefetch_related(*_PREFETCH)
        if filters:
            queryset = queryset.filter(**filters)
        return queryset.order_by("-created_at", "-id")

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        return list(self.queryset(filters))

    # ------------------------------------------------------------------
    # Save / history
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        entity.save()
        logger.info(
            "order.saved",
            order_id=str(entity.id),
            status=entity.status,
            payment_status=entity.payment_status,
        )
        return entity

    @transaction.atomic
    def add_history(
        self,
        order_id: Any,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
        user: Any = None,
    ) -> OrderStatusHistory:
        history = OrderStatusHistory.objects.create(
            order_id=order_id,
            old_status=old_status,
            new_status=status,
            notes=notes,
            user=user,
        )
        logger.info(
            "order.history_added",
            order_id=str(order_id),
            old_status=old_status,
            new_status=status,
        )
        return history

    # ------------------------------------------------------------------
    # Reporting aggregates
    # ------------------------------------------------------------------

    def count_by_status(self) -> Dict[str, int]:
        rows = Order.objects.order_by().values("status").annotate(total=Count("id"))
        return {row["status"]: row["total"] for row in rows}

    def paid_revenue(self) -> Decimal:
        result = Order.objects.filter(payment_status=PaymentStatus.PAID).aggregate(
            revenue=Sum("total_amount")
        )
        return result["revenue"] or Decimal("0.00")

    def recent(self, limit: int) -> List[Order]:
        return list(self.queryset()[:limit])
