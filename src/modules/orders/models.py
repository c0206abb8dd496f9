"""Order, OrderItem, OrderStatusHistory and OrderSequence models.

- Orders are never deleted; cancellation is a terminal status.
- ``order_number`` is ``PZ`` + a zero-padded sequence drawn from
  ``OrderSequence`` under a row lock.
- The delivery address is a snapshot taken at creation time.
- ``OrderItem`` keeps the ingredient selection plus a representative
  catalog item (first resolved of base, sauce, cheese, vegetables, meats).
  ``unit_price`` and ``line_total`` are server-side price snapshots.
- ``OrderStatusHistory`` is an append-only audit trail.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any
from uuid import UUID

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import (
    CANCELLABLE_STATES,
    ORDER_NUMBER_PREFIX,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    OrderStatus,
    PaymentStatus,
)
from shared.domain.events import DomainEventMixin


class Order(DomainEventMixin, BaseModel):
    """Order aggregate root."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
    )
    order_number = models.CharField(max_length=20, unique=True, editable=False)
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    payment_id = models.CharField(max_length=100, blank=True, default="")
    gateway_order_id = models.CharField(max_length=100, blank=True, default="")
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    # Delivery address snapshot
    delivery_street = models.CharField(max_length=255, blank=True, default="")
    delivery_city = models.CharField(max_length=100, blank=True, default="")
    delivery_state = models.CharField(max_length=100, blank=True, default="")
    delivery_zip_code = models.CharField(max_length=20, blank=True, default="")
    delivery_phone = models.CharField(max_length=20, blank=True, default="")

    estimated_delivery_time = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
            models.Index(fields=["user", "-created_at"], name="orders_user_created_idx"),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    @property
    def is_cancellable(self) -> bool:
        return self.status in CANCELLABLE_STATES

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    # ------------------------------------------------------------------
    # Order number
    # ------------------------------------------------------------------

    @staticmethod
    def format_order_number(value: int) -> str:
        """``PZ`` + six-digit zero-padded sequence (wider once it overflows)."""
        return f"{ORDER_NUMBER_PREFIX}{value:06d}"

    # ------------------------------------------------------------------
    # Address snapshot
    # ------------------------------------------------------------------

    def set_delivery_address(self, address: dict[str, Any] | None) -> None:
        address = address or {}
        self.delivery_street = address.get("street") or ""
        self.delivery_city = address.get("city") or ""
        self.delivery_state = address.get("state") or ""
        self.delivery_zip_code = address.get("zip_code") or ""
        self.delivery_phone = address.get("phone") or ""

    @property
    def delivery_address(self) -> dict[str, str]:
        return {
            "street": self.delivery_street,
            "city": self.delivery_city,
            "state": self.delivery_state,
            "zip_code": self.delivery_zip_code,
            "phone": self.delivery_phone,
        }

    def __str__(self) -> str:
        return f"{self.order_number} ({self.status})"


class OrderItem(BaseModel):
    """One pizza line of an order."""

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    catalog_item = models.ForeignKey(
        "catalog.CatalogItem",
        on_delete=models.PROTECT,
        related_name="order_lines",
    )
    base = models.ForeignKey(
        "catalog.CatalogItem",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="+",
    )
    sauce = models.ForeignKey(
        "catalog.CatalogItem",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="+",
    )
    cheese = models.ForeignKey(
        "catalog.CatalogItem",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="+",
    )
    vegetables = models.ManyToManyField(
        "catalog.CatalogItem", blank=True, related_name="+"
    )
    meats = models.ManyToManyField("catalog.CatalogItem", blank=True, related_name="+")
    quantity = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    line_total = models.DecimalField(max_digits=12, decimal_places=2, editable=False)

    class Meta:
        db_table = "order_items"
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    def save(self, *args: Any, **kwargs: Any) -> None:
        self.line_total = self.quantity * self.unit_price
        super().save(*args, **kwargs)

    def component_ids(self) -> list[UUID]:
        """Every selected ingredient id (base, sauce, cheese, vegetables, meats)."""
        ids = [i for i in (self.base_id, self.sauce_id, self.cheese_id) if i]
        ids.extend(v.id for v in self.vegetables.all())
        ids.extend(m.id for m in self.meats.all())
        return ids

    def __str__(self) -> str:
        return f"{self.catalog_item} x{self.quantity} ({self.line_total})"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail for order status transitions.

    ``user`` is ``None`` when the change was made by the system
    (automatic confirmation).
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
    )
    new_status = models.CharField(max_length=20, choices=OrderStatus.choices)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["order", "-created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order} : {self.old_status} -> {self.new_status}"


class OrderSequence(models.Model):
    """Single-row counter backing ``Order.order_number``."""

    id = models.PositiveSmallIntegerField(primary_key=True, default=1)
    last_value = models.PositiveBigIntegerField(default=0)

    class Meta:
        db_table = "order_sequence"

    def __str__(self) -> str:
        return f"order sequence at {self.last_value}"
