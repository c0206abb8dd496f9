"""Order domain constants.

Status choices, the order state machine and delivery-time estimates.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    IN_KITCHEN = "in_kitchen", "In kitchen"
    OUT_FOR_DELIVERY = "out_for_delivery", "Out for delivery"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"


class PaymentStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PAID = "paid", "Paid"
    FAILED = "failed", "Failed"
    REFUNDED = "refunded", "Refunded"


VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.IN_KITCHEN, OrderStatus.CANCELLED},
    OrderStatus.IN_KITCHEN: {OrderStatus.OUT_FOR_DELIVERY},
    OrderStatus.OUT_FOR_DELIVERY: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}

TERMINAL_STATES: set[str] = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}

CANCELLABLE_STATES: set[str] = {OrderStatus.PENDING, OrderStatus.CONFIRMED}

# Minutes from "now" for the estimated delivery time.
ETA_MINUTES: dict[str, int] = {
    OrderStatus.CONFIRMED: 30,
    OrderStatus.IN_KITCHEN: 20,
    OrderStatus.OUT_FOR_DELIVERY: 10,
}

ORDER_NUMBER_PREFIX = "PZ"
ORDER_NUMBER_MAX_RETRIES = 5


class StockRestorePolicy(models.TextChoices):
    REPRESENTATIVE = "representative", "Representative item per line"
    COMPONENTS = "components", "Every decremented component"
