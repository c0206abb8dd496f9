"""Domain events for the Orders bounded context.

Every event that should reach the customer carries the owning
``user_id``, the resulting ``status`` and a human readable ``message``.
"""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderEvent(DomainEvent):
    user_id: str = ""
    status: str = ""
    message: str = ""


@dataclass(frozen=True)
class OrderCreated(OrderEvent):
    """Raised when an order is persisted (still pending)."""


@dataclass(frozen=True)
class OrderConfirmed(OrderEvent):
    """Raised when an order is paid and confirmed."""


@dataclass(frozen=True)
class OrderStatusChanged(OrderEvent):
    """Raised on every admin driven status transition."""


@dataclass(frozen=True)
class OrderCancelled(OrderEvent):
    """Raised when the owner cancels an order."""


NOTIFIABLE_EVENTS = (OrderConfirmed, OrderStatusChanged, OrderCancelled)
