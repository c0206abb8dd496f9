"""Order repository interface.

Extends ``IRepository[Order]`` with what the Order aggregate needs:
atomic creation with line items, order number allocation, row locking,
status history and the aggregate queries used by reporting.

The Service Layer depends exclusively on this contract.
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items atomically.

        ``data`` holds ``user_id``, ``items`` (dicts with ``catalog_item_id``,
        ``base_id``, ``sauce_id``, ``cheese_id``, ``vegetable_ids``,
        ``meat_ids``, ``quantity``, ``unit_price``), ``delivery_address``
        and ``notes``.
        """

    @abstractmethod
    def next_order_number(self) -> str:
        """Allocate the next ``PZ000001``-style order number."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order holding a row-level lock."""

    @abstractmethod
    def add_history(
        self,
        order_id: Any,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
        user: Any = None,
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""

    @abstractmethod
    def queryset(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        """Lazy, eager-loading queryset (for filtering and pagination)."""

    @abstractmethod
    def count_by_status(self) -> Dict[str, int]:
        """Number of orders per status."""

    @abstractmethod
    def paid_revenue(self) -> Decimal:
        """Sum of ``total_amount`` over paid orders."""

    @abstractmethod
    def recent(self, limit: int) -> List[Order]:
        """The ``limit`` most recently created orders."""
