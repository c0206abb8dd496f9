"""Admin dashboard reporting (read-only)."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.conf import settings

from modules.orders.constants import OrderStatus

if TYPE_CHECKING:
    from modules.catalog.repositories.interfaces import ICatalogRepository
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Dashboard:
    order_counts: Dict[str, int]
    total_orders: int
    revenue: Decimal
    recent_orders: List[Any] = field(default_factory=list)
    low_stock_items: List[Any] = field(default_factory=list)


class DashboardService:
    def __init__(
        self,
        order_repository: IOrderRepository,
        catalog_repository: ICatalogRepository,
        recent_limit: Optional[int] = None,
    ) -> None:
        self._order_repo = order_repository
        self._catalog_repo = catalog_repository
        self.recent_limit = recent_limit or settings.DASHBOARD_RECENT_ORDERS

    def build(self) -> Dashboard:
        """Counts for every status (zero filled), paid revenue, recent orders
        and the low-stock list."""
        raw = self._order_repo.count_by_status()
        counts = {value: raw.get(value, 0) for value in OrderStatus.values}
        dashboard = Dashboard(
            order_counts=counts,
            total_orders=sum(counts.values()),
            revenue=self._order_repo.paid_revenue(),
            recent_orders=self._order_repo.recent(self.recent_limit),
            low_stock_items=self._catalog_repo.list_low_stock(),
        )
        logger.info(
            "dashboard.built",
            total_orders=dashboard.total_orders,
            low_stock=len(dashboard.low_stock_items),
        )
        return dashboard
