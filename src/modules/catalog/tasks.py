"""Periodic catalog tasks (scheduled by Celery beat)."""

import structlog
from celery import shared_task

from modules.catalog.alerts import send_low_stock_alert
from modules.catalog.repositories.django_repository import CatalogDjangoRepository
from modules.catalog.services import CatalogService

logger = structlog.get_logger(__name__)


@shared_task(name="catalog.check_low_stock")
def check_low_stock():
    """Find low-stock items and email the admin about them."""
    items = CatalogService(repository=CatalogDjangoRepository()).list_low_stock()
    notified = send_low_stock_alert(items)
    logger.info("low_stock.check_completed", low_stock_items=len(items), notified=notified)
    return {"low_stock_items": len(items), "notified": notified}
