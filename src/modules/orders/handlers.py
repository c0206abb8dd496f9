"""Event handlers for Orders domain events.

Notifications are fire-and-forget: a delivery failure is logged and
never propagates back into the order workflow.
"""

from __future__ import annotations

import structlog

from modules.notifications import get_notifier
from modules.notifications.port import NotificationEvent
from modules.orders.events import OrderCreated, OrderEvent
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    def handle(self, event: OrderCreated) -> None:
        logger.info(
            "order.event.created",
            order_id=str(event.aggregate_id),
            user_id=event.user_id,
        )


class NotifyOrderOwnerHandler(IEventHandler[OrderEvent]):
    """Pushes the order update to the owner's notification channel."""

    def handle(self, event: OrderEvent) -> None:
        log = logger.bind(
            order_id=str(event.aggregate_id),
            user_id=event.user_id,
            status=event.status,
            event_name=event.event_name,
        )
        payload = NotificationEvent(
            order_id=str(event.aggregate_id),
            status=event.status,
            message=event.message,
        )
        try:
            get_notifier().publish(event.user_id, payload)
        except Exception as exc:  # noqa: BLE001
            log.warning("notification.delivery_failed", error=str(exc))
            return
        log.info("notification.delivered")


order_created_handler = OrderCreatedHandler()
notify_order_owner_handler = NotifyOrderOwnerHandler()
