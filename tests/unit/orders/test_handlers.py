from __future__ import annotations

import pytest
import uuid6

from modules.orders.events import (
    NOTIFIABLE_EVENTS,
    OrderCancelled,
    OrderConfirmed,
    OrderCreated,
    OrderStatusChanged,
)
from modules.orders.handlers import (
    NotifyOrderOwnerHandler,
    notify_order_owner_handler,
    order_created_handler,
)
from shared.infrastructure.bus import event_bus

pytestmark = pytest.mark.unit


def make_event(cls=OrderConfirmed, **overrides):
    values = {
        "aggregate_id": uuid6.uuid7(),
        "user_id": "user-1",
        "status": "confirmed",
        "message": "Order confirmed and payment successful!",
    }
    values.update(overrides)
    return cls(**values)


class TestNotifyOrderOwner:
    def test_publishes_to_owner_channel(self, notifier):
        event = make_event()
        NotifyOrderOwnerHandler().handle(event)

        [(user_id, payload)] = notifier.published
        assert user_id == "user-1"
        assert payload.order_id == str(event.aggregate_id)
        assert payload.status == "confirmed"
        assert payload.message == "Order confirmed and payment successful!"

    def test_delivery_failure_is_swallowed(self):
        from modules.notifications import set_notifier

        class Broken:
            def publish(self, user_id, event):
                raise RuntimeError("boom")

        set_notifier(Broken())
        NotifyOrderOwnerHandler().handle(make_event())


class TestSubscriptions:
    def test_customer_facing_events_notify(self):
        for cls in (OrderConfirmed, OrderStatusChanged, OrderCancelled):
            assert cls in NOTIFIABLE_EVENTS
            assert notify_order_owner_handler in event_bus.handlers_for(cls)

    def test_created_is_logged_not_notified(self, notifier):
        assert order_created_handler in event_bus.handlers_for(OrderCreated)
        assert notify_order_owner_handler not in event_bus.handlers_for(OrderCreated)

        event_bus.publish(make_event(OrderCreated, status="pending"))
        assert notifier.published == []

    def test_event_name_is_class_name(self):
        assert make_event(OrderCancelled).event_name == "OrderCancelled"
