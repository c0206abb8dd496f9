from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.orders"
    label = "orders"

    def ready(self) -> None:
        from modules.orders.events import NOTIFIABLE_EVENTS, OrderCreated
        from modules.orders.handlers import (
            notify_order_owner_handler,
            order_created_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(OrderCreated, order_created_handler)
        for event_class in NOTIFIABLE_EVENTS:
            event_bus.subscribe(event_class, notify_order_owner_handler)
