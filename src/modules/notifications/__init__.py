"""Notification gateway factory.

The backend is chosen from ``NOTIFICATION_BACKEND`` on first use:
``redis`` (per-user Redis list, the default), ``cache`` (inbox in the
Django cache, single process only) or ``memory``.
"""

from __future__ import annotations

from django.conf import settings

from modules.notifications.port import NotificationGateway

_current_notifier: NotificationGateway | None = None


def _build_default() -> NotificationGateway:
    from modules.notifications.adapters import (
        CacheInboxNotificationGateway,
        InMemoryNotificationGateway,
        RedisInboxNotificationGateway,
    )

    backend = settings.NOTIFICATION_BACKEND
    if backend == "memory":
        return InMemoryNotificationGateway()
    if backend == "redis":
        return RedisInboxNotificationGateway(
            ttl=settings.NOTIFICATION_INBOX_TTL,
            max_items=settings.NOTIFICATION_INBOX_MAX,
        )
    if backend == "cache":
        return CacheInboxNotificationGateway(
            ttl=settings.NOTIFICATION_INBOX_TTL,
            max_items=settings.NOTIFICATION_INBOX_MAX,
        )
    raise ValueError(f"Unknown NOTIFICATION_BACKEND: {backend!r}")


def get_notifier() -> NotificationGateway:
    global _current_notifier
    if _current_notifier is None:
        _current_notifier = _build_default()
    return _current_notifier


def set_notifier(notifier: NotificationGateway) -> None:
    global _current_notifier
    _current_notifier = notifier


def reset_notifier() -> None:
    global _current_notifier
    _current_notifier = None
