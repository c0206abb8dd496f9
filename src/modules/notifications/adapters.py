"""Notification gateway adapters."""

from __future__ import annotations

import json
from collections import defaultdict

import structlog
from django.core.cache import cache
from django_redis import get_redis_connection

from modules.notifications.port import NotificationEvent, NotificationGateway

logger = structlog.get_logger(__name__)


class InMemoryNotificationGateway(NotificationGateway):
    """Keeps every published event in process memory (tests, local dev)."""

    def __init__(self) -> None:
        self.published: list[tuple[str, NotificationEvent]] = []
        self._inbox: dict[str, list[dict]] = defaultdict(list)

    def publish(self, user_id: str, event: NotificationEvent) -> None:
        self.published.append((str(user_id), event))
        self._inbox[str(user_id)].append(event.to_dict())

    def drain(self, user_id: str) -> list[dict]:
        return self._inbox.pop(str(user_id), [])

    def events_for(self, user_id) -> list[NotificationEvent]:
        return [event for uid, event in self.published if uid == str(user_id)]


class CacheInboxNotificationGateway(NotificationGateway):
    """Per-user inbox stored in the Django cache.

    Inboxes expire after ``ttl`` seconds and keep at most ``max_items``
    (oldest dropped first).  Updates are read-modify-write, so this backend
    is for single-process use with the local-memory cache; deployments use
    ``RedisInboxNotificationGateway``.
    """

    key_prefix = "notifications:inbox"

    def __init__(self, ttl: int = 3600, max_items: int = 50) -> None:
        self.ttl = ttl
        self.max_items = max_items

    def _key(self, user_id) -> str:
        return f"{self.key_prefix}:{user_id}"

    def publish(self, user_id: str, event: NotificationEvent) -> None:
        key = self._key(user_id)
        inbox = cache.get(key) or []
        inbox.append(event.to_dict())
        cache.set(key, inbox[-self.max_items :], timeout=self.ttl)
        logger.debug(
            "notification.queued",
            user_id=str(user_id),
            order_id=event.order_id,
            status=event.status,
        )

    def drain(self, user_id: str) -> list[dict]:
        key = self._key(user_id)
        inbox = cache.get(key) or []
        cache.delete(key)
        return inbox


class RedisInboxNotificationGateway(NotificationGateway):
    """Per-user inbox kept as a Redis list.

    Publishing is ``RPUSH`` + ``LTRIM`` + ``EXPIRE`` and draining is
    ``LRANGE`` + ``DEL``, each sent as one ``MULTI`` pipeline, so concurrent
    publishers and pollers never drop an event.
    """

    key_prefix = "notifications:inbox"

    def __init__(self, ttl: int = 3600, max_items: int = 50, alias: str = "default") -> None:
        self.ttl = ttl
        self.max_items = max_items
        self.alias = alias

    def _key(self, user_id) -> str:
        return f"{self.key_prefix}:{user_id}"

    def _connection(self):
        return get_redis_connection(self.alias)

    def publish(self, user_id: str, event: NotificationEvent) -> None:
        key = self._key(user_id)
        pipe = self._connection().pipeline(transaction=True)
        pipe.rpush(key, json.dumps(event.to_dict()))
        pipe.ltrim(key, -self.max_items, -1)
        pipe.expire(key, self.ttl)
        pipe.execute()
        logger.debug(
            "notification.queued",
            user_id=str(user_id),
            order_id=event.order_id,
            status=event.status,
        )

    def drain(self, user_id: str) -> list[dict]:
        key = self._key(user_id)
        pipe = self._connection().pipeline(transaction=True)
        pipe.lrange(key, 0, -1)
        pipe.delete(key)
        raw, _ = pipe.execute()
        return [json.loads(item) for item in raw]
