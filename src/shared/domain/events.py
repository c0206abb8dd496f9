"""Domain events primitives.

Aggregates collect events while a unit of work runs; the service pulls
them once the transaction is over and hands them to the bus.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID

import uuid6


@dataclass(frozen=True)
class DomainEvent:
    """Base domain event (immutable).

    ``event_id`` is a UUIDv7 so events sort by creation time, like the
    primary keys of the models that raise them.
    """

    aggregate_id: UUID
    event_id: UUID = field(default_factory=uuid6.uuid7)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_name: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_name", self.__class__.__name__)


class DomainEventMixin:
    """Mixin for aggregate roots that collect domain events in memory."""

    _domain_events: list[DomainEvent]

    def _pending_events(self) -> list[DomainEvent]:
        if "_domain_events" not in self.__dict__:
            self._domain_events = []
        return self._domain_events

    def add_domain_event(self, event: DomainEvent) -> None:
        self._pending_events().append(event)

    def pull_domain_events(self) -> list[DomainEvent]:
        """Return the collected events in raise order and forget them."""
        events = list(self._pending_events())
        self._domain_events.clear()
        return events

    @property
    def domain_events(self) -> list[DomainEvent]:
        return list(self._pending_events())
