from __future__ import annotations

from dataclasses import dataclass

import pytest
import uuid6

from shared.domain.events import DomainEvent, DomainEventMixin
from shared.infrastructure.bus import InMemoryEventBus

pytestmark = pytest.mark.unit


@dataclass(frozen=True)
class Baked(DomainEvent):
    pass


@dataclass(frozen=True)
class Burnt(DomainEvent):
    pass


class Recorder:
    def __init__(self):
        self.seen = []

    def handle(self, event):
        self.seen.append(event)


class TestInMemoryEventBus:
    def test_dispatches_by_exact_type(self):
        bus = InMemoryEventBus()
        baked, burnt = Recorder(), Recorder()
        bus.subscribe(Baked, baked)
        bus.subscribe(Burnt, burnt)

        event = Baked(aggregate_id=uuid6.uuid7())
        bus.publish(event)

        assert baked.seen == [event]
        assert burnt.seen == []

    def test_subscribe_is_idempotent(self):
        bus = InMemoryEventBus()
        handler = Recorder()
        bus.subscribe(Baked, handler)
        bus.subscribe(Baked, handler)
        bus.publish(Baked(aggregate_id=uuid6.uuid7()))
        assert len(handler.seen) == 1

    def test_unsubscribe(self):
        bus = InMemoryEventBus()
        handler = Recorder()
        bus.subscribe(Baked, handler)
        bus.unsubscribe(Baked, handler)
        assert bus.handlers_for(Baked) == []

    def test_publish_all_keeps_order(self):
        bus = InMemoryEventBus()
        handler = Recorder()
        bus.subscribe(Baked, handler)
        events = [Baked(aggregate_id=uuid6.uuid7()) for _ in range(3)]
        bus.publish_all(events)
        assert handler.seen == events

    def test_handler_errors_propagate(self):
        bus = InMemoryEventBus()

        class Failing:
            def handle(self, event):
                raise RuntimeError("handler failed")

        bus.subscribe(Baked, Failing())
        with pytest.raises(RuntimeError):
            bus.publish(Baked(aggregate_id=uuid6.uuid7()))


class TestDomainEventMixin:
    def test_pull_returns_and_clears(self):
        class Aggregate(DomainEventMixin):
            pass

        aggregate = Aggregate()
        first = Baked(aggregate_id=uuid6.uuid7())
        second = Burnt(aggregate_id=uuid6.uuid7())
        aggregate.add_domain_event(first)
        aggregate.add_domain_event(second)

        assert aggregate.domain_events == [first, second]
        assert aggregate.pull_domain_events() == [first, second]
        assert aggregate.domain_events == []

    def test_event_ids_are_time_ordered(self):
        first = Baked(aggregate_id=uuid6.uuid7())
        second = Baked(aggregate_id=uuid6.uuid7())
        assert first.event_id < second.event_id
        assert first.event_name == "Baked"
