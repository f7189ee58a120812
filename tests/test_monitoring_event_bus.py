# tests/test_monitoring_event_bus.py
"""
Tests for monitoring.bus.EventBus

Covers:
- publish/subscribe ordering
- unsubscribe and clear
- a failing subscriber does not starve the others
- concurrent publishers
"""

from __future__ import annotations

import threading
from typing import List

from monitoring.bus import EventBus
from monitoring.events import EventType, MonitoringEvent


def make_event(ts: float, event_type: EventType = EventType.LOG) -> MonitoringEvent:
    return MonitoringEvent(
        ts=ts,
        module="test",
        event_type=event_type,
        message=f"event {ts}",
        payload={"ts": ts},
    )


def test_subscribers_see_events_in_publish_order() -> None:
    bus = EventBus()
    seen: List[float] = []
    bus.subscribe(lambda evt: seen.append(evt.ts))

    for ts in (1.0, 2.0, 3.0):
        bus.publish(make_event(ts))

    assert seen == [1.0, 2.0, 3.0]


def test_unsubscribe_and_clear() -> None:
    bus = EventBus()
    first: List[MonitoringEvent] = []
    second: List[MonitoringEvent] = []
    bus.subscribe(first.append)
    bus.subscribe(second.append)

    bus.unsubscribe(first.append)
    bus.unsubscribe(lambda evt: None)  # unknown subscriber is fine
    bus.publish(make_event(1.0))

    assert first == []
    assert len(second) == 1

    bus.clear()
    bus.publish(make_event(2.0))
    assert len(second) == 1


def test_failing_subscriber_is_isolated() -> None:
    bus = EventBus()
    received: List[MonitoringEvent] = []

    def broken(evt: MonitoringEvent) -> None:
        raise RuntimeError("dashboard crashed")

    bus.subscribe(broken)
    bus.subscribe(received.append)

    bus.publish(make_event(1.0, EventType.BRANCH_EXECUTED))

    assert len(received) == 1


def test_concurrent_publishers() -> None:
    bus = EventBus()
    received: List[MonitoringEvent] = []
    lock = threading.Lock()

    def subscriber(evt: MonitoringEvent) -> None:
        with lock:
            received.append(evt)

    bus.subscribe(subscriber)

    def publish_many(start: int) -> None:
        for i in range(start, start + 50):
            bus.publish(make_event(float(i)))

    threads = [threading.Thread(target=publish_many, args=(n,)) for n in (0, 100, 200)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(received) == 150


def test_event_to_dict_uses_enum_name() -> None:
    data = make_event(5.0, EventType.INTERACTION_COMPLETED).to_dict()

    assert data["event_type"] == "INTERACTION_COMPLETED"
    assert data["payload"] == {"ts": 5.0}
    assert data["correlation_id"] is None


def test_buses_are_independent() -> None:
    import monitoring.bus as bus_module

    a, b = EventBus(), EventBus()
    seen: List[MonitoringEvent] = []
    a.subscribe(seen.append)

    b.publish(make_event(1.0))

    assert seen == []
    assert [name for name, value in vars(bus_module).items() if isinstance(value, EventBus)] == []
