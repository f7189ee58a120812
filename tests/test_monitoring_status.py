# tests/test_monitoring_status.py
"""
Tests for monitoring.status sinks.
"""

from __future__ import annotations

from typing import List

from monitoring.bus import EventBus
from monitoring.events import EventType, MonitoringEvent
from monitoring.status import BusStatusSink, RecordingStatusSink


def test_bus_sink_publishes_and_collapses_repeats() -> None:
    bus = EventBus()
    events: List[MonitoringEvent] = []
    bus.subscribe(events.append)
    sink = BusStatusSink(bus, correlation_id="run-7")

    sink.set_goal_text("Interacting with Innkeeper")
    sink.set_status_text("Waiting for object to spawn")
    sink.set_status_text("Waiting for object to spawn")
    sink.set_status_text("Moving to interact with - Innkeeper")

    assert [e.event_type for e in events] == [
        EventType.GOAL_TEXT,
        EventType.STATUS_TEXT,
        EventType.STATUS_TEXT,
    ]
    assert events[-1].payload == {"text": "Moving to interact with - Innkeeper"}
    assert all(e.correlation_id == "run-7" for e in events)
    assert sink.goal_text == "Interacting with Innkeeper"


def test_recording_sink_keeps_history() -> None:
    sink = RecordingStatusSink()
    sink.set_goal_text("g")
    sink.set_status_text("a")
    sink.set_status_text("a")

    assert sink.history == [("goal", "g"), ("status", "a"), ("status", "a")]
    assert sink.statuses() == ["a", "a"]
