# tests/test_monitoring_logger.py
"""
Tests for monitoring.logger.JsonFileLogger and log_event.
"""

from __future__ import annotations

import json
from pathlib import Path

from monitoring.bus import EventBus
from monitoring.events import EventType
from monitoring.logger import JsonFileLogger, log_event


def test_events_are_written_as_json_lines(tmp_path: Path) -> None:
    bus = EventBus()
    path = tmp_path / "nested" / "events.jsonl"
    logger = JsonFileLogger(path, bus)

    log_event(
        bus=bus,
        module="runtime.scheduler",
        event_type=EventType.BRANCH_EXECUTED,
        message="run_interaction",
        payload={"branch": "run_interaction", "counter": 1},
        correlation_id="run-1",
    )
    log_event(
        bus=bus,
        module="runtime.scheduler",
        event_type=EventType.BEHAVIOR_DONE,
        message="Goal finished",
    )
    logger.close()

    lines = path.read_text(encoding="utf-8").splitlines()
    assert logger.path == path
    assert len(lines) == 2

    first = json.loads(lines[0])
    assert first["event_type"] == "BRANCH_EXECUTED"
    assert first["module"] == "runtime.scheduler"
    assert first["payload"] == {"branch": "run_interaction", "counter": 1}
    assert first["correlation_id"] == "run-1"
    assert isinstance(first["ts"], float)

    second = json.loads(lines[1])
    assert second["payload"] == {}


def test_closed_logger_stops_listening(tmp_path: Path) -> None:
    bus = EventBus()
    path = tmp_path / "events.jsonl"
    logger = JsonFileLogger(path, bus)
    logger.close()
    logger.close()

    log_event(bus=bus, module="test", event_type=EventType.LOG, message="late")

    assert path.read_text(encoding="utf-8") == ""
