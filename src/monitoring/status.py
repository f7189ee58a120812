# path: src/monitoring/status.py
"""
StatusSink implementations.

- BusStatusSink: logs the text and publishes GOAL_TEXT / STATUS_TEXT events.
- RecordingStatusSink: keeps every update in memory (tests, CLI summary).

Status text is advisory. Repeated identical status lines are collapsed so
an idle goal does not flood the log once per tick.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .bus import EventBus
from .events import EventType
from .logger import log_event

log = logging.getLogger(__name__)


class BusStatusSink:
    """Status sink that forwards to logging and the monitoring bus."""

    def __init__(self, bus: EventBus, correlation_id: Optional[str] = None) -> None:
        self._bus = bus
        self._correlation_id = correlation_id
        self.goal_text = ""
        self.status_text = ""

    def set_goal_text(self, text: str) -> None:
        if text == self.goal_text:
            return
        self.goal_text = text
        if text:
            log.info("Goal: %s", text)
        log_event(
            bus=self._bus,
            module="monitoring.status",
            event_type=EventType.GOAL_TEXT,
            message=text,
            payload={"text": text},
            correlation_id=self._correlation_id,
        )

    def set_status_text(self, text: str) -> None:
        if text == self.status_text:
            return
        self.status_text = text
        if text:
            log.info("Status: %s", text)
        log_event(
            bus=self._bus,
            module="monitoring.status",
            event_type=EventType.STATUS_TEXT,
            message=text,
            payload={"text": text},
            correlation_id=self._correlation_id,
        )


class RecordingStatusSink:
    """In-memory status sink; ``history`` holds ("goal"|"status", text)."""

    def __init__(self) -> None:
        self.goal_text = ""
        self.status_text = ""
        self.history: List[Tuple[str, str]] = []

    def set_goal_text(self, text: str) -> None:
        self.goal_text = text
        self.history.append(("goal", text))

    def set_status_text(self, text: str) -> None:
        self.status_text = text
        self.history.append(("status", text))

    def statuses(self) -> List[str]:
        return [text for kind, text in self.history if kind == "status"]
