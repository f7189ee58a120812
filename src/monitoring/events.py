# path: src/monitoring/events.py
"""
Event schemas for monitoring.

This module defines:
- EventType enum
- MonitoringEvent (structured runtime events)

All events are JSON-serializable via `.to_dict()` and are intended
for use with monitoring.bus.EventBus and monitoring.logger.JsonFileLogger.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum, auto
from typing import Any, Dict, Optional


# ============================================================
# Event Types
# ============================================================

class EventType(Enum):
    """Typed monitoring events emitted by the interaction runtime."""

    # Status sink output (advisory text)
    GOAL_TEXT = auto()
    STATUS_TEXT = auto()

    # One state-machine branch ran on a tick
    BRANCH_EXECUTED = auto()

    # One full interaction sequence finished (counter advanced)
    INTERACTION_COMPLETED = auto()

    # Goal reached its terminal state
    BEHAVIOR_DONE = auto()

    # Goal profile could not be used
    ATTRIBUTE_PROBLEM = auto()

    # Generic log messages
    LOG = auto()


# ============================================================
# Monitoring Event Structure
# ============================================================

@dataclass
class MonitoringEvent:
    """
    Runtime event emitted by the behavior, the scheduler, the status sink
    or bot_core.

    All fields must be JSON-safe.
    """

    ts: float                   # UNIX timestamp (seconds)
    module: str                 # Source module string ("runtime.scheduler", "bot_core", etc.)
    event_type: EventType       # Enum describing the event class
    message: str                # Short human-readable description
    payload: Dict[str, Any]     # Structured data (branch, counter, target, ...)
    correlation_id: Optional[str] = None  # Groups events of one goal execution

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-safe dict for loggers."""
        data = asdict(self)
        data["event_type"] = self.event_type.name  # store name, not enum
        return data
