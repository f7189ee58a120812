# path: src/runtime/error_handling.py

"""
Error handling helpers for the tick loop.

Runtime absence (no target, closed surfaces) never raises; what can raise
out of a tick is a collaborator failure, e.g. a dropped transport. Those
are logged, published as a LOG event with subtype TICK_EXCEPTION, and then
re-raised so the host decides whether to abort or continue.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from monitoring.bus import EventBus
from monitoring.events import EventType
from monitoring.logger import log_event

log = logging.getLogger(__name__)

T = TypeVar("T")


def safe_tick_with_logging(
    tick: Callable[[], T],
    bus: Optional[EventBus],
    correlation_id: Optional[str] = None,
) -> T:
    """Call ``tick()``; on failure log, publish, re-raise."""
    try:
        return tick()
    except Exception as exc:
        log.exception("Tick raised an exception")
        if bus is not None:
            log_event(
                bus=bus,
                module="runtime.safe_tick",
                event_type=EventType.LOG,
                message="Tick raised an exception",
                payload={
                    "subtype": "TICK_EXCEPTION",
                    "exception_repr": repr(exc),
                },
                correlation_id=correlation_id,
            )
        raise
