# path: src/runtime/scheduler.py

"""
Tick scheduler: drives one InteractWithBehavior to completion.

    scheduler = TickScheduler(behavior, bus=bus, host=root)
    summary = scheduler.run(max_ticks=500)

Each tick either runs the host's priority list (when a HostRoot is given)
or the behavior directly. The behavior is always disposed, even when a
tick raises.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from interaction.behavior import InteractWithBehavior
from interaction.machine import TickOutcome
from monitoring.bus import EventBus
from monitoring.events import EventType
from monitoring.logger import log_event
from .error_handling import safe_tick_with_logging
from .host import HostRoot

log = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Result of one scheduler run; JSON-friendly via as_dict()."""

    goal: Optional[str]
    ticks: int
    done: bool
    counter: int
    blacklist: List[int]
    branches: Dict[str, int] = field(default_factory=dict)
    attribute_problem: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "goal": self.goal,
            "ticks": self.ticks,
            "done": self.done,
            "counter": self.counter,
            "blacklist": list(self.blacklist),
            "branches": dict(self.branches),
            "attribute_problem": self.attribute_problem,
        }


class TickScheduler:
    """Single-threaded, cooperative tick loop for one behavior."""

    def __init__(
        self,
        behavior: InteractWithBehavior,
        *,
        bus: Optional[EventBus] = None,
        host: Optional[HostRoot] = None,
        tick_interval_s: float = 0.1,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self._behavior = behavior
        self._bus = bus
        self._host = host
        self._tick_interval_s = tick_interval_s
        self._sleep = sleep if sleep is not None else time.sleep
        self._correlation_id = uuid.uuid4().hex
        self._branches: Counter = Counter()
        self._ticks = 0

    def _publish(self, event_type: EventType, message: str, payload: Dict[str, Any]) -> None:
        if self._bus is None:
            return
        log_event(
            bus=self._bus,
            module="runtime.scheduler",
            event_type=event_type,
            message=message,
            payload=payload,
            correlation_id=self._correlation_id,
        )

    def _tick_once(self) -> Optional[TickOutcome]:
        if self._host is None:
            return self._behavior.tick()
        name, result = self._host.tick()
        if isinstance(result, TickOutcome):
            return result
        log.debug("Host branch %s ran instead of the goal", name)
        return None

    def _record(self, outcome: TickOutcome) -> None:
        self._branches[outcome.branch.value] += 1
        goal = self._behavior.goal
        self._publish(
            EventType.BRANCH_EXECUTED,
            outcome.branch.value,
            {
                "branch": outcome.branch.value,
                "state": outcome.state.value,
                "counter": self._behavior.counter,
                "repetition_count": goal.repetition_count if goal else None,
                "blacklist_size": len(self._behavior.blacklist),
            },
        )
        if outcome.report is not None:
            self._publish(
                EventType.INTERACTION_COMPLETED,
                f"Interacted with {outcome.report.target_name}",
                {
                    "target_guid": outcome.report.target_guid,
                    "target_name": outcome.report.target_name,
                    "counter": outcome.report.counter,
                    "looted": outcome.report.looted,
                    "purchased": outcome.report.purchased is not None,
                },
            )

    def _ensure_in_host(self) -> None:
        if self._host is None:
            return
        branch = self._behavior.as_host_branch()
        if not self._host.contains(branch.name):
            self._host.add_child(branch)

    def run(self, max_ticks: Optional[int] = None) -> RunSummary:
        """Tick until the behavior is done or ``max_ticks`` ran."""
        behavior = self._behavior
        try:
            behavior.on_start()
            if behavior.is_attribute_problem:
                self._publish(
                    EventType.ATTRIBUTE_PROBLEM,
                    behavior.attribute_problem or "",
                    {},
                )
            self._ensure_in_host()

            while not behavior.is_done:
                if max_ticks is not None and self._ticks >= max_ticks:
                    log.info("Stopping after max_ticks=%d", max_ticks)
                    break
                outcome = safe_tick_with_logging(
                    self._tick_once, self._bus, self._correlation_id
                )
                self._ticks += 1
                if outcome is not None:
                    self._record(outcome)
                if not behavior.is_done:
                    self._sleep(self._tick_interval_s)

            if behavior.is_done:
                self._publish(
                    EventType.BEHAVIOR_DONE,
                    "Goal finished",
                    {"counter": behavior.counter, "ticks": self._ticks},
                )
        finally:
            behavior.dispose()

        return RunSummary(
            goal=behavior.goal.name if behavior.goal else None,
            ticks=self._ticks,
            done=behavior.is_done,
            counter=behavior.counter,
            blacklist=behavior.blacklist.snapshot(),
            branches=dict(self._branches),
            attribute_problem=behavior.attribute_problem,
        )
