# src/interaction/behavior.py
"""
InteractWithBehavior: lifecycle wrapper around the state machine.

Lifecycle (driven by the host):

    behavior = InteractWithBehavior(raw_or_goal, collaborators, host=root)
    behavior.on_start()
    while not behavior.is_done:
        behavior.tick()
    behavior.dispose()

Configuration problems never raise out of the constructor. They are
logged, reported once through the status sink on start, and the behavior
then behaves as already done without touching the world.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Union

from contracts.collaborators import Collaborators
from contracts.types import ObjectCategory
from goals.loader import GoalConfigError, load_goal_from_mapping
from goals.schema import GoalSpec
from runtime.host import FunctionBranch, HostRoot, RunStatus
from .blacklist import Blacklist
from .completion import CompletionEvaluator
from .machine import DEFAULT_STAGING_TOLERANCE, InteractionStateMachine, TickOutcome
from .sequence import InteractionTimings, SleepFn
from .state import Branch, ExecutionState

log = logging.getLogger(__name__)


class InteractWithBehavior:
    """Repeatedly interact with matching world objects until the goal is met."""

    def __init__(
        self,
        goal: Union[GoalSpec, Mapping[str, Any]],
        collaborators: Collaborators,
        *,
        host: Optional[HostRoot] = None,
        timings: Optional[InteractionTimings] = None,
        sleep: Optional[SleepFn] = None,
        staging_tolerance: float = DEFAULT_STAGING_TOLERANCE,
    ) -> None:
        self._c = collaborators
        self._host = host
        self._timings = timings
        self._sleep = sleep
        self._staging_tolerance = staging_tolerance

        self.goal: Optional[GoalSpec] = None
        self.attribute_problem: Optional[str] = None
        self.mob_names: str = ""

        self._machine: Optional[InteractionStateMachine] = None
        self._started = False
        self._disposed = False
        self._problem_reported = False

        try:
            self.goal = goal if isinstance(goal, GoalSpec) else load_goal_from_mapping(goal)
        except GoalConfigError as exc:
            log.error("Goal attribute problem: %s", exc)
            self.attribute_problem = str(exc)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def is_attribute_problem(self) -> bool:
        return self.attribute_problem is not None

    @property
    def state(self) -> ExecutionState:
        if self.is_attribute_problem:
            return ExecutionState.DONE
        if self._machine is None:
            return ExecutionState.NOT_STARTED
        return self._machine.state

    @property
    def counter(self) -> int:
        return self._machine.counter.value if self._machine is not None else 0

    @property
    def blacklist(self) -> Blacklist:
        if self._machine is None:
            return Blacklist()
        return self._machine.blacklist

    @property
    def is_done(self) -> bool:
        if self.is_attribute_problem:
            return True
        if self._machine is not None:
            if not self._machine.is_done and self._machine.externally_satisfied():
                self._machine.mark_done()
            return self._machine.is_done
        return self._goal_satisfied_before_start()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def on_start(self) -> None:
        if self._started:
            return
        self._started = True

        if self.is_attribute_problem:
            self._report_attribute_problem()
            return

        goal = self.goal
        assert goal is not None

        staging = goal.staging_point or self._c.actor.position
        self._machine = InteractionStateMachine(
            goal,
            self._c,
            staging,
            timings=self._timings,
            sleep=self._sleep,
            staging_tolerance=self._staging_tolerance,
        )

        self.mob_names = self._describe_targets(goal)
        # Nothing to announce for a goal the quest log already retired.
        if not self.is_done:
            self._c.status.set_goal_text(f"Interacting with {self.mob_names}")

        if goal.ignore_combat and self._host is not None:
            self._splice_into_host(self._host)

    def tick(self) -> TickOutcome:
        """One scheduling opportunity."""
        if not self._started:
            self.on_start()

        if self._machine is None:
            self._report_attribute_problem()
            return TickOutcome(branch=Branch.TERMINATE, state=ExecutionState.DONE)

        return self._machine.tick()

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._c.status.set_goal_text("")
        self._c.status.set_status_text("")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _goal_satisfied_before_start(self) -> bool:
        assert self.goal is not None
        return CompletionEvaluator(self._c.quests, self.goal.quest_gate).is_satisfied()

    def _report_attribute_problem(self) -> None:
        if self._problem_reported:
            return
        self._problem_reported = True
        self._c.status.set_status_text(f"Attribute problem: {self.attribute_problem}")

    def _describe_targets(self, goal: GoalSpec) -> str:
        names: List[str] = []
        for category in (ObjectCategory.NPC, ObjectCategory.GAME_OBJECT):
            for entity in self._c.world.entities_of_type(category):
                if entity.entry in goal.entry_ids and entity.display_name not in names:
                    names.append(entity.display_name)
        if not names:
            names = [f"Mob({entry})" for entry in sorted(goal.entry_ids)]
        return ", ".join(names)

    def _splice_into_host(self, host: HostRoot) -> None:
        """Run ahead of the host's own branches (combat included)."""
        if host.last_status is RunStatus.RUNNING:
            log.warning("Host root is running; not splicing '%s' ahead of combat", self.goal.name)
            return
        host.insert_child(0, self.as_host_branch())
        log.info("Spliced '%s' ahead of the host's combat handling", self.goal.name)

    def as_host_branch(self) -> FunctionBranch:
        return FunctionBranch(
            name=f"interact_with:{self.goal.name if self.goal else 'invalid'}",
            can_run=lambda: not self.is_done,
            run=self.tick,
        )
