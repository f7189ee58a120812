# src/interaction/machine.py
"""
Per-tick decision logic for the interaction goal.

Each tick evaluates an ordered list of (branch, predicate, action) rules
and runs the first rule whose predicate holds:

    TERMINATE             already done, or satisfied from the outside
    REPETITION_EXHAUSTED  counter reached the goal's repetition count
    APPROACH_TARGET       candidate out of range, navigation allowed
    SKIP_OUT_OF_RANGE     candidate out of range, navigation NONE
    RUN_INTERACTION       candidate in range
    APPROACH_STAGING      no candidate, actor away from the staging point
    GIVE_UP               no candidate and not waiting for one
    IDLE                  wait for a candidate to appear

Exactly one rule runs per tick. All range checks use squared distances.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from contracts.collaborators import Collaborators
from contracts.types import Point, WorldEntity
from goals.schema import GoalSpec, NavigationMode
from .blacklist import Blacklist
from .completion import CompletionEvaluator
from .selector import TargetSelector
from .sequence import InteractionSequence, InteractionTimings, SequenceReport, SleepFn
from .state import Branch, ExecutionState, RepetitionCounter

log = logging.getLogger(__name__)

DEFAULT_STAGING_TOLERANCE = 2.0


class _Tick:
    """Facts gathered once per tick; the target is looked up lazily."""

    def __init__(self, machine: "InteractionStateMachine") -> None:
        self._machine = machine
        self._target: Optional[WorldEntity] = None
        self._resolved = False
        self.actor_position: Point = machine.collaborators.actor.position

    @property
    def target(self) -> Optional[WorldEntity]:
        if not self._resolved:
            self._target = self._machine.current_target(self.actor_position)
            self._resolved = True
        return self._target

    @property
    def target_distance_sqr(self) -> float:
        assert self.target is not None
        return self.target.position.distance_sqr(self.actor_position)

    def target_out_of_range(self) -> bool:
        return (
            self.target is not None
            and self.target_distance_sqr > self._machine.goal.interaction_range_sqr
        )

    def target_in_range(self) -> bool:
        return (
            self.target is not None
            and self.target_distance_sqr <= self._machine.goal.interaction_range_sqr
        )


Rule = Tuple[Branch, Callable[[_Tick], bool], Callable[[_Tick], None]]


@dataclass
class TickOutcome:
    branch: Branch
    state: ExecutionState
    report: Optional[SequenceReport] = None


class InteractionStateMachine:
    """
    Drives one interaction goal, one tick at a time.

    Owns the execution-scoped state (blacklist, repetition counter,
    execution state). Nothing else writes to them.
    """

    def __init__(
        self,
        goal: GoalSpec,
        collaborators: Collaborators,
        staging_point: Point,
        *,
        timings: Optional[InteractionTimings] = None,
        sleep: Optional[SleepFn] = None,
        staging_tolerance: float = DEFAULT_STAGING_TOLERANCE,
    ) -> None:
        self.goal = goal
        self.collaborators = collaborators
        self.staging_point = staging_point
        self.blacklist = Blacklist()
        self.counter = RepetitionCounter()
        self.state = ExecutionState.NOT_STARTED
        self.last_report: Optional[SequenceReport] = None

        self._staging_tolerance_sqr = staging_tolerance * staging_tolerance
        self._completion = CompletionEvaluator(collaborators.quests, goal.quest_gate)
        self._selector = TargetSelector(goal, self.blacklist)
        self._sequence = InteractionSequence(
            goal,
            collaborators,
            self.blacklist,
            self.counter,
            timings=timings,
            sleep=sleep,
        )
        self._last_branch: Optional[Branch] = None

        self._rules: List[Rule] = [
            (Branch.TERMINATE, self._should_terminate, self._terminate),
            (Branch.REPETITION_EXHAUSTED, self._repetitions_done, self._finish),
            (Branch.APPROACH_TARGET, self._can_approach_target, self._approach_target),
            (Branch.SKIP_OUT_OF_RANGE, self._must_skip_target, self._skip_target),
            (Branch.RUN_INTERACTION, self._in_range, self._run_interaction),
            (Branch.APPROACH_STAGING, self._away_from_staging, self._approach_staging),
            (Branch.GIVE_UP, self._should_give_up, self._finish),
            (Branch.IDLE, lambda t: True, self._idle),
        ]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_done(self) -> bool:
        return self.state is ExecutionState.DONE

    def externally_satisfied(self) -> bool:
        return self._completion.is_satisfied()

    def current_target(self, actor_position: Point) -> Optional[WorldEntity]:
        entities = self.collaborators.world.entities_of_type(self.goal.category)
        return self._selector.select(entities, actor_position)

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def mark_done(self) -> None:
        if self.state is not ExecutionState.DONE:
            log.info(
                "Goal '%s' done after %d interaction(s)", self.goal.name, self.counter.value
            )
        self.state = ExecutionState.DONE

    def tick(self) -> TickOutcome:
        """Evaluate the rules once and run exactly one branch."""
        if self.state is ExecutionState.NOT_STARTED:
            self.state = ExecutionState.RUNNING

        self.last_report = None
        ctx = _Tick(self)
        for branch, predicate, action in self._rules:
            if predicate(ctx):
                if branch is not self._last_branch:
                    log.debug("Branch %s -> %s", self._last_branch, branch)
                    self._last_branch = branch
                action(ctx)
                return TickOutcome(branch=branch, state=self.state, report=self.last_report)

        raise AssertionError("IDLE rule always matches")  # pragma: no cover

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def _should_terminate(self, ctx: _Tick) -> bool:
        return self.is_done or self.externally_satisfied()

    def _repetitions_done(self, ctx: _Tick) -> bool:
        return self.counter.reached(self.goal.repetition_count)

    def _can_approach_target(self, ctx: _Tick) -> bool:
        return ctx.target_out_of_range() and self.goal.navigation in (
            NavigationMode.MESH,
            NavigationMode.CLICK,
        )

    def _must_skip_target(self, ctx: _Tick) -> bool:
        return ctx.target_out_of_range() and self.goal.navigation is NavigationMode.NONE

    def _in_range(self, ctx: _Tick) -> bool:
        return ctx.target_in_range()

    def _away_from_staging(self, ctx: _Tick) -> bool:
        return self.staging_point.distance_sqr(ctx.actor_position) > self._staging_tolerance_sqr

    def _should_give_up(self, ctx: _Tick) -> bool:
        return not self.goal.wait_for_targets and ctx.target is None

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _terminate(self, ctx: _Tick) -> None:
        self.mark_done()

    def _finish(self, ctx: _Tick) -> None:
        self.mark_done()

    def _approach_target(self, ctx: _Tick) -> None:
        target = ctx.target
        assert target is not None
        self.collaborators.status.set_status_text(
            f"Moving to interact with - {target.display_name}"
        )
        if self.goal.navigation is NavigationMode.MESH:
            self.collaborators.navigator.move_to(target.position)
        else:
            self.collaborators.navigator.click_to_move(target.position)

    def _skip_target(self, ctx: _Tick) -> None:
        target = ctx.target
        assert target is not None
        self.collaborators.status.set_status_text(
            f"Object is out of range, Skipping - {target.display_name} "
            f"Distance: {target.position.distance(ctx.actor_position):.1f}"
        )
        self.mark_done()

    def _run_interaction(self, ctx: _Tick) -> None:
        target = ctx.target
        assert target is not None
        self.last_report = self._sequence.run(target)

    def _approach_staging(self, ctx: _Tick) -> None:
        self.collaborators.status.set_status_text(f"Moving towards - {self.staging_point}")
        self.collaborators.navigator.move_to(self.staging_point)

    def _idle(self, ctx: _Tick) -> None:
        self.collaborators.status.set_status_text("Waiting for object to spawn")
