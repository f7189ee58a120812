"""
Repeated-interaction core.

Exports:
    - InteractWithBehavior: lifecycle wrapper hosts drive tick by tick
    - InteractionStateMachine: per-tick priority decisions
    - InteractionSequence: the stop/interact/dialog/loot/buy/release pipeline
    - TargetSelector / select_target: nearest qualifying entity
    - CompletionEvaluator: quest-progress completion override
    - Blacklist, RepetitionCounter, ExecutionState, Branch
"""

from __future__ import annotations

from .blacklist import Blacklist
from .state import Branch, ExecutionState, RepetitionCounter
from .selector import TargetSelector, select_target
from .completion import CompletionEvaluator, progress_requirements_met
from .sequence import InteractionSequence, InteractionTimings, SequenceReport
from .machine import InteractionStateMachine, TickOutcome
from .behavior import InteractWithBehavior

__all__ = [
    "Blacklist",
    "Branch",
    "ExecutionState",
    "RepetitionCounter",
    "TargetSelector",
    "select_target",
    "CompletionEvaluator",
    "progress_requirements_met",
    "InteractionSequence",
    "InteractionTimings",
    "SequenceReport",
    "InteractionStateMachine",
    "TickOutcome",
    "InteractWithBehavior",
]
