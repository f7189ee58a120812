# src/interaction/state.py
"""
Execution-scoped state for one interaction goal.

- ExecutionState: NOT_STARTED -> RUNNING -> DONE (terminal)
- Branch: which top-level decision ran on a tick
- RepetitionCounter: completed interactions so far
"""

from __future__ import annotations

from enum import Enum


class ExecutionState(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    DONE = "done"


class Branch(Enum):
    """Top-level decisions, in priority order."""
    TERMINATE = "terminate"
    REPETITION_EXHAUSTED = "repetition_exhausted"
    APPROACH_TARGET = "approach_target"
    SKIP_OUT_OF_RANGE = "skip_out_of_range"
    RUN_INTERACTION = "run_interaction"
    APPROACH_STAGING = "approach_staging"
    GIVE_UP = "give_up"
    IDLE = "idle"


class RepetitionCounter:
    """Monotonic count of fully completed interaction sequences."""

    def __init__(self) -> None:
        self._value = 0

    @property
    def value(self) -> int:
        return self._value

    def increment(self) -> int:
        self._value += 1
        return self._value

    def reached(self, target: int) -> bool:
        return self._value >= target

    def __int__(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"RepetitionCounter({self._value})"
