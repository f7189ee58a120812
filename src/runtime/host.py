# path: src/runtime/host.py

"""
Host-side priority list.

The host owns an ordered list of branches (combat handling, looting,
the active goal, ...). Each host tick runs the first branch that can run.
A goal that must not be interrupted by combat is spliced in at index 0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, List, Optional, Protocol, Tuple

log = logging.getLogger(__name__)


class RunStatus(Enum):
    SUCCESS = auto()
    FAILURE = auto()
    RUNNING = auto()


class HostBranch(Protocol):
    """One entry of the host's priority list."""

    @property
    def name(self) -> str:
        ...

    def can_run(self) -> bool:
        ...

    def run(self) -> Any:
        ...


@dataclass
class FunctionBranch:
    """HostBranch built from two callables."""

    name: str
    can_run: Callable[[], bool]
    run: Callable[[], Any]


class HostRoot:
    """
    Ordered, first-match-wins list of host branches.

    ``last_status`` is None until the first tick, RUNNING after a tick in
    which some branch ran, FAILURE after a tick in which none could.
    """

    def __init__(self, children: Optional[List[HostBranch]] = None) -> None:
        self._children: List[HostBranch] = list(children or [])
        self.last_status: Optional[RunStatus] = None

    @property
    def children(self) -> List[HostBranch]:
        return list(self._children)

    def names(self) -> List[str]:
        return [c.name for c in self._children]

    def insert_child(self, index: int, branch: HostBranch) -> None:
        self._children.insert(index, branch)

    def add_child(self, branch: HostBranch) -> None:
        self._children.append(branch)

    def contains(self, name: str) -> bool:
        return name in self.names()

    def tick(self) -> Tuple[Optional[str], Any]:
        """Run the first runnable branch; returns (branch name, its result)."""
        for child in self._children:
            if child.can_run():
                self.last_status = RunStatus.RUNNING
                return child.name, child.run()
        self.last_status = RunStatus.FAILURE
        return None, None
