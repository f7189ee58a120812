# src/goals/schema.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from contracts.types import ObjectCategory, Point


class EntityStateFilter(Enum):
    """Which life-state an NPC must be in to qualify."""
    ALIVE = "alive"
    BELOW_HP = "below_hp"
    DEAD = "dead"
    DONT_CARE = "dont_care"


class NavigationMode(Enum):
    """How the actor travels toward an out-of-range target."""
    MESH = "mesh"       # path-planned
    CLICK = "ctm"       # click-to-move, straight line
    NONE = "none"       # never travel; skip out-of-range targets


class QuestInLogRequirement(Enum):
    IN_LOG = "in_log"
    NOT_IN_LOG = "not_in_log"


class QuestCompleteRequirement(Enum):
    ANY = "any"
    COMPLETE = "complete"
    NOT_COMPLETE = "not_complete"


@dataclass(frozen=True)
class QuestGate:
    """
    External completion override.

    quest_id == 0 means "no quest gate": requirements are always met and
    the goal only finishes through its own repetition counter.
    """
    quest_id: int = 0
    in_log: QuestInLogRequirement = QuestInLogRequirement.IN_LOG
    complete: QuestCompleteRequirement = QuestCompleteRequirement.NOT_COMPLETE


@dataclass(frozen=True)
class PurchaseSpec:
    """
    What to buy from a vendor after interacting.

    Exactly one of ``item_id`` / ``slot`` is set. Purchasing by item id
    takes precedence; purchasing by slot is kept for older profiles.
    """
    item_id: Optional[int] = None
    slot: Optional[int] = None
    quantity: int = 1

    def __post_init__(self) -> None:
        if (self.item_id is None) == (self.slot is None):
            raise ValueError("PurchaseSpec needs exactly one of item_id or slot")
        if self.quantity < 1:
            raise ValueError(f"PurchaseSpec quantity must be >= 1, got {self.quantity}")

    @property
    def by_item_id(self) -> bool:
        return self.item_id is not None


@dataclass(frozen=True)
class GoalSpec:
    """
    Declarative "interact with N matching objects" goal.

    Immutable for the lifetime of one execution. Built by goals.loader
    from a YAML profile, or directly in code/tests.

    Distances are world units. ``dialog_options`` are already 0-based.
    ``staging_point`` of None means "the actor's position at start".
    """
    entry_ids: FrozenSet[int]
    name: str = "interact_with"
    category: ObjectCategory = ObjectCategory.NPC
    state_filter: EntityStateFilter = EntityStateFilter.DONT_CARE
    hp_threshold_percent: float = 100.0
    not_moving: bool = False
    collection_radius: float = 100.0
    interaction_range: float = 4.0
    navigation: NavigationMode = NavigationMode.MESH
    repetition_count: int = 1
    wait_ms: int = 3000
    dialog_options: Tuple[int, ...] = ()
    loot: bool = False
    purchase: Optional[PurchaseSpec] = None
    staging_point: Optional[Point] = None
    wait_for_targets: bool = True
    ignore_combat: bool = False
    quest_gate: QuestGate = field(default_factory=QuestGate)

    def __post_init__(self) -> None:
        if not self.entry_ids:
            raise ValueError("GoalSpec.entry_ids must not be empty")
        if self.repetition_count < 1:
            raise ValueError(
                f"GoalSpec.repetition_count must be >= 1, got {self.repetition_count}"
            )
        if self.interaction_range <= 0 or self.collection_radius <= 0:
            raise ValueError("GoalSpec distances must be positive")
        if self.wait_ms < 0:
            raise ValueError(f"GoalSpec.wait_ms must be >= 0, got {self.wait_ms}")

    @property
    def interaction_range_sqr(self) -> float:
        return self.interaction_range * self.interaction_range
