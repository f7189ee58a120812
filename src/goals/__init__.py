"""
Goal profiles: the declarative "interact with N objects" configuration.
"""

from __future__ import annotations

from .schema import (
    EntityStateFilter,
    GoalSpec,
    NavigationMode,
    PurchaseSpec,
    QuestCompleteRequirement,
    QuestGate,
    QuestInLogRequirement,
)
from .loader import (
    GoalConfigError,
    load_all_goals,
    load_goal_from_file,
    load_goal_from_mapping,
)

__all__ = [
    "EntityStateFilter",
    "GoalSpec",
    "NavigationMode",
    "PurchaseSpec",
    "QuestCompleteRequirement",
    "QuestGate",
    "QuestInLogRequirement",
    "GoalConfigError",
    "load_all_goals",
    "load_goal_from_file",
    "load_goal_from_mapping",
]
