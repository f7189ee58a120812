"""
Shared contracts for the interaction agent.

- types: geometry, world entity, vendor item and action envelopes
- collaborators: Protocols for every external system the core talks to
"""

from __future__ import annotations

from .types import (
    Action,
    ActionResult,
    ObjectCategory,
    Point,
    UNLIMITED_STOCK,
    VendorItem,
    WorldEntity,
)
from .collaborators import (
    ActorState,
    Collaborators,
    DialogSurface,
    InteractionTrigger,
    LootSurface,
    Navigator,
    QuestProgress,
    StatusSink,
    VendorSurface,
    WorldQuery,
)

__all__ = [
    "Action",
    "ActionResult",
    "ObjectCategory",
    "Point",
    "UNLIMITED_STOCK",
    "VendorItem",
    "WorldEntity",
    "ActorState",
    "Collaborators",
    "DialogSurface",
    "InteractionTrigger",
    "LootSurface",
    "Navigator",
    "QuestProgress",
    "StatusSink",
    "VendorSurface",
    "WorldQuery",
]
