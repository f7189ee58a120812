# core shared types: Point, WorldEntity, VendorItem, Action, ActionResult
# src/contracts/types.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Point:
    """3-D world position."""
    x: float
    y: float
    z: float

    def distance_sqr(self, other: "Point") -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return dx * dx + dy * dy + dz * dz

    def distance(self, other: "Point") -> float:
        return self.distance_sqr(other) ** 0.5

    def __str__(self) -> str:
        return f"<{self.x:.2f}, {self.y:.2f}, {self.z:.2f}>"


# ---------------------------------------------------------------------------
# World entities
# ---------------------------------------------------------------------------

class ObjectCategory(Enum):
    """Object class a goal is interested in."""
    NPC = "npc"
    GAME_OBJECT = "game_object"


@dataclass(frozen=True)
class WorldEntity:
    """Read-only view of a live world entity.

    Owned by the world model. The interaction core only holds transient
    references to these and always re-resolves them by ``guid``.

    Fields:

      - guid:
          Stable 64-bit handle for the entity instance.

      - entry:
          Type-class id (e.g. creature template id). Goals filter on this.

      - health_fraction:
          Current health in [0, 1]. Game objects report 1.0.

      - is_minion:
          True when the entity is a pet/minion of the actor. Such units are
          never interaction candidates.
    """
    guid: int
    entry: int
    name: str
    category: ObjectCategory
    position: Point
    is_alive: bool = True
    is_dead: bool = False
    health_fraction: float = 1.0
    is_moving: bool = False
    is_minion: bool = False

    @property
    def display_name(self) -> str:
        return self.name or f"Mob({self.entry})"


# ---------------------------------------------------------------------------
# Vendor
# ---------------------------------------------------------------------------

UNLIMITED_STOCK = -1


@dataclass(frozen=True)
class VendorItem:
    """One row of a vendor's offer list."""
    item_id: int
    slot: int                               # 0-based merchant index
    unit_price: int                         # copper per unit
    stock: int = UNLIMITED_STOCK            # -1 means unlimited

    def covers(self, quantity: int) -> bool:
        return self.stock == UNLIMITED_STOCK or self.stock >= quantity


# ---------------------------------------------------------------------------
# Low-level action envelope (bot_core)
# ---------------------------------------------------------------------------

@dataclass
class Action:
    """Abstract action that collaborators can send to BotCore."""
    type: str                               # e.g. "move_to", "interact", "buy_item"
    params: Dict[str, Any]                  # parameters for the action


@dataclass
class ActionResult:
    """Result of executing an Action."""
    success: bool                           # did it work?
    error: Optional[str]                    # error code if not
    details: Dict[str, Any]                 # optional extra info
