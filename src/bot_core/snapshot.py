# RawWorldSnapshot + conversions to WorldEntity / VendorItem
# src/bot_core/snapshot.py
"""
Snapshot structures for bot_core.

This module defines the raw world snapshot types assembled by the
WorldTracker and the adapters that turn raw rows into the shared
contract types (`contracts.types.WorldEntity`, `VendorItem`).

Design goals:
- Keep Raw* structures close to the data we ingest from the packet client.
- Keep contract types stable; this module only adapts into them.
- No goal logic here: filtering and ranking belong to interaction.selector.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from contracts.types import ObjectCategory, Point, UNLIMITED_STOCK, VendorItem, WorldEntity


# ---------------------------------------------------------------------------
# Raw world types (internal to bot_core)
# ---------------------------------------------------------------------------


@dataclass
class RawEntity:
    """
    Raw entity data as captured from packets.

    `data` keeps the original payload for debugging.
    """

    guid: int
    entry: int
    kind: str  # "npc" or "game_object"
    name: str
    x: float
    y: float
    z: float
    alive: bool = True
    dead: bool = False
    health: float = 1.0
    moving: bool = False
    minion: bool = False
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RawMerchantItem:
    item_id: int
    slot: int
    price: int
    stock: int = UNLIMITED_STOCK


@dataclass
class RawWorldSnapshot:
    """
    Full raw snapshot of the world as tracked by bot_core.

    Higher layers never see this type directly; they go through the
    collaborator adapters in bot_core.surfaces.
    """

    tick: int

    player_pos: Dict[str, float]  # {"x": float, "y": float, "z": float}
    player_moving: bool
    target_guid: Optional[int]
    money: int

    entities: List[RawEntity]
    loot_open: bool
    merchant_items: Optional[List[RawMerchantItem]]  # None: no vendor window
    quests: Dict[int, bool]  # quest id -> complete flag, for quests in the log


# ---------------------------------------------------------------------------
# Contract adapters
# ---------------------------------------------------------------------------


_KINDS = {
    "npc": ObjectCategory.NPC,
    "unit": ObjectCategory.NPC,
    "game_object": ObjectCategory.GAME_OBJECT,
    "gameobject": ObjectCategory.GAME_OBJECT,
}


def category_for_kind(kind: str) -> Optional[ObjectCategory]:
    """Map a raw entity kind to an ObjectCategory; None for players, items, ..."""
    return _KINDS.get(kind.lower())


def raw_to_world_entity(entity: RawEntity) -> Optional[WorldEntity]:
    """Adapt a RawEntity; None when its kind is not interactable."""
    category = category_for_kind(entity.kind)
    if category is None:
        return None
    return WorldEntity(
        guid=entity.guid,
        entry=entity.entry,
        name=entity.name,
        category=category,
        position=Point(entity.x, entity.y, entity.z),
        is_alive=entity.alive,
        is_dead=entity.dead,
        health_fraction=max(0.0, min(1.0, entity.health)),
        is_moving=entity.moving,
        is_minion=entity.minion,
    )


def raw_to_vendor_item(item: RawMerchantItem) -> VendorItem:
    return VendorItem(
        item_id=item.item_id,
        slot=item.slot,
        unit_price=item.price,
        stock=item.stock,
    )


def player_point(snapshot: RawWorldSnapshot) -> Point:
    return Point(
        float(snapshot.player_pos.get("x", 0.0)),
        float(snapshot.player_pos.get("y", 0.0)),
        float(snapshot.player_pos.get("z", 0.0)),
    )


__all__ = [
    "RawEntity",
    "RawMerchantItem",
    "RawWorldSnapshot",
    "category_for_kind",
    "player_point",
    "raw_to_vendor_item",
    "raw_to_world_entity",
]
