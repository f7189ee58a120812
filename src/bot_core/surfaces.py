# src/bot_core/surfaces.py
"""
Collaborator adapters over a BotCore.

Each class implements one of the Protocols in `contracts.collaborators`
by reading a fresh RawWorldSnapshot (observe) or issuing one Action
(execute_action). The interaction core never sees packets or snapshots.

Action failures are logged at WARNING and otherwise ignored: the
interaction sequence is fire-and-forget and the state machine
re-evaluates the world on the next tick.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

from contracts.collaborators import Collaborators, StatusSink
from contracts.types import Action, ActionResult, ObjectCategory, Point, VendorItem, WorldEntity
from .snapshot import RawWorldSnapshot, player_point, raw_to_vendor_item, raw_to_world_entity

log = logging.getLogger(__name__)


class _Core(Protocol):
    def observe(self) -> RawWorldSnapshot:
        ...

    def execute_action(self, action: Action) -> ActionResult:
        ...


class _CoreSurface:
    def __init__(self, core: _Core) -> None:
        self._core = core

    def _snapshot(self) -> RawWorldSnapshot:
        return self._core.observe()

    def _do(self, action_type: str, **params: Any) -> ActionResult:
        result = self._core.execute_action(Action(type=action_type, params=params))
        if not result.success:
            log.warning(
                "%s failed: error=%s details=%r", action_type, result.error, result.details
            )
        return result


class SnapshotWorld(_CoreSurface):
    """WorldQuery over the tracked entity list."""

    def entities_of_type(self, category: ObjectCategory) -> Sequence[WorldEntity]:
        out: List[WorldEntity] = []
        for raw in self._snapshot().entities:
            entity = raw_to_world_entity(raw)
            if entity is not None and entity.category is category:
                out.append(entity)
        return out


class SnapshotActor(_CoreSurface):
    """ActorState for the local player."""

    @property
    def position(self) -> Point:
        return player_point(self._snapshot())

    @property
    def is_moving(self) -> bool:
        return self._snapshot().player_moving

    @property
    def current_selection(self) -> Optional[int]:
        return self._snapshot().target_guid

    @property
    def funds(self) -> int:
        return self._snapshot().money

    def clear_selection(self) -> None:
        self._do("clear_target")


class ActionNavigator(_CoreSurface):
    def move_to(self, point: Point) -> None:
        self._do("move_to", x=point.x, y=point.y, z=point.z)

    def click_to_move(self, point: Point) -> None:
        self._do("click_to_move", x=point.x, y=point.y, z=point.z)

    def stop(self) -> None:
        self._do("stop")


class ActionTrigger(_CoreSurface):
    def interact(self, entity: WorldEntity) -> None:
        self._do("interact", guid=entity.guid)


class ActionDialog(_CoreSurface):
    def select_option(self, index: int) -> None:
        self._do("select_gossip", index=index)


class ActionLoot(_CoreSurface):
    def is_open(self) -> bool:
        return self._snapshot().loot_open

    def loot_all(self) -> None:
        self._do("loot_all")


class ActionVendor(_CoreSurface):
    def is_open(self) -> bool:
        return self._snapshot().merchant_items is not None

    def list_offered_items(self) -> Sequence[VendorItem]:
        items = self._snapshot().merchant_items or []
        return [raw_to_vendor_item(item) for item in items]

    def buy(self, slot: int, quantity: int) -> None:
        self._do("buy_item", slot=slot, quantity=quantity)


class SnapshotQuests(_CoreSurface):
    def _quests(self) -> Dict[int, bool]:
        return self._snapshot().quests

    def is_in_log(self, quest_id: int) -> bool:
        return quest_id in self._quests()

    def is_complete(self, quest_id: int) -> bool:
        return self._quests().get(quest_id, False)


def build_collaborators(core: _Core, status: StatusSink) -> Collaborators:
    """Wire every collaborator surface to one core."""
    return Collaborators(
        world=SnapshotWorld(core),
        actor=SnapshotActor(core),
        navigator=ActionNavigator(core),
        trigger=ActionTrigger(core),
        dialog=ActionDialog(core),
        loot=ActionLoot(core),
        vendor=ActionVendor(core),
        quests=SnapshotQuests(core),
        status=status,
    )


__all__ = [
    "ActionDialog",
    "ActionLoot",
    "ActionNavigator",
    "ActionTrigger",
    "ActionVendor",
    "SnapshotActor",
    "SnapshotQuests",
    "SnapshotWorld",
    "build_collaborators",
]
