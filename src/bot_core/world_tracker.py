# track entities, player, vendor and quest state from packets
# src/bot_core/world_tracker.py
"""
World tracker for bot_core.

Consumes normalized packet events from a PacketClient and maintains a
raw, incrementally updated view of the world. This module is the ONLY
owner of RawWorldSnapshot assembly.

Rules:
- Never filter or rank entities for a goal (interaction.selector owns that).
- Keep storage minimal and "raw"; avoid bloated derived structures.
- Garbage fields are ignored, never raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from contracts.types import UNLIMITED_STOCK
from .net import PacketClient
from .snapshot import RawEntity, RawMerchantItem, RawWorldSnapshot


@dataclass
class _PlayerState:
    """Minimal tracked state for the local player."""

    pos: Dict[str, float] = field(
        default_factory=lambda: {"x": 0.0, "y": 0.0, "z": 0.0}
    )
    moving: bool = False
    target_guid: Optional[int] = None
    money: int = 0


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    return bool(value)


class WorldTracker:
    """
    Maintains an incrementally updated RawWorldSnapshot.

    PacketClient implementations must normalize wire data into logically
    named event types:

        - "time_update"        → tick updates
        - "position_update"    → player position / moving flag
        - "player_state"       → money, moving flag, current target
        - "target_changed"     → current target guid (or None)
        - "spawn_entity"       → entity created
        - "entity_update"      → partial entity update
        - "destroy_entities"   → entities destroyed
        - "loot_opened" / "loot_closed"
        - "merchant_opened" / "merchant_closed"
        - "quest_log"          → full quest log replacement
        - "quest_update"       → one quest added / completed / removed
        - "money"              → current funds (copper)
    """

    def __init__(self, client: PacketClient) -> None:
        self._client = client

        self._tick: int = 0
        self._player: _PlayerState = _PlayerState()

        # Entities keyed by guid
        self._entities: Dict[int, RawEntity] = {}

        self._loot_open: bool = False
        self._merchant_items: Optional[List[RawMerchantItem]] = None

        # Quest id -> complete flag
        self._quests: Dict[int, bool] = {}

        self._register_handlers()

    # ------------------------------------------------------------------
    # Packet wiring
    # ------------------------------------------------------------------

    def _register_handlers(self) -> None:
        self._client.on_packet("time_update", self._handle_time_update)
        self._client.on_packet("position_update", self._handle_position_update)
        self._client.on_packet("player_state", self._handle_player_state)
        self._client.on_packet("target_changed", self._handle_target_changed)
        self._client.on_packet("spawn_entity", self._handle_spawn_entity)
        self._client.on_packet("entity_update", self._handle_entity_update)
        self._client.on_packet("destroy_entities", self._handle_destroy_entities)
        self._client.on_packet("loot_opened", self._handle_loot_opened)
        self._client.on_packet("loot_closed", self._handle_loot_closed)
        self._client.on_packet("merchant_opened", self._handle_merchant_opened)
        self._client.on_packet("merchant_closed", self._handle_merchant_closed)
        self._client.on_packet("quest_log", self._handle_quest_log)
        self._client.on_packet("quest_update", self._handle_quest_update)
        self._client.on_packet("money", self._handle_money)

    # ------------------------------------------------------------------
    # Player
    # ------------------------------------------------------------------

    def _handle_time_update(self, pkt: Mapping[str, Any]) -> None:
        value = pkt.get("tick", self._tick)
        try:
            self._tick = int(value)
        except (TypeError, ValueError):
            return

    def _handle_position_update(self, pkt: Mapping[str, Any]) -> None:
        """
        Expected fields:
            - "x", "y", "z": float
            - "moving": bool (optional)
        """
        try:
            self._player.pos = {
                "x": float(pkt.get("x", self._player.pos["x"])),
                "y": float(pkt.get("y", self._player.pos["y"])),
                "z": float(pkt.get("z", self._player.pos["z"])),
            }
        except (TypeError, ValueError):
            # Ignore malformed position updates.
            pass

        if "moving" in pkt:
            self._player.moving = bool(pkt["moving"])

    def _handle_player_state(self, pkt: Mapping[str, Any]) -> None:
        """
        Expected fields (all optional):
            - "money": int (copper)
            - "moving": bool
            - "target_guid": int or None
        """
        if "money" in pkt:
            try:
                self._player.money = int(pkt["money"])
            except (TypeError, ValueError):
                pass
        if "moving" in pkt:
            self._player.moving = bool(pkt["moving"])
        if "target_guid" in pkt:
            self._handle_target_changed({"guid": pkt["target_guid"]})

    def _handle_money(self, pkt: Mapping[str, Any]) -> None:
        try:
            self._player.money = int(pkt.get("amount", self._player.money))
        except (TypeError, ValueError):
            return

    def _handle_target_changed(self, pkt: Mapping[str, Any]) -> None:
        guid = pkt.get("guid")
        if guid is None:
            self._player.target_guid = None
            return
        try:
            self._player.target_guid = int(guid)
        except (TypeError, ValueError):
            return

    # ------------------------------------------------------------------
    # Entities
    # ------------------------------------------------------------------

    def _handle_spawn_entity(self, pkt: Mapping[str, Any]) -> None:
        """
        Track newly spawned entities.

        Expected fields:
            - "guid": int
            - "entry": int
            - "kind": "npc" | "game_object" | anything else (ignored later)
            - "x", "y", "z": float
            - optional: "name", "alive", "dead", "health", "moving", "minion"
        """
        try:
            guid = int(pkt["guid"])
            entry = int(pkt.get("entry", 0))
        except (KeyError, TypeError, ValueError):
            return

        try:
            x = float(pkt.get("x", 0.0))
            y = float(pkt.get("y", 0.0))
            z = float(pkt.get("z", 0.0))
        except (TypeError, ValueError):
            x = y = z = 0.0

        dead = _as_bool(pkt.get("dead"), False)
        try:
            health = float(pkt.get("health", 0.0 if dead else 1.0))
        except (TypeError, ValueError):
            health = 1.0

        self._entities[guid] = RawEntity(
            guid=guid,
            entry=entry,
            kind=str(pkt.get("kind", "npc")),
            name=str(pkt.get("name", "")),
            x=x,
            y=y,
            z=z,
            alive=_as_bool(pkt.get("alive"), not dead),
            dead=dead,
            health=health,
            moving=_as_bool(pkt.get("moving"), False),
            minion=_as_bool(pkt.get("minion"), False),
            data=dict(pkt),
        )

    def _handle_entity_update(self, pkt: Mapping[str, Any]) -> None:
        """Partial update; unknown guids are ignored."""
        try:
            guid = int(pkt["guid"])
        except (KeyError, TypeError, ValueError):
            return
        entity = self._entities.get(guid)
        if entity is None:
            return

        for key in ("x", "y", "z", "health"):
            if key in pkt:
                try:
                    setattr(entity, key, float(pkt[key]))
                except (TypeError, ValueError):
                    pass
        for key in ("alive", "dead", "moving", "minion"):
            if key in pkt:
                setattr(entity, key, bool(pkt[key]))
        if "name" in pkt:
            entity.name = str(pkt["name"])
        entity.data.update(pkt)

    def _handle_destroy_entities(self, pkt: Mapping[str, Any]) -> None:
        """
        Expected fields:
            - "guids": iterable of ints
        """
        ids = pkt.get("guids")
        if not ids:
            return

        for raw_id in ids:
            try:
                guid = int(raw_id)
            except (TypeError, ValueError):
                continue
            self._entities.pop(guid, None)
            if self._player.target_guid == guid:
                self._player.target_guid = None

    # ------------------------------------------------------------------
    # UI surfaces
    # ------------------------------------------------------------------

    def _handle_loot_opened(self, pkt: Mapping[str, Any]) -> None:
        self._loot_open = True

    def _handle_loot_closed(self, pkt: Mapping[str, Any]) -> None:
        self._loot_open = False

    def _handle_merchant_opened(self, pkt: Mapping[str, Any]) -> None:
        """
        Expected fields:
            - "items": list of {"item_id", "slot", "price", "stock"}
              (stock -1 or missing = unlimited)
        """
        items: List[RawMerchantItem] = []
        for entry in pkt.get("items") or []:
            if not isinstance(entry, Mapping):
                continue
            try:
                items.append(
                    RawMerchantItem(
                        item_id=int(entry["item_id"]),
                        slot=int(entry["slot"]),
                        price=int(entry.get("price", 0)),
                        stock=int(entry.get("stock", UNLIMITED_STOCK)),
                    )
                )
            except (KeyError, TypeError, ValueError):
                continue
        self._merchant_items = items

    def _handle_merchant_closed(self, pkt: Mapping[str, Any]) -> None:
        self._merchant_items = None

    # ------------------------------------------------------------------
    # Quests
    # ------------------------------------------------------------------

    def _handle_quest_log(self, pkt: Mapping[str, Any]) -> None:
        """
        Expected fields:
            - "quests": list of {"id": int, "complete": bool}
        """
        quests: Dict[int, bool] = {}
        for entry in pkt.get("quests") or []:
            if not isinstance(entry, Mapping):
                continue
            try:
                quests[int(entry["id"])] = bool(entry.get("complete", False))
            except (KeyError, TypeError, ValueError):
                continue
        self._quests = quests

    def _handle_quest_update(self, pkt: Mapping[str, Any]) -> None:
        """
        Expected fields:
            - "id": int
            - "complete": bool (optional)
            - "removed": bool (optional; abandoned or turned in)
        """
        try:
            quest_id = int(pkt["id"])
        except (KeyError, TypeError, ValueError):
            return
        if pkt.get("removed"):
            self._quests.pop(quest_id, None)
            return
        self._quests[quest_id] = bool(pkt.get("complete", self._quests.get(quest_id, False)))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def tick(self) -> int:
        return self._tick

    def build_snapshot(self) -> RawWorldSnapshot:
        """
        Build a RawWorldSnapshot from the current tracked state.

        This is the ONLY way to get a snapshot out of the tracker.
        Entities are copied so later packets never mutate a handed-out
        snapshot.
        """
        return RawWorldSnapshot(
            tick=self._tick,
            player_pos=dict(self._player.pos),
            player_moving=self._player.moving,
            target_guid=self._player.target_guid,
            money=self._player.money,
            entities=[
                RawEntity(**{**e.__dict__, "data": dict(e.data)})
                for e in self._entities.values()
            ],
            loot_open=self._loot_open,
            merchant_items=(
                list(self._merchant_items) if self._merchant_items is not None else None
            ),
            quests=dict(self._quests),
        )


__all__ = ["WorldTracker"]
