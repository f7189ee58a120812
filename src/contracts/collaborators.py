# Collaborator interfaces consumed by the interaction core
# src/contracts/collaborators.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from .types import ObjectCategory, Point, VendorItem, WorldEntity


class WorldQuery(Protocol):
    """Enumeration of live world entities.

    Results are refreshed on every call; the core never assumes caching.
    """

    def entities_of_type(self, category: ObjectCategory) -> Sequence[WorldEntity]:
        ...


class ActorState(Protocol):
    """The controlled character ("me")."""

    @property
    def position(self) -> Point:
        ...

    @property
    def is_moving(self) -> bool:
        ...

    @property
    def current_selection(self) -> Optional[int]:
        """Guid of the currently selected target, if any."""
        ...

    @property
    def funds(self) -> int:
        """Money available for vendor purchases (copper)."""
        ...

    def clear_selection(self) -> None:
        ...


class Navigator(Protocol):
    """Movement primitives. Pathfinding lives behind move_to()."""

    def move_to(self, point: Point) -> None:
        """Path-planned movement toward ``point``."""
        ...

    def click_to_move(self, point: Point) -> None:
        """Direct (straight-line) movement toward ``point``."""
        ...

    def stop(self) -> None:
        ...


class InteractionTrigger(Protocol):
    def interact(self, entity: WorldEntity) -> None:
        ...


class DialogSurface(Protocol):
    def select_option(self, index: int) -> None:
        """Pick a 0-based option in the active dialog."""
        ...


class LootSurface(Protocol):
    def is_open(self) -> bool:
        ...

    def loot_all(self) -> None:
        ...


class VendorSurface(Protocol):
    def is_open(self) -> bool:
        ...

    def list_offered_items(self) -> Sequence[VendorItem]:
        ...

    def buy(self, slot: int, quantity: int) -> None:
        ...


class QuestProgress(Protocol):
    def is_in_log(self, quest_id: int) -> bool:
        ...

    def is_complete(self, quest_id: int) -> bool:
        ...


class StatusSink(Protocol):
    """Advisory text output; has no behavioral effect."""

    def set_goal_text(self, text: str) -> None:
        ...

    def set_status_text(self, text: str) -> None:
        ...


@dataclass
class Collaborators:
    """Bundle of everything the interaction core talks to."""
    world: WorldQuery
    actor: ActorState
    navigator: Navigator
    trigger: InteractionTrigger
    dialog: DialogSurface
    loot: LootSurface
    vendor: VendorSurface
    quests: QuestProgress
    status: StatusSink
