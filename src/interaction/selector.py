# src/interaction/selector.py
"""
Target selection for the interaction core.

Given the live entity set and a goal, pick the single best candidate:
the nearest entity that passes every filter. This is a pure query: no
side effects, and an empty result is a normal outcome.

Filter order:
    1. allowed entry ids
    2. not blacklisted
    3. inside the collection radius
    4. NPCs only: not a minion of the actor; not moving if required
    5. life-state filter
    6. nearest first
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from contracts.types import ObjectCategory, Point, WorldEntity
from goals.schema import EntityStateFilter, GoalSpec
from .blacklist import Blacklist

log = logging.getLogger(__name__)


def matches_state(entity: WorldEntity, goal: GoalSpec) -> bool:
    """Life-state gate for a single entity."""
    state = goal.state_filter
    if state is EntityStateFilter.DONT_CARE:
        return True
    if state is EntityStateFilter.DEAD:
        return entity.is_dead
    if state is EntityStateFilter.ALIVE:
        return entity.is_alive
    # BELOW_HP
    return entity.is_alive and entity.health_fraction * 100.0 < goal.hp_threshold_percent


def candidates(
    entities: Iterable[WorldEntity],
    goal: GoalSpec,
    blacklist: Blacklist,
    actor_position: Point,
) -> List[WorldEntity]:
    """All qualifying entities, nearest first."""
    radius_sqr = goal.collection_radius * goal.collection_radius
    is_npc = goal.category is ObjectCategory.NPC

    kept: List[WorldEntity] = []
    for entity in entities:
        if entity.entry not in goal.entry_ids:
            continue
        if entity.guid in blacklist:
            continue
        if entity.position.distance_sqr(actor_position) >= radius_sqr:
            continue
        if is_npc:
            if entity.is_minion:
                continue
            if goal.not_moving and entity.is_moving:
                continue
            if not matches_state(entity, goal):
                continue
        kept.append(entity)

    # sorted() is stable: equidistant entities keep world-query order.
    return sorted(kept, key=lambda e: e.position.distance_sqr(actor_position))


def select_target(
    entities: Iterable[WorldEntity],
    goal: GoalSpec,
    blacklist: Blacklist,
    actor_position: Point,
) -> Optional[WorldEntity]:
    """Nearest qualifying entity, or None."""
    ranked = candidates(entities, goal, blacklist, actor_position)
    if not ranked:
        return None
    target = ranked[0]
    log.debug("Selected target %s (guid=%s)", target.display_name, target.guid)
    return target


class TargetSelector:
    """Binds a goal and blacklist to the world query used each tick."""

    def __init__(self, goal: GoalSpec, blacklist: Blacklist) -> None:
        self._goal = goal
        self._blacklist = blacklist

    def select(
        self, entities: Iterable[WorldEntity], actor_position: Point
    ) -> Optional[WorldEntity]:
        return select_target(entities, self._goal, self._blacklist, actor_position)
