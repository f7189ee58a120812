# tests/test_interaction_selector.py
"""
Unit tests for interaction.selector.

Covers:
- entry id / blacklist / radius filters
- nearest-first ranking with stable ties
- NPC-only filters (minion, not moving, life state)
"""

from __future__ import annotations

from contracts.types import ObjectCategory, Point
from goals.schema import EntityStateFilter, GoalSpec
from interaction.blacklist import Blacklist
from interaction.selector import TargetSelector, candidates, matches_state, select_target
from interaction.testing import make_entity

ORIGIN = Point(0.0, 0.0, 0.0)


def _goal(**kwargs) -> GoalSpec:
    kwargs.setdefault("entry_ids", frozenset({100}))
    return GoalSpec(**kwargs)


def test_nearest_matching_entity_is_selected() -> None:
    far = make_entity(1, 100, (30.0, 0.0, 0.0))
    near = make_entity(2, 100, (5.0, 0.0, 0.0))
    other_type = make_entity(3, 999, (1.0, 0.0, 0.0))

    target = select_target([far, near, other_type], _goal(), Blacklist(), ORIGIN)

    assert target is near


def test_blacklisted_entity_is_never_selected() -> None:
    near = make_entity(1, 100, (2.0, 0.0, 0.0))
    far = make_entity(2, 100, (50.0, 0.0, 0.0))
    blacklist = Blacklist()
    blacklist.add(1)

    target = select_target([near, far], _goal(), blacklist, ORIGIN)

    assert target is far


def test_entity_on_collection_radius_is_excluded() -> None:
    on_edge = make_entity(1, 100, (10.0, 0.0, 0.0))
    inside = make_entity(2, 100, (0.0, 9.9, 0.0))

    ranked = candidates([on_edge, inside], _goal(collection_radius=10.0), Blacklist(), ORIGIN)

    assert [e.guid for e in ranked] == [2]


def test_equidistant_entities_keep_world_order() -> None:
    a = make_entity(1, 100, (3.0, 0.0, 0.0))
    b = make_entity(2, 100, (0.0, 3.0, 0.0))
    c = make_entity(3, 100, (0.0, 0.0, 3.0))

    ranked = candidates([b, c, a], _goal(), Blacklist(), ORIGIN)

    assert [e.guid for e in ranked] == [2, 3, 1]


def test_minions_and_moving_npcs_are_filtered() -> None:
    minion = make_entity(1, 100, (1.0, 0.0, 0.0), is_minion=True)
    walker = make_entity(2, 100, (2.0, 0.0, 0.0), is_moving=True)
    idle = make_entity(3, 100, (3.0, 0.0, 0.0))

    assert select_target([minion, walker, idle], _goal(), Blacklist(), ORIGIN) is walker
    assert (
        select_target([minion, walker, idle], _goal(not_moving=True), Blacklist(), ORIGIN)
        is idle
    )


def test_state_filters() -> None:
    alive = make_entity(1, 100, (1.0, 0.0, 0.0), health_fraction=0.8)
    hurt = make_entity(2, 100, (2.0, 0.0, 0.0), health_fraction=0.3)
    corpse = make_entity(3, 100, (3.0, 0.0, 0.0), is_alive=False, is_dead=True,
                         health_fraction=0.0)

    assert matches_state(corpse, _goal(state_filter=EntityStateFilter.DONT_CARE))
    assert matches_state(corpse, _goal(state_filter=EntityStateFilter.DEAD))
    assert not matches_state(alive, _goal(state_filter=EntityStateFilter.DEAD))
    assert matches_state(alive, _goal(state_filter=EntityStateFilter.ALIVE))
    assert not matches_state(corpse, _goal(state_filter=EntityStateFilter.ALIVE))

    below = _goal(state_filter=EntityStateFilter.BELOW_HP, hp_threshold_percent=50.0)
    assert matches_state(hurt, below)
    assert not matches_state(alive, below)
    assert not matches_state(corpse, below)


def test_state_filter_does_not_apply_to_game_objects() -> None:
    goal = _goal(category=ObjectCategory.GAME_OBJECT, state_filter=EntityStateFilter.DEAD)
    chest = make_entity(1, 100, (1.0, 0.0, 0.0), category=ObjectCategory.GAME_OBJECT)

    assert select_target([chest], goal, Blacklist(), ORIGIN) is chest


def test_selector_sees_blacklist_updates() -> None:
    blacklist = Blacklist()
    selector = TargetSelector(_goal(), blacklist)
    entities = [make_entity(1, 100, (1.0, 0.0, 0.0)), make_entity(2, 100, (4.0, 0.0, 0.0))]

    assert selector.select(entities, ORIGIN).guid == 1
    blacklist.add(1)
    assert selector.select(entities, ORIGIN).guid == 2
    blacklist.add(2)
    assert selector.select(entities, ORIGIN) is None
