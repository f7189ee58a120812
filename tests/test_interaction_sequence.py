# tests/test_interaction_sequence.py
"""
Unit tests for interaction.sequence.

Covers:
- full step order, pauses included
- skipped steps never abort the pipeline
- purchase affordability and stock rules
- exactly one counter increment per run
"""

from __future__ import annotations

from contracts.types import VendorItem
from goals.schema import GoalSpec, PurchaseSpec
from interaction.blacklist import Blacklist
from interaction.sequence import (
    InteractionSequence,
    InteractionTimings,
    choose_purchase,
    is_affordable,
)
from interaction.state import RepetitionCounter
from interaction.testing import FakeWorld, make_entity


def _run(world: FakeWorld, goal: GoalSpec, guid: int = 1):
    blacklist = Blacklist()
    counter = RepetitionCounter()
    sequence = InteractionSequence(
        goal,
        world.collaborators(),
        blacklist,
        counter,
        timings=InteractionTimings(),
        sleep=world.sleep,
    )
    report = sequence.run(world.entities[guid])
    return report, blacklist, counter


def test_full_sequence_runs_steps_in_order() -> None:
    world = FakeWorld([make_entity(1, 100, (1.0, 0.0, 0.0), name="Quartermaster")], funds=500)
    world.moving = True
    world.loot.open = True
    world.vendor.open = True
    world.vendor.items = [VendorItem(item_id=555, slot=3, unit_price=10)]
    goal = GoalSpec(
        entry_ids=frozenset({100}),
        dialog_options=(1, 0),
        loot=True,
        purchase=PurchaseSpec(item_id=555, quantity=2),
        wait_ms=3000,
    )

    report, blacklist, counter = _run(world, goal)

    assert world.calls == [
        ("stop",),
        ("sleep", 250),
        ("interact", 1),
        ("sleep", 2000),
        ("select_option", 1),
        ("sleep", 1000),
        ("select_option", 0),
        ("sleep", 1000),
        ("loot_all",),
        ("buy", 3, 2),
        ("sleep", 1500),
        ("clear_selection",),
        ("sleep", 3000),
    ]
    assert report.stopped
    assert report.dialog_options == [1, 0]
    assert report.looted
    assert report.purchased == world.vendor.items[0]
    assert report.cleared_selection
    assert report.counter == 1
    assert counter.value == 1
    assert blacklist.snapshot() == [1]
    assert world.status.status_text == "Interacting with - Quartermaster"


def test_minimal_sequence_skips_optional_steps() -> None:
    world = FakeWorld([make_entity(1, 100, (1.0, 0.0, 0.0))])
    goal = GoalSpec(entry_ids=frozenset({100}), wait_ms=0)

    report, blacklist, counter = _run(world, goal)

    assert world.calls == [("interact", 1), ("sleep", 2000), ("clear_selection",)]
    assert not report.stopped
    assert not report.looted
    assert report.purchased is None
    assert counter.value == 1
    assert 1 in blacklist


def test_loot_skipped_when_window_closed() -> None:
    world = FakeWorld([make_entity(1, 100, (1.0, 0.0, 0.0))])
    goal = GoalSpec(entry_ids=frozenset({100}), loot=True, wait_ms=0)

    report, _, counter = _run(world, goal)

    assert world.calls_named("loot_all") == []
    assert not report.looted
    assert counter.value == 1


def test_selection_kept_when_actor_targets_something_else() -> None:
    world = FakeWorld([make_entity(1, 100, (1.0, 0.0, 0.0))])
    world.on_interact = lambda entity: setattr(world, "selection", 99)
    goal = GoalSpec(entry_ids=frozenset({100}), wait_ms=0)

    report, _, _ = _run(world, goal)

    assert world.calls_named("clear_selection") == []
    assert not report.cleared_selection


def test_unaffordable_purchase_is_skipped_but_counted() -> None:
    world = FakeWorld([make_entity(1, 100, (1.0, 0.0, 0.0))], funds=25)
    world.vendor.open = True
    world.vendor.items = [VendorItem(item_id=7, slot=0, unit_price=6)]
    goal = GoalSpec(
        entry_ids=frozenset({100}),
        purchase=PurchaseSpec(item_id=7, quantity=5),
        wait_ms=0,
    )

    report, _, counter = _run(world, goal)

    assert world.calls_named("buy") == []
    assert report.purchased is None
    assert counter.value == 1


def test_exactly_affordable_purchase_is_made() -> None:
    world = FakeWorld([make_entity(1, 100, (1.0, 0.0, 0.0))], funds=25)
    world.vendor.open = True
    world.vendor.items = [VendorItem(item_id=7, slot=4, unit_price=5)]
    goal = GoalSpec(
        entry_ids=frozenset({100}),
        purchase=PurchaseSpec(item_id=7, quantity=5),
        wait_ms=0,
    )

    report, _, _ = _run(world, goal)

    assert world.calls_named("buy") == [("buy", 4, 5)]
    assert report.purchased is not None


def test_purchase_by_slot() -> None:
    world = FakeWorld([make_entity(1, 100, (1.0, 0.0, 0.0))], funds=100)
    world.vendor.open = True
    world.vendor.items = [
        VendorItem(item_id=1, slot=0, unit_price=1),
        VendorItem(item_id=2, slot=2, unit_price=1),
    ]
    goal = GoalSpec(
        entry_ids=frozenset({100}),
        purchase=PurchaseSpec(slot=2, quantity=3),
        wait_ms=0,
    )

    _run(world, goal)

    assert world.calls_named("buy") == [("buy", 2, 3)]


def test_purchase_skipped_when_vendor_closed() -> None:
    world = FakeWorld([make_entity(1, 100, (1.0, 0.0, 0.0))], funds=100)
    world.vendor.items = [VendorItem(item_id=1, slot=0, unit_price=1)]
    goal = GoalSpec(
        entry_ids=frozenset({100}),
        purchase=PurchaseSpec(item_id=1),
        wait_ms=0,
    )

    _run(world, goal)

    assert world.calls_named("buy") == []


def test_affordability_rules() -> None:
    unlimited = VendorItem(item_id=1, slot=0, unit_price=5)
    limited = VendorItem(item_id=1, slot=0, unit_price=5, stock=3)

    assert is_affordable(unlimited, 5, 25)
    assert not is_affordable(unlimited, 5, 24)
    assert is_affordable(limited, 3, 100)
    assert not is_affordable(limited, 4, 100)


def test_choose_purchase_by_item_id_takes_first_affordable_row() -> None:
    rows = [
        VendorItem(item_id=9, slot=0, unit_price=5, stock=0),
        VendorItem(item_id=9, slot=1, unit_price=5),
        VendorItem(item_id=3, slot=2, unit_price=1),
    ]

    chosen = choose_purchase(rows, PurchaseSpec(item_id=9), funds=10)
    assert chosen is rows[1]

    assert choose_purchase(rows, PurchaseSpec(item_id=4), funds=10) is None
    assert choose_purchase(rows, PurchaseSpec(slot=0), funds=10) is None
    assert choose_purchase(rows, PurchaseSpec(slot=2), funds=10) is rows[2]
