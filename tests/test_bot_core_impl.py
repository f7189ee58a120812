# tests/test_bot_core_impl.py
"""
Integration tests for BotCoreImpl and its collaborator surfaces.

Covers:
- lifecycle and BotCoreError
- observe() / execute_action() wiring through FakePacketClient
- contract surfaces over tracked state
- a full goal against SimulatedPacketClient
"""

from __future__ import annotations

import pytest

from bot_core.core import BotCoreError, BotCoreImpl
from bot_core.testing.fakes import FakePacketClient, SimulatedPacketClient
from contracts.types import Action, ObjectCategory, Point, WorldEntity
from interaction.behavior import InteractWithBehavior
from monitoring.status import RecordingStatusSink


class _FailingClient(FakePacketClient):
    def connect(self) -> None:
        raise OSError("refused")


def test_connect_failure_raises_domain_error() -> None:
    core = BotCoreImpl(_FailingClient())

    with pytest.raises(BotCoreError) as info:
        core.connect()

    assert info.value.code == "connect_failed"
    assert "refused" in str(info.value)
    assert not core.connected


class _StuckClient(FakePacketClient):
    def disconnect(self) -> None:
        raise OSError("socket busy")

    def tick(self) -> None:
        raise OSError("read timeout")


def test_tick_and_disconnect_failures() -> None:
    core = BotCoreImpl(_StuckClient())
    core.connect()

    with pytest.raises(BotCoreError) as info:
        core.tick()
    assert info.value.code == "tick_failed"
    assert core.connected

    with pytest.raises(BotCoreError) as info:
        core.disconnect()
    assert info.value.code == "disconnect_failed"
    assert not core.connected

    # Already down: a second disconnect is a no-op.
    core.disconnect()


def test_actions_require_connection() -> None:
    client = FakePacketClient()
    core = BotCoreImpl(client)

    result = core.execute_action(Action(type="stop", params={}))

    assert result.error == "not_connected"
    assert client.sent_packets == []


def test_observe_and_execute_action() -> None:
    client = FakePacketClient()
    core = BotCoreImpl(client)
    core.connect()
    core.connect()

    client.emit("time_update", {"tick": 99})
    client.emit("position_update", {"x": 1.0, "y": 2.0, "z": 3.0})
    core.tick()

    raw = core.observe()
    assert raw.tick == 99

    result = core.execute_action(Action(type="move_to", params={"x": 4, "y": 5, "z": 6}))
    assert result.success
    assert client.sent_types() == ["move_to"]

    core.disconnect()
    assert not client.connected


def test_surfaces_read_tracked_state() -> None:
    client = FakePacketClient()
    core = BotCoreImpl(client)
    core.connect()
    status = RecordingStatusSink()
    c = core.collaborators(status)

    client.emit("position_update", {"x": 3, "y": 4, "z": 0, "moving": True})
    client.emit("money", {"amount": 75})
    client.emit("spawn_entity", {"guid": 1, "entry": 10, "kind": "npc", "name": "Guard"})
    client.emit("spawn_entity", {"guid": 2, "entry": 20, "kind": "game_object"})
    client.emit("target_changed", {"guid": 1})
    client.emit("merchant_opened", {"items": [{"item_id": 5, "slot": 0, "price": 3}]})
    client.emit("quest_log", {"quests": [{"id": 8, "complete": True}]})

    assert c.actor.position == Point(3.0, 4.0, 0.0)
    assert c.actor.is_moving
    assert c.actor.funds == 75
    assert c.actor.current_selection == 1
    assert [e.guid for e in c.world.entities_of_type(ObjectCategory.NPC)] == [1]
    assert [e.guid for e in c.world.entities_of_type(ObjectCategory.GAME_OBJECT)] == [2]
    assert not c.loot.is_open()
    assert c.vendor.is_open()
    assert c.vendor.list_offered_items()[0].unit_price == 3
    assert c.quests.is_in_log(8)
    assert c.quests.is_complete(8)
    assert not c.quests.is_in_log(9)
    assert c.status is status


def test_surfaces_emit_packets() -> None:
    client = FakePacketClient()
    core = BotCoreImpl(client)
    core.connect()
    c = core.collaborators(RecordingStatusSink())
    client.emit("loot_opened", {})
    client.emit("merchant_opened", {"items": [{"item_id": 5, "slot": 2, "price": 3}]})
    entity = WorldEntity(
        guid=4, entry=1, name="x", category=ObjectCategory.NPC, position=Point(0, 0, 0)
    )

    c.navigator.move_to(Point(1, 2, 3))
    c.navigator.click_to_move(Point(1, 2, 3))
    c.navigator.stop()
    c.trigger.interact(entity)
    c.dialog.select_option(1)
    c.loot.loot_all()
    c.vendor.buy(2, 4)
    c.actor.clear_selection()

    assert client.sent_types() == [
        "move_to",
        "click_to_move",
        "stop_moving",
        "interact",
        "gossip_select",
        "loot_all",
        "buy_item",
        "clear_target",
    ]


def test_failed_surface_action_is_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    client = FakePacketClient()
    core = BotCoreImpl(client)
    core.connect()
    c = core.collaborators(RecordingStatusSink())

    c.loot.loot_all()

    assert client.sent_packets == []
    assert "no_loot_window" in caplog.text


def test_goal_runs_against_simulated_world() -> None:
    world = {
        "player": {"x": 0, "y": 0, "z": 0, "money": 100},
        "move_speed": 10,
        "entities": [
            {"guid": 1, "entry": 1313, "name": "Maria", "x": 25, "y": 0, "z": 0,
             "loot": True, "vendor": [{"item_id": 3371, "slot": 0, "price": 4}]},
        ],
    }
    client = SimulatedPacketClient(world)
    core = BotCoreImpl(client)
    core.connect()
    status = RecordingStatusSink()
    pauses = []
    behavior = InteractWithBehavior(
        {"MobId": 1313, "GossipOptions": "1", "Loot": True, "BuyItemId": 3371,
         "BuyItemCount": 5, "WaitTime": 0},
        core.collaborators(status),
        sleep=pauses.append,
    )

    ticks = 0
    while not behavior.is_done and ticks < 20:
        behavior.tick()
        core.tick()
        ticks += 1
    behavior.dispose()

    assert behavior.is_done
    assert behavior.counter == 1
    assert client.sent_types() == [
        "move_to",
        "move_to",
        "move_to",
        "interact",
        "gossip_select",
        "loot_all",
        "buy_item",
        "clear_target",
    ]
    assert client.gossip_selected == [0]
    assert client.purchases == [{"item_id": 3371, "slot": 0, "quantity": 5}]
    assert core.observe().money == 80
    assert core.observe().target_guid is None
    assert status.goal_text == ""
