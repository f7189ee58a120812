# src/interaction/sequence.py
"""
The fixed sub-protocol run once a target is within interaction range.

Steps, always in this order:
    1. stop movement (if moving) + lag pause
    2. interact, blacklist the target, settle pause
    3. dialog options, one pause per option
    4. loot all (if enabled and the loot surface is open)
    5. purchase by item id (if configured and the vendor is open)
    6. else purchase by slot (same checks)
    7. clear the actor's selection if it is the target
    8. configured wait
    9. count the interaction

A step whose precondition is false is skipped; the pipeline never aborts
early and always counts exactly one interaction per run.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from contracts.collaborators import Collaborators
from contracts.types import VendorItem, WorldEntity
from goals.schema import GoalSpec, PurchaseSpec
from .blacklist import Blacklist
from .state import RepetitionCounter

log = logging.getLogger(__name__)

SleepFn = Callable[[float], None]


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InteractionTimings:
    """
    Fixed pauses inside the sequence, in milliseconds.

    The per-goal wait after an interaction lives on GoalSpec.wait_ms.
    """

    # Pause after stopping movement so the server sees us standing still.
    lag_ms: int = 250

    # Pause after the interaction so dialog/loot/vendor surfaces can open.
    settle_ms: int = 2000

    # Pause after each dialog option selection.
    dialog_pause_ms: int = 1000

    # Pause after a vendor purchase.
    purchase_pause_ms: int = 1500


@dataclass
class SequenceReport:
    """What one run of the sequence actually did."""

    target_guid: int
    target_name: str
    stopped: bool = False
    dialog_options: List[int] = field(default_factory=list)
    looted: bool = False
    purchased: Optional[VendorItem] = None
    cleared_selection: bool = False
    counter: int = 0


# ---------------------------------------------------------------------------
# Purchase helpers
# ---------------------------------------------------------------------------


def is_affordable(item: VendorItem, quantity: int, funds: int) -> bool:
    """Total price fits the funds and the stock covers the quantity."""
    return item.unit_price * quantity <= funds and item.covers(quantity)


def choose_purchase(
    offered: Sequence[VendorItem],
    purchase: PurchaseSpec,
    funds: int,
) -> Optional[VendorItem]:
    """
    Pick the vendor row to buy, or None when nothing qualifies.

    By item id: the first matching, affordable row.
    By slot: the row at that slot, if affordable.
    """
    if purchase.by_item_id:
        for item in offered:
            if item.item_id == purchase.item_id and is_affordable(item, purchase.quantity, funds):
                return item
        return None

    for item in offered:
        if item.slot == purchase.slot:
            return item if is_affordable(item, purchase.quantity, funds) else None
    return None


# ---------------------------------------------------------------------------
# Sequence
# ---------------------------------------------------------------------------


class InteractionSequence:
    """
    Runs the interaction pipeline against one target, synchronously.

    Pauses are blocking calls through ``sleep`` (seconds). Hosts that tick
    on a single thread use time.sleep; tests inject a recorder.
    """

    def __init__(
        self,
        goal: GoalSpec,
        collaborators: Collaborators,
        blacklist: Blacklist,
        counter: RepetitionCounter,
        *,
        timings: Optional[InteractionTimings] = None,
        sleep: Optional[SleepFn] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._goal = goal
        self._c = collaborators
        self._blacklist = blacklist
        self._counter = counter
        self._timings = timings if timings is not None else InteractionTimings()
        self._sleep: SleepFn = sleep if sleep is not None else time.sleep
        self._log = logger or log

    def _pause(self, ms: int) -> None:
        if ms > 0:
            self._sleep(ms / 1000.0)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, target: WorldEntity) -> SequenceReport:
        report = SequenceReport(target_guid=target.guid, target_name=target.display_name)

        self._stop_if_moving(report)
        self._interact(target)
        self._select_dialog_options(report)
        self._loot(report)
        self._purchase(report)
        self._release_selection(target, report)
        self._pause(self._goal.wait_ms)

        report.counter = self._counter.increment()
        self._log.info(
            "Interaction %d/%d complete with %s (guid=%s)",
            report.counter,
            self._goal.repetition_count,
            report.target_name,
            report.target_guid,
        )
        return report

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _stop_if_moving(self, report: SequenceReport) -> None:
        if not self._c.actor.is_moving:
            return
        self._c.navigator.stop()
        self._pause(self._timings.lag_ms)
        report.stopped = True

    def _interact(self, target: WorldEntity) -> None:
        self._c.status.set_status_text(f"Interacting with - {target.display_name}")
        self._c.trigger.interact(target)
        self._blacklist.add(target.guid)
        self._pause(self._timings.settle_ms)

    def _select_dialog_options(self, report: SequenceReport) -> None:
        for option in self._goal.dialog_options:
            self._c.dialog.select_option(option)
            report.dialog_options.append(option)
            self._pause(self._timings.dialog_pause_ms)

    def _loot(self, report: SequenceReport) -> None:
        if not self._goal.loot or not self._c.loot.is_open():
            return
        self._c.loot.loot_all()
        report.looted = True

    def _purchase(self, report: SequenceReport) -> None:
        purchase = self._goal.purchase
        if purchase is None or not self._c.vendor.is_open():
            return

        item = choose_purchase(
            self._c.vendor.list_offered_items(),
            purchase,
            self._c.actor.funds,
        )
        if item is None:
            self._log.info(
                "Skipping purchase (%s): not offered, unaffordable or out of stock",
                f"item {purchase.item_id}" if purchase.by_item_id else f"slot {purchase.slot}",
            )
            return

        self._c.vendor.buy(item.slot, purchase.quantity)
        report.purchased = item
        self._pause(self._timings.purchase_pause_ms)

    def _release_selection(self, target: WorldEntity, report: SequenceReport) -> None:
        if self._c.actor.current_selection != target.guid:
            return
        self._c.actor.clear_selection()
        report.cleared_selection = True
