# src/goals/loader.py

"""
YAML goal-profile loader.

A goal profile is a flat mapping of attributes, e.g.

    name: feed_the_chickens
    MobId: 620
    NumOfTimes: 5
    GossipOptions: "1,2"
    Nav: Mesh

Attribute names (and their aliases) follow the long-standing quest-profile
vocabulary so existing profiles load unchanged. Every problem found in a
profile is collected and reported together as a single GoalConfigError.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, TypeVar

import yaml

from contracts.types import ObjectCategory, Point
from .schema import (
    EntityStateFilter,
    GoalSpec,
    NavigationMode,
    PurchaseSpec,
    QuestCompleteRequirement,
    QuestGate,
    QuestInLogRequirement,
)

log = logging.getLogger(__name__)

# Default directory for goal YAML files:
# <repo>/config/goals/
CONFIG_GOALS_DIR = Path(__file__).resolve().parents[2] / "config" / "goals"

T = TypeVar("T")

_META_KEYS = {"name", "description", "world"}

_OBJECT_TYPES = {
    "npc": ObjectCategory.NPC,
    "gameobject": ObjectCategory.GAME_OBJECT,
}
_MOB_STATES = {
    "alive": EntityStateFilter.ALIVE,
    "belowhp": EntityStateFilter.BELOW_HP,
    "dead": EntityStateFilter.DEAD,
    "dontcare": EntityStateFilter.DONT_CARE,
}
_NAV_TYPES = {
    "mesh": NavigationMode.MESH,
    "ctm": NavigationMode.CLICK,
    "none": NavigationMode.NONE,
}
_IN_LOG = {
    "inlog": QuestInLogRequirement.IN_LOG,
    "notinlog": QuestInLogRequirement.NOT_IN_LOG,
}
_COMPLETE = {
    "any": QuestCompleteRequirement.ANY,
    "complete": QuestCompleteRequirement.COMPLETE,
    "notcomplete": QuestCompleteRequirement.NOT_COMPLETE,
}

_ID_KEY = re.compile(r"^(MobId|NpcId)(\d*)$")


class GoalConfigError(ValueError):
    """
    Raised when a goal profile has malformed or missing attributes.

    ``problems`` holds one human-readable line per offending attribute.
    """

    def __init__(self, problems: List[str], source: Optional[str] = None) -> None:
        self.problems = list(problems)
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(f"Invalid goal profile{where}: " + "; ".join(self.problems))


class _Attributes:
    """Typed, constrained reads over a raw attribute mapping."""

    def __init__(self, raw: Mapping[str, Any]) -> None:
        self._raw = raw
        self.consumed: set[str] = set()
        self.problems: List[str] = []

    def _lookup(self, key: str, aliases: Iterable[str]) -> Tuple[Optional[str], Any]:
        for name in (key, *aliases):
            if name in self._raw:
                self.consumed.add(name)
                return name, self._raw[name]
        return None, None

    def get(
        self,
        key: str,
        convert: Callable[[Any], T],
        default: T,
        *,
        aliases: Iterable[str] = (),
        check: Optional[Callable[[T], bool]] = None,
        constraint: str = "",
    ) -> T:
        name, value = self._lookup(key, aliases)
        if name is None or value is None:
            return default
        try:
            result = convert(value)
        except (TypeError, ValueError) as exc:
            self.problems.append(f"{name}: {exc}")
            return default
        if check is not None and not check(result):
            self.problems.append(f"{name}: {value!r} is out of range ({constraint})")
            return default
        return result

    def has(self, key: str) -> bool:
        return key in self._raw

    def is_null(self, key: str) -> bool:
        return key in self._raw and self._raw[key] is None


# ---------------------------------------------------------------------------
# Converters
# ---------------------------------------------------------------------------


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"expected an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"expected an integer, got {value!r}")
    return int(value)


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"expected a number, got {value!r}")
    return float(value)


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValueError(f"expected true/false, got {value!r}")


def _enum(table: Mapping[str, T]) -> Callable[[Any], T]:
    def convert(value: Any) -> T:
        key = str(value).replace("_", "").replace(" ", "").lower()
        if key not in table:
            raise ValueError(f"expected one of {sorted(table)}, got {value!r}")
        return table[key]

    return convert


def _int_list(value: Any) -> List[int]:
    if isinstance(value, str):
        parts = [p.strip() for p in value.split(",") if p.strip()]
    elif isinstance(value, (list, tuple)):
        parts = list(value)
    else:
        parts = [value]
    return [_to_int(p) for p in parts]


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _collect_entry_ids(raw: Mapping[str, Any], attrs: _Attributes) -> List[int]:
    """MobId, MobId1..N and the NpcId aliases; values may also be lists."""
    ids: List[int] = []
    for key in sorted(raw, key=str):
        match = _ID_KEY.match(str(key))
        if not match:
            continue
        attrs.consumed.add(key)
        try:
            values = _int_list(raw[key])
        except (TypeError, ValueError) as exc:
            attrs.problems.append(f"{key}: {exc}")
            continue
        for value in values:
            if value <= 0:
                attrs.problems.append(f"{key}: {value!r} is not a valid mob id")
            elif value not in ids:
                ids.append(value)
    if not ids:
        attrs.problems.append("MobId: at least one MobId/NpcId attribute is required")
    return ids


def _parse_staging_point(attrs: _Attributes) -> Optional[Point]:
    present = [k for k in ("X", "Y", "Z") if attrs.has(k)]
    if not present:
        return None
    if len(present) != 3:
        attrs.problems.append("X/Y/Z: staging point needs all three coordinates")
        return None
    nulls = [k for k in present if attrs.is_null(k)]
    if nulls:
        attrs.problems.append(f"X/Y/Z: {'/'.join(nulls)} must be a number, got null")
        return None
    coords = [attrs.get(k, _to_float, 0.0) for k in ("X", "Y", "Z")]
    return Point(*coords)


def _parse_purchase(attrs: _Attributes) -> Optional[PurchaseSpec]:
    if attrs.has("BuySlot"):
        log.warning(
            "BuySlot is deprecated: vendor slot numbers shift with seasonal or "
            "limited-quantity wares. Use BuyItemId instead."
        )

    quantity = attrs.get(
        "BuyItemCount", _to_int, 1, check=lambda v: 1 <= v <= 1000, constraint="1..1000"
    )
    item_id = attrs.get(
        "BuyItemId", _to_int, 0, check=lambda v: v >= 0, constraint=">= 0"
    )
    slot = attrs.get(
        "BuySlot", _to_int, -1, check=lambda v: -1 <= v <= 100, constraint="-1..100"
    )

    if item_id != 0:
        return PurchaseSpec(item_id=item_id, quantity=quantity)
    if slot != -1:
        return PurchaseSpec(slot=slot, quantity=quantity)
    return None


def _parse_dialog_options(attrs: _Attributes) -> Tuple[int, ...]:
    options = attrs.get("GossipOptions", _int_list, [], aliases=("GossipOption",))
    bad = [o for o in options if not -1 <= o <= 10]
    if bad:
        attrs.problems.append(f"GossipOptions: {bad!r} out of range (-1..10)")
        return ()
    # Profiles are 1-based; dialog surfaces are 0-based. Values below 1
    # stay negative and are refused by the dialog surface.
    return tuple(o - 1 for o in options)


def load_goal_from_mapping(
    raw: Mapping[str, Any],
    *,
    name: Optional[str] = None,
    source: Optional[str] = None,
) -> GoalSpec:
    """
    Parse and validate a raw attribute mapping into a GoalSpec.

    Raises:
        GoalConfigError listing every problem found.
    """
    if not isinstance(raw, Mapping):
        raise GoalConfigError([f"expected a mapping, got {type(raw).__name__}"], source)

    attrs = _Attributes(raw)
    attrs.consumed.update(k for k in _META_KEYS if k in raw)

    entry_ids = _collect_entry_ids(raw, attrs)
    category = attrs.get("ObjectType", _enum(_OBJECT_TYPES), ObjectCategory.NPC, aliases=("MobType",))
    state_filter = attrs.get(
        "MobState", _enum(_MOB_STATES), EntityStateFilter.DONT_CARE, aliases=("NpcState",)
    )
    hp_threshold = attrs.get(
        "MobHpPercentLeft",
        _to_float,
        100.0,
        aliases=("HpLeftAmount",),
        check=lambda v: 0.0 <= v <= 100.0,
        constraint="0..100",
    )
    not_moving = attrs.get("NotMoving", _to_bool, False)
    navigation = attrs.get("Nav", _enum(_NAV_TYPES), NavigationMode.MESH, aliases=("Navigation",))
    repetitions = attrs.get(
        "NumOfTimes", _to_int, 1, check=lambda v: 1 <= v <= 1000, constraint="1..1000"
    )
    radius = attrs.get(
        "CollectionDistance", _to_float, 100.0, check=lambda v: 1.0 <= v <= 10000.0, constraint="1..10000"
    )
    interaction_range = attrs.get(
        "Range", _to_float, 4.0, check=lambda v: 1.0 <= v <= 10000.0, constraint="1..10000"
    )
    wait_ms = attrs.get(
        "WaitTime", _to_int, 3000, check=lambda v: 0 <= v <= 600000, constraint="0..600000 ms"
    )
    dialog_options = _parse_dialog_options(attrs)
    loot = attrs.get("Loot", _to_bool, False)
    purchase = _parse_purchase(attrs)
    staging_point = _parse_staging_point(attrs)
    wait_for_targets = attrs.get("WaitForNpcs", _to_bool, True)
    ignore_combat = attrs.get("IgnoreCombat", _to_bool, False)
    quest_gate = QuestGate(
        quest_id=attrs.get("QuestId", _to_int, 0, check=lambda v: v >= 0, constraint=">= 0"),
        in_log=attrs.get(
            "QuestInLogRequirement", _enum(_IN_LOG), QuestInLogRequirement.IN_LOG
        ),
        complete=attrs.get(
            "QuestCompleteRequirement", _enum(_COMPLETE), QuestCompleteRequirement.NOT_COMPLETE
        ),
    )

    unknown = sorted(str(k) for k in raw if k not in attrs.consumed)
    if unknown:
        log.warning("Ignoring unknown goal attributes%s: %s",
                    f" in {source}" if source else "", ", ".join(unknown))

    if attrs.problems:
        raise GoalConfigError(attrs.problems, source)

    return GoalSpec(
        entry_ids=frozenset(entry_ids),
        name=str(raw.get("name") or name or "interact_with"),
        category=category,
        state_filter=state_filter,
        hp_threshold_percent=hp_threshold,
        not_moving=not_moving,
        collection_radius=radius,
        interaction_range=interaction_range,
        navigation=navigation,
        repetition_count=repetitions,
        wait_ms=wait_ms,
        dialog_options=dialog_options,
        loot=loot,
        purchase=purchase,
        staging_point=staging_point,
        wait_for_targets=wait_for_targets,
        ignore_combat=ignore_combat,
        quest_gate=quest_gate,
    )


def _load_yaml(path: Path) -> Dict[str, Any]:
    """
    Load a YAML file into a dict.

    Returns an empty dict if the file is empty, rather than None.
    """
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data or {}


def load_goal_from_file(path: Path) -> GoalSpec:
    """Parse a single goal profile YAML file into a GoalSpec."""
    raw = _load_yaml(path)
    return load_goal_from_mapping(raw, name=path.stem, source=str(path))


def load_all_goals(goals_dir: Optional[Path] = None) -> Dict[str, GoalSpec]:
    """
    Load all goal profiles from the goals config directory.

    Returns:
        Dict[str, GoalSpec]: mapping from goal name -> GoalSpec

    Args:
        goals_dir: override the goals directory (used mainly for tests).
                   Defaults to CONFIG_GOALS_DIR.
    """
    base_dir = goals_dir or CONFIG_GOALS_DIR

    if not base_dir.exists():
        raise FileNotFoundError(f"Goals directory does not exist: {base_dir}")

    goals: Dict[str, GoalSpec] = {}
    for path in sorted(base_dir.glob("*.yaml")):
        goal = load_goal_from_file(path)
        if goal.name in goals:
            raise ValueError(
                f"Duplicate goal name '{goal.name}' in '{path}'. "
                f"Already defined in another file."
            )
        goals[goal.name] = goal

    return goals
