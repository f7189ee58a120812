# src/bot_core/actions.py
"""
Action execution for bot_core.

This module translates high-level Actions into packet-level messages via
a PacketClient.

Design constraints:
- High-level, atomic-ish actions:
    - move_to / click_to_move / stop
    - interact / clear_target
    - select_gossip
    - loot_all
    - buy_item
- One execute(...) call per logical operation.
- Explicit, structured failures:
    - invalid params
    - unsupported action
    - IO error from the transport
    - guards: no_loot_window, no_vendor_window, unknown_slot
- No mutation of world state; this layer only sends packets.
- No goal logic: which target, which option and what to buy are decided
  by the interaction layer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping

from contracts.types import Action, ActionResult
from .net import PacketClient
from .snapshot import RawWorldSnapshot


log = logging.getLogger(__name__)

_Handler = Callable[[Mapping[str, Any], RawWorldSnapshot], ActionResult]


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@dataclass
class ActionExecutorConfig:
    """Configuration knobs for ActionExecutor."""

    # Refuse loot_all / buy_item when the snapshot shows no open window.
    require_open_windows: bool = True

    # Highest gossip index the client can address (0-based).
    max_gossip_index: int = 9


def _invalid(reason: str, params: Mapping[str, Any]) -> ActionResult:
    return ActionResult(
        success=False,
        error="invalid_params",
        details={"reason": reason, "params": dict(params)},
    )


class ActionExecutor:
    """
    Translate high-level Actions into PacketClient messages.

    Public contract:
      execute(action, snapshot) -> ActionResult
    """

    def __init__(
        self,
        client: PacketClient,
        *,
        config: ActionExecutorConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self._cfg = config if config is not None else ActionExecutorConfig()
        self._log = logger or log

        self._handlers: Dict[str, _Handler] = {
            "move_to": self._execute_move_to,
            "click_to_move": self._execute_click_to_move,
            "stop": self._execute_stop,
            "interact": self._execute_interact,
            "clear_target": self._execute_clear_target,
            "select_gossip": self._execute_select_gossip,
            "loot_all": self._execute_loot_all,
            "buy_item": self._execute_buy_item,
        }

    @property
    def supported_actions(self) -> list[str]:
        return sorted(self._handlers)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def execute(self, action: Action, snapshot: RawWorldSnapshot) -> ActionResult:
        """
        Execute a single high-level Action against the given snapshot.

        The snapshot is treated as read-only and must not be mutated here.
        """
        atype = getattr(action, "type", None)
        params = getattr(action, "params", {}) or {}

        self._log.debug("ActionExecutor.execute start type=%s params=%r", atype, params)

        if not isinstance(params, Mapping):
            self._log.warning(
                "ActionExecutor.execute invalid params (not mapping): %r", params
            )
            return ActionResult(
                success=False,
                error="invalid_params",
                details={"reason": "params_not_mapping", "action_type": atype},
            )

        handler = self._handlers.get(atype) if isinstance(atype, str) else None
        if handler is None:
            return ActionResult(
                success=False,
                error="unsupported_action",
                details={"action_type": atype},
            )

        try:
            result = handler(params, snapshot)
        except Exception as exc:
            # Catch-all for transport / unexpected errors.
            self._log.exception(
                "ActionExecutor.execute raised unexpectedly for type=%s", atype
            )
            return ActionResult(
                success=False,
                error="io_error",
                details={"action_type": atype, "exception": repr(exc)},
            )

        self._log.debug(
            "ActionExecutor.execute end type=%s success=%s error=%s",
            atype,
            result.success,
            result.error,
        )
        return result

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------

    def _send_point(self, packet_type: str, params: Mapping[str, Any]) -> ActionResult:
        try:
            x = float(params["x"])
            y = float(params["y"])
            z = float(params["z"])
        except (KeyError, TypeError, ValueError):
            return _invalid("missing_or_non_numeric_xyz", params)

        self._client.send_packet(packet_type, {"x": x, "y": y, "z": z})
        return ActionResult(success=True, error=None, details={"x": x, "y": y, "z": z})

    def _execute_move_to(
        self, params: Mapping[str, Any], snapshot: RawWorldSnapshot
    ) -> ActionResult:
        """
        Path-planned movement. Pathfinding itself is the client's job; we
        only hand over the destination.

        Expected params:
            - "x", "y", "z": numeric target position
        """
        return self._send_point("move_to", params)

    def _execute_click_to_move(
        self, params: Mapping[str, Any], snapshot: RawWorldSnapshot
    ) -> ActionResult:
        return self._send_point("click_to_move", params)

    def _execute_stop(
        self, params: Mapping[str, Any], snapshot: RawWorldSnapshot
    ) -> ActionResult:
        self._client.send_packet("stop_moving", {})
        return ActionResult(
            success=True, error=None, details={"was_moving": snapshot.player_moving}
        )

    # ------------------------------------------------------------------
    # Targeting
    # ------------------------------------------------------------------

    def _execute_interact(
        self, params: Mapping[str, Any], snapshot: RawWorldSnapshot
    ) -> ActionResult:
        """
        Expected params:
            - "guid": int, the entity to use / talk to / open
        """
        try:
            guid = int(params["guid"])
        except (KeyError, TypeError, ValueError):
            return _invalid("missing_or_non_numeric_guid", params)

        known = any(e.guid == guid for e in snapshot.entities)
        if not known:
            # Still send: the tracker may simply lag behind the client.
            self._log.debug("interact with untracked guid=%s", guid)

        self._client.send_packet("interact", {"guid": guid})
        return ActionResult(success=True, error=None, details={"guid": guid, "tracked": known})

    def _execute_clear_target(
        self, params: Mapping[str, Any], snapshot: RawWorldSnapshot
    ) -> ActionResult:
        self._client.send_packet("clear_target", {})
        return ActionResult(
            success=True, error=None, details={"previous": snapshot.target_guid}
        )

    # ------------------------------------------------------------------
    # Dialog / loot / vendor
    # ------------------------------------------------------------------

    def _execute_select_gossip(
        self, params: Mapping[str, Any], snapshot: RawWorldSnapshot
    ) -> ActionResult:
        """
        Expected params:
            - "index": 0-based gossip option
        """
        try:
            index = int(params["index"])
        except (KeyError, TypeError, ValueError):
            return _invalid("missing_or_non_numeric_index", params)
        if index < 0 or index > self._cfg.max_gossip_index:
            return _invalid("index_out_of_range", params)

        self._client.send_packet("gossip_select", {"index": index})
        return ActionResult(success=True, error=None, details={"index": index})

    def _execute_loot_all(
        self, params: Mapping[str, Any], snapshot: RawWorldSnapshot
    ) -> ActionResult:
        if self._cfg.require_open_windows and not snapshot.loot_open:
            return ActionResult(success=False, error="no_loot_window", details={})

        self._client.send_packet("loot_all", {})
        return ActionResult(success=True, error=None, details={})

    def _execute_buy_item(
        self, params: Mapping[str, Any], snapshot: RawWorldSnapshot
    ) -> ActionResult:
        """
        Expected params:
            - "slot": 0-based merchant index
            - "quantity": positive int (default 1)

        Affordability is decided upstream; this layer only checks the
        window is open and the slot exists.
        """
        try:
            slot = int(params["slot"])
            quantity = int(params.get("quantity", 1))
        except (KeyError, TypeError, ValueError):
            return _invalid("missing_or_non_numeric_slot", params)
        if quantity < 1:
            return _invalid("non_positive_quantity", params)

        items = snapshot.merchant_items
        if self._cfg.require_open_windows:
            if items is None:
                return ActionResult(success=False, error="no_vendor_window", details={})
            if not any(item.slot == slot for item in items):
                return ActionResult(
                    success=False, error="unknown_slot", details={"slot": slot}
                )

        self._client.send_packet("buy_item", {"slot": slot, "quantity": quantity})
        return ActionResult(
            success=True, error=None, details={"slot": slot, "quantity": quantity}
        )


__all__ = ["ActionExecutor", "ActionExecutorConfig"]
