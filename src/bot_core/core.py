# src/bot_core/core.py
"""
BotCoreImpl: one PacketClient, its WorldTracker and ActionExecutor, and
the collaborator surfaces the interaction layer runs against.

Lifecycle problems (connect, disconnect, pumping packets) raise
BotCoreError. Action problems come back as a failed ActionResult.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from contracts.collaborators import Collaborators, StatusSink
from contracts.types import Action, ActionResult

from .actions import ActionExecutor, ActionExecutorConfig
from .net import PacketClient
from .snapshot import RawWorldSnapshot
from .surfaces import build_collaborators
from .world_tracker import WorldTracker


log = logging.getLogger(__name__)


@dataclass
class BotCoreError(RuntimeError):
    """Lifecycle failure of the packet client."""

    code: str
    details: dict[str, Any]

    def __str__(self) -> str:
        return f"BotCoreError(code={self.code!r}, details={self.details!r})"


def _failed(code: str, exc: Exception) -> BotCoreError:
    return BotCoreError(code=code, details={"exception": repr(exc)})


class BotCoreImpl:
    def __init__(
        self,
        client: PacketClient,
        *,
        action_config: Optional[ActionExecutorConfig] = None,
    ) -> None:
        self._client = client
        self._tracker = WorldTracker(client)
        self._executor = ActionExecutor(client, config=action_config)
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    def connect(self) -> None:
        if self._connected:
            return
        try:
            self._client.connect()
        except Exception as exc:
            raise _failed("connect_failed", exc) from exc
        self._connected = True
        log.info("packet client connected")

    def disconnect(self) -> None:
        if not self._connected:
            return
        # Marked down even if the client errors while closing.
        self._connected = False
        try:
            self._client.disconnect()
        except Exception as exc:
            raise _failed("disconnect_failed", exc) from exc
        log.info("packet client disconnected")

    def tick(self) -> None:
        """Let the client deliver pending packets to the tracker."""
        if not self._connected:
            return
        try:
            self._client.tick()
        except Exception as exc:
            raise _failed("tick_failed", exc) from exc

    def observe(self) -> RawWorldSnapshot:
        return self._tracker.build_snapshot()

    def execute_action(self, action: Action) -> ActionResult:
        atype = getattr(action, "type", None)
        if not self._connected:
            return ActionResult(
                success=False, error="not_connected", details={"action_type": atype}
            )

        try:
            result = self._executor.execute(action, self._tracker.build_snapshot())
        except Exception as exc:
            log.exception("action %s raised", atype)
            return ActionResult(
                success=False,
                error="botcore_execute_exception",
                details={"exception": repr(exc), "action_type": atype},
            )

        if not isinstance(result, ActionResult):
            return ActionResult(
                success=False,
                error="invalid_executor_result",
                details={"result_repr": repr(result)},
            )
        return result

    def collaborators(self, status: StatusSink) -> Collaborators:
        return build_collaborators(self, status)


__all__ = ["BotCoreError", "BotCoreImpl"]
