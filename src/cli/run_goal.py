# src/cli/run_goal.py
"""
Run one interaction goal profile against a simulated world.

    python -m cli.run_goal config/goals/talk_to_innkeeper.yaml --fast

The goal YAML may carry a `world:` block describing the simulated player,
entities and quest log (see bot_core.testing.SimulatedPacketClient). The
run ends when the goal is done or --max-ticks is reached; a JSON summary
is printed to stdout.
"""

from __future__ import annotations

import argparse
import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from bot_core import BotCoreImpl
from bot_core.testing import SimulatedPacketClient
from interaction.behavior import InteractWithBehavior
from monitoring.bus import EventBus
from monitoring.dashboard_tui import StatusDashboard
from monitoring.logger import JsonFileLogger
from monitoring.status import BusStatusSink
from runtime.host import FunctionBranch, HostRoot
from runtime.logging_config import configure_logging
from runtime.scheduler import TickScheduler
from runtime.settings import load_settings

log = logging.getLogger(__name__)


def _no_sleep(seconds: float) -> None:
    return None


def _read_goal_document(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected mapping at top of {path}, got {type(data)}")
    return data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run an interaction goal against a simulated world."
    )
    parser.add_argument("goal", type=Path, help="Goal profile YAML")
    parser.add_argument("--max-ticks", type=int, default=None, help="Stop after N ticks")
    parser.add_argument("--settings", type=Path, default=None, help="runtime.yaml override")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    parser.add_argument("--events-log", type=Path, default=None, help="Write events as JSONL")
    parser.add_argument("--dashboard", action="store_true", help="Show the rich dashboard")
    parser.add_argument(
        "--fast", action="store_true", help="Skip all pauses (simulation only)"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = load_settings(args.settings)
    configure_logging(args.log_level or settings.log_level)

    document = _read_goal_document(args.goal)
    world = document.get("world") or {}
    goal_raw = {"name": args.goal.stem, **document}

    bus = EventBus()
    events_path = args.events_log or (
        Path(settings.events_log_path) if settings.events_log_path else None
    )
    event_logger = JsonFileLogger(events_path, bus) if events_path else None

    dashboard = StatusDashboard(bus) if args.dashboard else None
    if dashboard is not None:
        dashboard.start_in_background()

    sleep = _no_sleep if args.fast else time.sleep

    core = BotCoreImpl(SimulatedPacketClient(world))
    core.connect()

    def between_ticks(seconds: float) -> None:
        core.tick()
        sleep(seconds)

    # No combat in the simulator; the branch only holds the host's slot.
    root = HostRoot([FunctionBranch("combat", can_run=lambda: False, run=lambda: None)])
    behavior = InteractWithBehavior(
        goal_raw,
        core.collaborators(BusStatusSink(bus)),
        host=root,
        timings=settings.timings(),
        sleep=sleep,
        staging_tolerance=settings.staging_tolerance,
    )
    scheduler = TickScheduler(
        behavior,
        bus=bus,
        host=root,
        tick_interval_s=settings.tick_interval_ms / 1000.0,
        sleep=between_ticks,
    )

    try:
        summary = scheduler.run(max_ticks=args.max_ticks)
    finally:
        core.disconnect()
        if dashboard is not None:
            dashboard.stop()
        if event_logger is not None:
            event_logger.close()

    print(json.dumps(summary.as_dict(), indent=2, sort_keys=True))
    return 0 if summary.done and summary.attribute_problem is None else 1


if __name__ == "__main__":
    raise SystemExit(main())
