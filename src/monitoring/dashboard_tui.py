# rich-based TUI dashboard
# src/monitoring/dashboard_tui.py
"""
Status dashboard for the interaction runtime.

A lightweight terminal UI (using `rich`) that subscribes to the monitoring
EventBus and renders:

- Goal:
    - Goal text
    - Current status text

- Progress:
    - Interactions completed / required
    - Blacklist size
    - Last interacted target

- Branches:
    - Last branch executed
    - Per-branch tick counts

This runs entirely offline. No web server, no external services.
"""

from __future__ import annotations

import threading
from typing import Any, Dict, Optional

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .bus import EventBus
from .events import EventType, MonitoringEvent


class StatusDashboard:
    """
    Live terminal dashboard bound to a monitoring.EventBus.

    It consumes MonitoringEvents and keeps a small in-memory state
    representation, which is rendered periodically via rich.
    """

    def __init__(self, bus: EventBus, console: Optional[Console] = None) -> None:
        self._bus = bus
        self._console = console or Console()
        self._stop = threading.Event()

        self._state: Dict[str, Any] = {
            "goal": "",
            "status": "",
            "counter": 0,
            "repetition_count": None,
            "blacklist_size": 0,
            "last_target": None,
            "last_branch": None,
            "branch_counts": {},
            "done": False,
            "problem": None,
        }

        self._bus.subscribe(self._on_event)

    @property
    def state(self) -> Dict[str, Any]:
        return dict(self._state)

    # --------------------------------------------------------
    # Event handler
    # --------------------------------------------------------

    def _on_event(self, event: MonitoringEvent) -> None:
        et = event.event_type
        payload = event.payload

        if et == EventType.GOAL_TEXT:
            self._state["goal"] = payload.get("text", "")

        elif et == EventType.STATUS_TEXT:
            self._state["status"] = payload.get("text", "")

        elif et == EventType.BRANCH_EXECUTED:
            branch = payload.get("branch")
            self._state["last_branch"] = branch
            counts = self._state["branch_counts"]
            counts[branch] = counts.get(branch, 0) + 1
            self._state["counter"] = payload.get("counter", self._state["counter"])
            self._state["repetition_count"] = payload.get(
                "repetition_count", self._state["repetition_count"]
            )
            self._state["blacklist_size"] = payload.get(
                "blacklist_size", self._state["blacklist_size"]
            )

        elif et == EventType.INTERACTION_COMPLETED:
            self._state["last_target"] = payload.get("target_name")

        elif et == EventType.BEHAVIOR_DONE:
            self._state["done"] = True

        elif et == EventType.ATTRIBUTE_PROBLEM:
            self._state["problem"] = event.message

    # --------------------------------------------------------
    # Rendering helpers
    # --------------------------------------------------------

    def _render_goal_panel(self) -> Panel:
        txt = Text()
        txt.append("Goal: ", style="bold")
        txt.append(f"{self._state['goal'] or '<none>'}\n")
        txt.append("Status: ", style="bold")
        txt.append(f"{self._state['status'] or '<none>'}\n")
        if self._state["problem"]:
            txt.append("Problem: ", style="bold red")
            txt.append(f"{self._state['problem']}\n")
        return Panel(txt, title="Goal", border_style="cyan")

    def _render_progress_panel(self) -> Panel:
        table = Table.grid(pad_edge=False)
        table.add_column(justify="left")

        target = self._state["repetition_count"]
        table.add_row(
            f"[bold]Interactions:[/bold] {self._state['counter']}"
            f" / {target if target is not None else '?'}"
        )
        table.add_row(f"[bold]Blacklisted:[/bold] {self._state['blacklist_size']}")
        table.add_row(f"[bold]Last target:[/bold] {self._state['last_target'] or '-'}")
        if self._state["done"]:
            table.add_row("[bold green]Done.[/bold green]")

        return Panel(table, title="Progress", border_style="green")

    def _render_branch_panel(self) -> Panel:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Branch", style="bold", width=22)
        table.add_column("Ticks", justify="right")

        counts = self._state["branch_counts"]
        if counts:
            for name, count in counts.items():
                table.add_row(str(name), str(count))
        else:
            table.add_row("<none>", "-")

        return Panel(
            table,
            title="Branches",
            subtitle=f"last: {self._state['last_branch'] or '-'}",
            border_style="magenta",
        )

    def _build_layout(self) -> Layout:
        layout = Layout()
        layout.split(
            Layout(name="top", size=5),
            Layout(name="middle", ratio=1),
        )
        layout["top"].update(self._render_goal_panel())
        layout["middle"].split_row(
            Layout(name="progress"),
            Layout(name="branches"),
        )
        layout["progress"].update(self._render_progress_panel())
        layout["branches"].update(self._render_branch_panel())
        return layout

    # --------------------------------------------------------
    # Main loop
    # --------------------------------------------------------

    def run(self, refresh_per_second: float = 4.0) -> None:
        """
        Render until stop() is called.

        This blocks the current thread; use start_in_background() next to
        a tick loop.
        """
        refresh_delay = 1.0 / max(refresh_per_second, 0.1)
        with Live(
            self._build_layout(),
            console=self._console,
            refresh_per_second=refresh_per_second,
        ) as live:
            while not self._stop.is_set():
                live.update(self._build_layout())
                self._stop.wait(refresh_delay)
            live.update(self._build_layout())

    def stop(self) -> None:
        self._stop.set()

    def start_in_background(self, refresh_per_second: float = 4.0) -> threading.Thread:
        t = threading.Thread(
            target=self.run,
            kwargs={"refresh_per_second": refresh_per_second},
            name="StatusDashboardThread",
            daemon=True,
        )
        t.start()
        return t
