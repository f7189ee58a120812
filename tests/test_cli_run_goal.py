# tests/test_cli_run_goal.py
"""
End-to-end tests for cli.run_goal against the simulated world.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from cli.run_goal import main
from goals.loader import CONFIG_GOALS_DIR


def _summary(capsys: pytest.CaptureFixture) -> Dict[str, Any]:
    lines = capsys.readouterr().out.splitlines()
    start = lines.index("{")
    return json.loads("\n".join(lines[start:]))


def test_collect_crates_profile(capsys: pytest.CaptureFixture, tmp_path: Path) -> None:
    events = tmp_path / "events.jsonl"

    code = main(
        [
            str(CONFIG_GOALS_DIR / "collect_crates.yaml"),
            "--fast",
            "--max-ticks",
            "50",
            "--events-log",
            str(events),
        ]
    )

    summary = _summary(capsys)
    assert code == 0
    assert summary["goal"] == "collect_crates"
    assert summary["done"]
    assert summary["counter"] == 3
    assert summary["blacklist"] == [2001, 2002, 2003]
    assert summary["branches"]["run_interaction"] == 3
    assert summary["branches"]["repetition_exhausted"] == 1

    records = [json.loads(line) for line in events.read_text(encoding="utf-8").splitlines()]
    kinds = {r["event_type"] for r in records}
    assert {"GOAL_TEXT", "STATUS_TEXT", "BRANCH_EXECUTED", "BEHAVIOR_DONE"} <= kinds


def test_quest_gated_profile_stops_on_completion(capsys: pytest.CaptureFixture) -> None:
    code = main([str(CONFIG_GOALS_DIR / "report_to_sentry.yaml"), "--fast", "--max-ticks", "20"])

    summary = _summary(capsys)
    assert code == 0
    assert summary["counter"] == 1
    assert summary["done"]
    assert summary["branches"] == {"run_interaction": 1}


def test_invalid_profile_reports_attribute_problem(
    capsys: pytest.CaptureFixture, tmp_path: Path
) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("NumOfTimes: 3\nworld:\n  entities: []\n", encoding="utf-8")

    code = main([str(path), "--fast"])

    summary = _summary(capsys)
    assert code == 1
    assert summary["ticks"] == 0
    assert "MobId" in summary["attribute_problem"]


def test_max_ticks_without_targets(capsys: pytest.CaptureFixture, tmp_path: Path) -> None:
    path = tmp_path / "lonely.yaml"
    path.write_text("MobId: 1\n", encoding="utf-8")

    code = main([str(path), "--fast", "--max-ticks", "4"])

    summary = _summary(capsys)
    assert code == 1
    assert not summary["done"]
    assert summary["branches"] == {"idle": 4}
