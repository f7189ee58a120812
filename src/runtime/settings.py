# path: src/runtime/settings.py

"""
Runtime settings loaded from config/runtime.yaml.

The file is optional: a missing file yields the defaults below. Present
but invalid values fail fast with ValueError, before any tick runs.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from interaction.sequence import InteractionTimings

PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONFIG_ROOT = PROJECT_ROOT / "config"
DEFAULT_SETTINGS_PATH = CONFIG_ROOT / "runtime.yaml"


@dataclass(frozen=True)
class RuntimeSettings:
    """Host-level knobs; per-goal behavior lives in the goal profile."""

    tick_interval_ms: int = 100
    lag_ms: int = 250
    settle_ms: int = 2000
    dialog_pause_ms: int = 1000
    purchase_pause_ms: int = 1500
    staging_tolerance: float = 2.0
    log_level: str = "INFO"
    events_log_path: Optional[str] = None

    def timings(self) -> InteractionTimings:
        return InteractionTimings(
            lag_ms=self.lag_ms,
            settle_ms=self.settle_ms,
            dialog_pause_ms=self.dialog_pause_ms,
            purchase_pause_ms=self.purchase_pause_ms,
        )


_INT_FIELDS = ("tick_interval_ms", "lag_ms", "settle_ms", "dialog_pause_ms", "purchase_pause_ms")


def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected mapping at top of {path}, got {type(data)}")
    return data


def settings_from_mapping(raw: Dict[str, Any]) -> RuntimeSettings:
    known = {f.name for f in fields(RuntimeSettings)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown runtime settings: {', '.join(unknown)}")

    for key in _INT_FIELDS:
        if key in raw:
            value = raw[key]
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"{key} must be a non-negative integer, got {value!r}")

    if "staging_tolerance" in raw:
        value = raw["staging_tolerance"]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ValueError(f"staging_tolerance must be a positive number, got {value!r}")
        raw = {**raw, "staging_tolerance": float(value)}

    return RuntimeSettings(**raw)


def load_settings(path: Optional[Path] = None) -> RuntimeSettings:
    """Load runtime settings; defaults when the file does not exist."""
    path = path or DEFAULT_SETTINGS_PATH
    if not path.exists():
        return RuntimeSettings()
    return settings_from_mapping(_load_yaml(path))
