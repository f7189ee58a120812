# bot_core package
# src/bot_core/__init__.py
"""
bot_core package: packet-level body for the interaction agent.

Exports:
    - BotCoreImpl: connect / tick / observe / execute_action over a PacketClient
    - BotCoreError: domain-level error type for non-action failures
    - build_collaborators: contract adapters over a core
"""

from __future__ import annotations

from .core import BotCoreImpl, BotCoreError
from .surfaces import build_collaborators

__all__ = [
    "BotCoreImpl",
    "BotCoreError",
    "build_collaborators",
]
