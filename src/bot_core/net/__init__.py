# bot_core.net package
# src/bot_core/net/__init__.py
"""
Network layer for bot_core: the PacketClient protocol.
"""

from __future__ import annotations

from .client import PacketClient, PacketHandler

__all__ = [
    "PacketClient",
    "PacketHandler",
]
