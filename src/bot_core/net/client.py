# packet client protocol
# src/bot_core/net/client.py
"""
Client abstraction for bot_core.

Defines the PacketClient protocol used by bot_core. Concrete transports
(game-client bridge, simulator, test double) implement it; bot_core never
touches wire formats directly.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Protocol

# Type alias for packet handlers.
PacketHandler = Callable[[Mapping[str, Any]], None]


class PacketClient(Protocol):
    """Abstract interface for a packet-level game client."""

    def connect(self) -> None:
        """Establish connection and complete handshake."""
        ...

    def disconnect(self) -> None:
        """Cleanly disconnect."""
        ...

    def tick(self) -> None:
        """
        Pump incoming events, calling registered handlers. Should be called
        regularly from the main loop.
        """
        ...

    def send_packet(self, packet_type: str, data: Mapping[str, Any]) -> None:
        """
        Send a high-level packet representation.

        The mapping of packet_type → wire format is implementation
        specific. This function is the only way bot_core emits data.
        """
        ...

    def on_packet(self, packet_type: str, handler: PacketHandler) -> None:
        """
        Register a handler for packets of a given type.

        Handlers receive a decoded mapping representation of the payload.
        """
        ...
