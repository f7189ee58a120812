"""Packet-level test doubles and a scripted world simulator."""

from __future__ import annotations

from .fakes import FakePacketClient, SentPacket, SimulatedPacketClient

__all__ = ["FakePacketClient", "SentPacket", "SimulatedPacketClient"]
