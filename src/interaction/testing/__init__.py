"""In-memory collaborators for exercising the interaction core offline."""

from __future__ import annotations

from .fakes import FakeLoot, FakeVendor, FakeWorld, make_entity

__all__ = ["FakeLoot", "FakeVendor", "FakeWorld", "make_entity"]
