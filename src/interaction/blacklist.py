# src/interaction/blacklist.py
"""
Per-execution exclusion set of already-interacted entities.

Append-only: an entry is never removed while the owning execution lives,
even if the entity despawns and a new one reuses the same guid.
"""

from __future__ import annotations

from typing import Iterator, List, Set


class Blacklist:
    """Ordered, append-only set of entity guids."""

    def __init__(self) -> None:
        self._guids: Set[int] = set()
        self._order: List[int] = []

    def add(self, guid: int) -> None:
        if guid in self._guids:
            return
        self._guids.add(guid)
        self._order.append(guid)

    def __contains__(self, guid: object) -> bool:
        return guid in self._guids

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[int]:
        return iter(self._order)

    def snapshot(self) -> List[int]:
        """Guids in insertion order."""
        return list(self._order)

    def __repr__(self) -> str:
        return f"Blacklist({self._order!r})"
