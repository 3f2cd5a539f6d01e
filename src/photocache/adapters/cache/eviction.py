"""Eviction policies for the memory tier of ImageStore."""

from __future__ import annotations

from collections import OrderedDict


class UnboundedPolicy:
    """Never evicts. Memory grows until the process exits."""

    def touch(self, key: str) -> None:
        _ = key

    def admit(self, key: str) -> list[str]:
        _ = key
        return []

    def forget(self, key: str) -> None:
        _ = key


class LRUPolicy:
    """Keeps at most max_entries images in memory, dropping least recently used.

    Not thread-safe on its own; ImageStore calls it while holding its lock.

    Attributes:
        max_entries: Upper bound on images held in memory.
    """

    def __init__(self, max_entries: int) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self.max_entries = max_entries
        self._order: OrderedDict[str, None] = OrderedDict()

    def touch(self, key: str) -> None:
        """Mark a key as most recently used."""
        if key in self._order:
            self._order.move_to_end(key)

    def admit(self, key: str) -> list[str]:
        """Record a stored key and return the keys pushed out by it."""
        self._order[key] = None
        self._order.move_to_end(key)

        evicted: list[str] = []
        while len(self._order) > self.max_entries:
            oldest, _ = self._order.popitem(last=False)
            evicted.append(oldest)
        return evicted

    def forget(self, key: str) -> None:
        self._order.pop(key, None)
