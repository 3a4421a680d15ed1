"""An insertion-ordered hash map backed by a dense list of pairs."""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Iterator
from typing import Generic, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class SliceHashMap(Generic[K, V]):
    """Hash map whose entries live in one contiguous list for fast iteration.

    Removal swaps the last entry into the freed slot, so iteration order is
    insertion order only until the first removal.
    """

    __slots__ = ("_entries", "_index")

    def __init__(self, items: Iterable[tuple[K, V]] | None = None) -> None:
        self._entries: list[tuple[K, V]] = []
        self._index: dict[K, int] = {}
        if items is not None:
            for key, value in items:
                self.insert(key, value)

    def get(self, key: K, default: V | None = None) -> V | None:
        """Return the value for ``key``, or ``default`` when it is absent."""
        idx = self._index.get(key)
        if idx is None:
            return default
        return self._entries[idx][1]

    def __getitem__(self, key: K) -> V:
        return self._entries[self._index[key]][1]

    def __setitem__(self, key: K, value: V) -> None:
        self.insert(key, value)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[K]:
        return (key for key, _ in self._entries)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._entries!r})"

    def insert(self, key: K, value: V) -> V | None:
        """Store ``value`` under ``key``; return the replaced value, if any.

        A replaced entry keeps its position in the iteration order.
        """
        idx = self._index.get(key)
        if idx is None:
            self._index[key] = len(self._entries)
            self._entries.append((key, value))
            return None
        old = self._entries[idx][1]
        self._entries[idx] = (key, value)
        return old

    def remove(self, key: K) -> V:
        """Remove ``key`` and return its value; raise ``KeyError`` if absent."""
        idx = self._index.pop(key)
        last = self._entries.pop()
        if idx < len(self._entries):
            removed = self._entries[idx]
            self._entries[idx] = last
            self._index[last[0]] = idx
            return removed[1]
        return last[1]

    def clear(self) -> None:
        """Remove every entry."""
        self._entries.clear()
        self._index.clear()

    def items(self) -> Iterator[tuple[K, V]]:
        """Iterate over ``(key, value)`` pairs in storage order."""
        return iter(list(self._entries))

    def values(self) -> Iterator[V]:
        """Iterate over values in storage order."""
        return (value for _, value in list(self._entries))