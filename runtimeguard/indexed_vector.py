"""A list whose elements can be reached by position or by a unique name."""

from __future__ import annotations

from typing import Generic, Iterator, TypeVar

T = TypeVar("T")


class IndexedVector(Generic[T]):
    """Ordered collection addressable by numeric position and by string key."""

    def __init__(self) -> None:
        self._entries: list[T] = []
        self._index: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[T]:
        return iter(self._entries)

    def clear(self) -> None:
        """Remove every element and every key."""
        self._entries.clear()
        self._index.clear()

    def insert(self, entry: T, index: str) -> int:
        """Store ``entry`` under ``index`` and return its position.

        A new key is appended at the next free position; an existing key has
        its element overwritten in place and keeps its position.
        """
        position = self._index.get(index)
        if position is not None:
            self._entries[position] = entry
            return position
        position = len(self._entries)
        self._entries.append(entry)
        self._index[index] = position
        return position

    def at(self, key: int | str) -> T | None:
        """Return the element at a position or under a key, or None if absent."""
        if isinstance(key, str):
            position = self._index.get(key)
            if position is None:
                return None
            key = position
        if 0 <= key < len(self._entries):
            return self._entries[key]
        return None