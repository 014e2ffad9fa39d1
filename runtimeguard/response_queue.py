"""A process-wide, thread-safe FIFO of responses waiting to be streamed."""

from __future__ import annotations

import functools
from collections import deque
from typing import Any


class ResponseQueue:
    """Thread-safe first-in first-out queue of responses."""

    def __init__(self) -> None:
        self._items: deque[Any] = deque()

    def __len__(self) -> int:
        return len(self._items)

    def push(self, response: Any) -> None:
        """Append a response."""
        self._items.append(response)

    def try_pop(self) -> Any | None:
        """Remove and return the oldest response, or None if there is none."""
        try:
            return self._items.popleft()
        except IndexError:
            return None


@functools.lru_cache(maxsize=None)
def get_queue() -> ResponseQueue:
    """Return the single shared queue."""
    return ResponseQueue()