"""A background timer that calls back with a payload when a deadline passes."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class _Timeout(Generic[T]):
    deadline: float | None
    payload: Any = None


class Watchdog(Generic[T]):
    """Calls a callback with the payload of the last timeout set once it expires.

    Times are in seconds. A new timeout replaces the previous one; the
    callback fires at most once per timeout.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending: _Timeout | None = None
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        """True while the watchdog thread is active."""
        return self._thread is not None

    def start(self, callback: Callable[[T], Any], resolution: float = 0.1) -> None:
        """Start (or restart) the watchdog thread, checking every ``resolution`` seconds."""
        self.stop()
        self._stop_event = threading.Event()
        stop_event = self._stop_event

        def loop() -> None:
            current = _Timeout(None)
            while not stop_event.is_set():
                with self._lock:
                    pending, self._pending = self._pending, None
                if pending is not None:
                    current = pending
                if current.deadline is not None and current.deadline < time.monotonic():
                    callback(current.payload)
                    current = _Timeout(None, current.payload)
                stop_event.wait(resolution)

        self._thread = threading.Thread(target=loop, name="watchdog", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the watchdog thread and drop any timeout not yet picked up."""
        if self._thread is None:
            return
        self._stop_event.set()
        if self._thread is not threading.current_thread():
            self._thread.join()
        self._thread = None
        with self._lock:
            self._pending = None

    def set_timeout(self, timeout: float, payload: T) -> None:
        """Arm the watchdog to fire ``timeout`` seconds from now with ``payload``."""
        with self._lock:
            self._pending = _Timeout(time.monotonic() + timeout, payload)

    def cancel_timeout(self) -> None:
        """Disarm the watchdog."""
        with self._lock:
            self._pending = _Timeout(None)

    def __enter__(self) -> Watchdog[T]:
        return self

    def __exit__(self, *args: Any) -> None:
        self.stop()