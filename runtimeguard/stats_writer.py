"""Periodic capture statistics appended to a file as JSON-like lines."""

from __future__ import annotations

import os
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, TextIO

_EXTRA_PREFIX = "FALCO_STATS_EXTRA_"


class StatsWriterError(Exception):
    """Raised when the stats writer cannot be set up."""


@dataclass(frozen=True)
class CaptureStats:
    """Counters reported by the event capture."""

    n_evts: int = 0
    n_drops: int = 0
    n_preemptions: int = 0


class Inspector(Protocol):
    def get_capture_stats(self) -> CaptureStats: ...


def _environ_items(environ: Mapping[str, str] | Iterable[str]) -> Iterable[tuple[str, str]]:
    if isinstance(environ, Mapping):
        yield from environ.items()
        return
    for entry in environ:
        key, sep, value = entry.partition("=")
        if not sep:
            raise StatsWriterError(f"Could not find environment separator in {entry}")
        yield key, value


class StatsFileWriter:
    """Writes a stats sample each time the interval elapses and ``handle`` is called."""

    def __init__(self) -> None:
        self._num_stats = 0
        self._inspector: Inspector | None = None
        self._output: TextIO | None = None
        self._extra = ""
        self._last = CaptureStats()
        self._save = threading.Event()
        self._stop = threading.Event()
        self._timer: threading.Thread | None = None

    @property
    def num_stats(self) -> int:
        """Number of samples written so far."""
        return self._num_stats

    def open(
        self,
        inspector: Inspector,
        filename: str | os.PathLike,
        interval_msec: int,
        environ: Mapping[str, str] | Iterable[str] | None = None,
    ) -> None:
        """Start appending to ``filename`` every ``interval_msec`` milliseconds.

        Environment entries named ``FALCO_STATS_EXTRA_<key>`` are added to
        every sample as ``"<key>": "<value>"``. An interval of 0 disables the
        timer; samples can still be requested with ``request_sample``.
        """
        self._inspector = inspector
        extras = []
        for key, value in _environ_items(os.environ if environ is None else environ):
            if key.startswith(_EXTRA_PREFIX):
                extras.append(f'"{key[len(_EXTRA_PREFIX):]}": "{value}"')
        self._extra = ", ".join(extras)
        self._output = open(filename, "a", encoding="utf-8")

        if interval_msec > 0:
            interval = interval_msec / 1000
            self._stop = threading.Event()
            stop = self._stop

            def tick() -> None:
                while not stop.wait(interval):
                    self._save.set()

            self._timer = threading.Thread(target=tick, name="stats-timer", daemon=True)
            self._timer.start()

    def request_sample(self) -> None:
        """Ask for a sample to be written at the next ``handle``."""
        self._save.set()

    def handle(self) -> None:
        """Write a sample if one is due; meant to be called often."""
        if not self._save.is_set() or self._output is None or self._inspector is None:
            return
        self._save.clear()
        self._num_stats += 1
        cur = self._inspector.get_capture_stats()
        if self._num_stats == 1:
            delta = cur
        else:
            delta = CaptureStats(
                cur.n_evts - self._last.n_evts,
                cur.n_drops - self._last.n_drops,
                cur.n_preemptions - self._last.n_preemptions,
            )
        drop_pct = 0 if delta.n_evts == 0 else 100.0 * delta.n_drops / delta.n_evts
        parts = [f'{{"sample": {self._num_stats}']
        if self._extra:
            parts.append(f", {self._extra}")
        parts.append(
            f', "cur": {{"events": {cur.n_evts}, "drops": {cur.n_drops}, '
            f'"preemptions": {cur.n_preemptions}}}, '
            f'"delta": {{"events": {delta.n_evts}, "drops": {delta.n_drops}, '
            f'"preemptions": {delta.n_preemptions}}}, '
            f'"drop_pct": {drop_pct:g}}},\n'
        )
        self._output.write("".join(parts))
        self._output.flush()
        self._last = cur

    def close(self) -> None:
        """Stop the timer and close the file."""
        if self._timer is not None:
            self._stop.set()
            self._timer.join()
            self._timer = None
        if self._output is not None:
            self._output.close()
            self._output = None

    def __enter__(self) -> StatsFileWriter:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()