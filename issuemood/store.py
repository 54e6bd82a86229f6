"""Guarded holders for the latest results and log lines.

Readers may live on other threads (a web handler, a TUI), so every read
and every whole-set replacement takes the lock. Readers only ever see a
complete snapshot.
"""

import threading
from collections import deque
from collections.abc import Iterable
from datetime import datetime

from .sentiment import AnalysisResult


class ResultStore:
    """Latest complete set of analysis results for a run."""

    def __init__(self):
        self._lock = threading.Lock()
        self._results: tuple[AnalysisResult, ...] = ()
        self._updated_at: datetime | None = None

    def replace(self, results: Iterable[AnalysisResult]) -> None:
        """Swap in a new result set, discarding the previous one."""
        new_results = tuple(results)
        with self._lock:
            self._results = new_results
            self._updated_at = datetime.now()

    def snapshot(self) -> tuple[AnalysisResult, ...]:
        with self._lock:
            return self._results

    @property
    def updated_at(self) -> datetime | None:
        with self._lock:
            return self._updated_at


class LogBuffer:
    """Bounded, timestamped log lines for display."""

    def __init__(self, max_entries: int = 500):
        self._lock = threading.Lock()
        self._entries: deque[str] = deque(maxlen=max_entries)

    def append(self, message: str, is_error: bool = False) -> str:
        """Record a message as "[HH:MM:SS] message" and return the formatted line."""
        prefix = "ERROR: " if is_error else ""
        entry = f"[{datetime.now():%H:%M:%S}] {prefix}{message}"
        with self._lock:
            self._entries.append(entry)
        return entry

    def snapshot(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
