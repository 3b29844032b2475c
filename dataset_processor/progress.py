"""
Progress reporting shared between a background operation and its observer.

One worker thread writes, any number of threads read. Reads always see a
consistent (total, current) pair.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass


@dataclass(frozen=True)
class ProgressSnapshot:
    """An atomically read copy of the progress counters."""
    total: int = 0
    current: int = 0

    @property
    def percent(self) -> float:
        """Completion as a fraction between 0.0 and 1.0."""
        if self.total == 0:
            return 0.0
        return self.current / self.total


class ProgressReporter:
    """Mutable total/current counter, safe to poll while a worker updates it."""

    def __init__(self):
        self._lock = threading.Lock()
        self._total = 0
        self._current = 0

    def set_total(self, total: int) -> None:
        """Set the denominator for the next operation and restart the count."""
        if total < 0:
            raise ValueError(f"total must be >= 0, got {total}")
        with self._lock:
            self._total = total
            self._current = 0

    def advance(self, step: int = 1) -> None:
        """Count finished work. Extra calls past the total are clamped."""
        with self._lock:
            self._current = min(self._current + step, self._total)

    def reset(self) -> None:
        with self._lock:
            self._total = 0
            self._current = 0

    def snapshot(self) -> ProgressSnapshot:
        with self._lock:
            return ProgressSnapshot(total=self._total, current=self._current)

    @property
    def total(self) -> int:
        return self.snapshot().total

    @property
    def current(self) -> int:
        return self.snapshot().current

    @property
    def percent(self) -> float:
        return self.snapshot().percent

    def __repr__(self) -> str:
        snap = self.snapshot()
        return f"ProgressReporter(total={snap.total}, current={snap.current})"


def run_in_background(fn, *args, **kwargs) -> Future:
    """
    Run one operation on a dedicated worker thread.

    Files are still processed strictly one after another inside the
    operation; the worker only keeps the caller free to poll progress.

    Returns:
        A Future resolving to the operation's return value (or its exception).
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="dataset-op")
    try:
        return executor.submit(fn, *args, **kwargs)
    finally:
        # Lets the thread exit once the job is done without blocking here
        executor.shutdown(wait=False)
