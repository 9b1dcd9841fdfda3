"""Instrumentation for the divide-and-conquer algorithms.

Each algorithm instance owns a :class:`MetricsCollector` that counts
comparisons, swaps and allocations and times a single run. Recursion depth is
tracked separately by a :class:`DepthTracker`: every thread has its own
implicit tracker, so runs benchmarked concurrently on different threads never
see each other's depth. Finished runs can be archived into a process-wide
history as immutable :class:`RunRecord` snapshots and exported to CSV.
"""

from __future__ import annotations

import csv
import logging
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

CSV_HEADER = ["Algorithm", "InputSize", "TimeMillis", "Comparisons", "Swaps", "Allocations", "MaxDepth"]


class DepthTracker:
    """Current and maximum recursion depth for one logical run.

    Use it as a context manager around the body of every recursive call::

        with tracker:
            ...

    Entering increments ``current`` (raising ``max_depth`` when exceeded) and
    leaving decrements it on every exit path, including early returns and
    exceptions.
    """

    __slots__ = ("current", "max_depth")

    def __init__(self) -> None:
        self.current = 0
        self.max_depth = 0

    def enter(self) -> None:
        self.current += 1
        if self.current > self.max_depth:
            self.max_depth = self.current

    def exit(self) -> None:
        self.current -= 1

    def reset(self) -> None:
        self.current = 0
        self.max_depth = 0

    def __enter__(self) -> "DepthTracker":
        self.enter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.exit()

    def __repr__(self) -> str:
        return f"DepthTracker(current={self.current}, max_depth={self.max_depth})"


_local = threading.local()


def current_tracker() -> DepthTracker:
    """Return the depth tracker of the calling thread, creating it on first use."""
    tracker = getattr(_local, "tracker", None)
    if tracker is None:
        tracker = DepthTracker()
        _local.tracker = tracker
    return tracker


def enter_recursion() -> None:
    current_tracker().enter()


def exit_recursion() -> None:
    current_tracker().exit()


def reset_depth() -> None:
    """Zero the calling thread's depth counters; call before every measured run."""
    current_tracker().reset()


def get_max_depth() -> int:
    """High-water mark of the calling thread's depth since the last reset."""
    return current_tracker().max_depth


@dataclass(frozen=True)
class RunRecord:
    """Immutable snapshot of one finished run."""

    algorithm_name: str
    input_size: int
    comparisons: int
    swaps: int
    allocations: int
    elapsed_nanos: int
    max_depth: int

    @property
    def elapsed_millis(self) -> float:
        return self.elapsed_nanos / 1_000_000.0

    def to_row(self) -> List[str]:
        # fixed-point, '.' separator: str.format is locale independent
        return [
            self.algorithm_name,
            str(self.input_size),
            f"{self.elapsed_millis:.3f}",
            str(self.comparisons),
            str(self.swaps),
            str(self.allocations),
            str(self.max_depth),
        ]

    def __str__(self) -> str:
        return (
            f"{self.algorithm_name}: n={self.input_size}, time={self.elapsed_millis:.3f}ms, "
            f"comparisons={self.comparisons}, swaps={self.swaps}, "
            f"allocations={self.allocations}, maxDepth={self.max_depth}"
        )


_history: List[RunRecord] = []
_history_lock = threading.Lock()


class MetricsCollector:
    """Per-run counter bundle owned by a single algorithm instance.

    Parameters
    ----------
    algorithm_name:
        Label written into every archived record. It survives :meth:`reset`.
    """

    def __init__(self, algorithm_name: str) -> None:
        self.algorithm_name = algorithm_name
        self.reset()

    def reset(self) -> None:
        """Zero all counters for a fresh run. Depth tracking is reset separately."""
        self.comparisons = 0
        self.swaps = 0
        self.allocations = 0
        self.start_time = 0
        self.end_time = 0
        self.input_size = 0
        self.recorded_max_depth = 0

    # Counters ------------------------------------------------------
    def increment_comparisons(self, count: int = 1) -> None:
        self.comparisons += count

    def increment_swaps(self) -> None:
        self.swaps += 1

    def increment_allocations(self, count: int = 1) -> None:
        self.allocations += count

    def set_input_size(self, size: int) -> None:
        self.input_size = size

    # Timer ---------------------------------------------------------
    def start_timer(self) -> None:
        self.start_time = time.perf_counter_ns()

    def stop_timer(self) -> None:
        self.end_time = time.perf_counter_ns()

    def get_elapsed_time_nanos(self) -> int:
        return self.end_time - self.start_time

    def get_elapsed_time_millis(self) -> float:
        """Elapsed time in fractional milliseconds; only meaningful after :meth:`stop_timer`."""
        return self.get_elapsed_time_nanos() / 1_000_000.0

    # Depth (thread scoped, shared by all collectors on a thread) ---
    enter_recursion = staticmethod(enter_recursion)
    exit_recursion = staticmethod(exit_recursion)
    reset_depth = staticmethod(reset_depth)
    get_max_depth = staticmethod(get_max_depth)

    # Recording -----------------------------------------------------
    def snapshot(self) -> RunRecord:
        return RunRecord(
            algorithm_name=self.algorithm_name,
            input_size=self.input_size,
            comparisons=self.comparisons,
            swaps=self.swaps,
            allocations=self.allocations,
            elapsed_nanos=self.get_elapsed_time_nanos(),
            max_depth=self.recorded_max_depth,
        )

    def record_run(self) -> RunRecord:
        """Archive a point-in-time copy of this collector into the shared history."""
        record = self.snapshot()
        with _history_lock:
            _history.append(record)
        return record

    def __str__(self) -> str:
        return str(self.snapshot())


def get_all_metrics() -> Tuple[RunRecord, ...]:
    """Return the archived records in recording order."""
    with _history_lock:
        return tuple(_history)


def clear_all_metrics() -> None:
    with _history_lock:
        _history.clear()


def export_to_csv(path: Union[str, Path], records: Optional[List[RunRecord]] = None) -> Path:
    """Write the archived history (or ``records``) as CSV and return the path.

    One header row followed by one row per run:
    ``Algorithm,InputSize,TimeMillis,Comparisons,Swaps,Allocations,MaxDepth``.
    """
    path = Path(path)
    if records is None:
        with _history_lock:
            records = list(_history)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as fh:
        writer = csv.writer(fh, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for record in records:
            writer.writerow(record.to_row())
    logger.info("Metrics exported to %s (%d runs)", path, len(records))
    return path
