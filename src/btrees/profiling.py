"""Performance profiling utilities for B-tree operations."""

import time
import functools
from typing import Dict, List, Callable, Optional
from dataclasses import dataclass, field
import statistics
from collections import defaultdict


@dataclass
class OperationMetrics:
    """Timing statistics for a single tracked operation."""
    call_count: int = 0
    total_time: float = 0.0
    min_time: float = float('inf')
    max_time: float = 0.0
    times: List[float] = field(default_factory=list)

    def add_measurement(self, elapsed: float) -> None:
        """Add a new execution time measurement."""
        self.call_count += 1
        self.total_time += elapsed
        self.min_time = min(self.min_time, elapsed)
        self.max_time = max(self.max_time, elapsed)
        self.times.append(elapsed)

    @property
    def avg_time(self) -> float:
        return self.total_time / self.call_count if self.call_count > 0 else 0

    @property
    def median_time(self) -> float:
        return statistics.median(self.times) if self.times else 0

    def __str__(self) -> str:
        return (f"Calls: {self.call_count}, "
                f"Total: {self.total_time:.6f}s, "
                f"Avg: {self.avg_time:.6f}s, "
                f"Median: {self.median_time:.6f}s")


class PerformanceTracker:
    """
    Process-wide collector of operation timings.

    Tracking is off by default; decorated tree operations only pay for a
    flag check until `enable()` is called.
    """

    _instance = None

    @classmethod
    def get_instance(cls) -> 'PerformanceTracker':
        """Singleton accessor."""
        if cls._instance is None:
            cls._instance = PerformanceTracker()
        return cls._instance

    def __init__(self):
        self.metrics: Dict[str, OperationMetrics] = defaultdict(OperationMetrics)
        self.enabled = False

    def add_measurement(self, name: str, elapsed: float) -> None:
        if self.enabled:
            self.metrics[name].add_measurement(elapsed)

    def reset(self) -> None:
        """Clear all measurements."""
        self.metrics.clear()

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    def report(self, sort_by: str = 'total_time') -> str:
        """
        Render the collected timings as a table.

        Args:
            sort_by: Any OperationMetrics attribute (e.g. 'total_time',
                'avg_time', 'call_count'); rows are sorted descending.
        """
        if not self.metrics:
            return "No performance data collected."

        lines = ["Performance Metrics:"]
        lines.append("-" * 80)
        lines.append(f"{'Operation':<40} {'Calls':>8} {'Total (s)':>12} {'Avg (s)':>12} {'Median (s)':>12}")
        lines.append("-" * 80)

        rows = sorted(
            self.metrics.items(),
            key=lambda kv: getattr(kv[1], sort_by),
            reverse=True
        )
        for name, metrics in rows:
            lines.append(f"{name:<40} {metrics.call_count:>8} {metrics.total_time:>12.6f} "
                         f"{metrics.avg_time:>12.6f} {metrics.median_time:>12.6f}")

        return "\n".join(lines)


def track_performance(method: Optional[Callable] = None, *,
                      tag: Optional[str] = None) -> Callable:
    """
    Decorator recording the wall time of each call in the PerformanceTracker.

    Usable both as ``@track_performance`` and ``@track_performance(tag="x")``.
    """
    def decorator(func):
        name = tag or func.__qualname__

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            tracker = PerformanceTracker.get_instance()
            if not tracker.enabled:
                return func(*args, **kwargs)

            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                tracker.add_measurement(name, time.perf_counter() - start)
        return wrapper

    if method is None:
        return decorator
    return decorator(method)
