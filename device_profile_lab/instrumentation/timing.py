"""
Timing utilities for device profiling.

Provides a wall-clock timer, an async timing context manager, and the
nearest-rank statistics used to reduce latency samples into metrics:
- percentile (non-interpolating, nearest rank)
- aggregate (avg/min/max/p50/p95/p99)
"""

import math
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional, Sequence


def percentile(samples: Sequence[float], p: float) -> float:
    """Nearest-rank percentile of a list of samples.

    Sorts a copy ascending and returns the value at ``ceil(p/100 * n) - 1``,
    clamped to index 0. Returns 0 for an empty input.
    """
    if not samples:
        return 0.0
    ordered = sorted(samples)
    index = math.ceil((p / 100) * len(ordered)) - 1
    return ordered[max(0, index)]


@dataclass(frozen=True)
class LatencyStats:
    """Aggregate statistics over a set of latency samples (milliseconds)."""

    avg: float = 0.0
    min: float = 0.0
    max: float = 0.0
    p50: float = 0.0
    p95: float = 0.0
    p99: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "avg": self.avg,
            "min": self.min,
            "max": self.max,
            "p50": self.p50,
            "p95": self.p95,
            "p99": self.p99,
        }


def aggregate(samples: Sequence[float]) -> LatencyStats:
    """Reduce latency samples to avg/min/max/p50/p95/p99.

    Returns all zeros for an empty input.
    """
    if not samples:
        return LatencyStats()

    return LatencyStats(
        avg=sum(samples) / len(samples),
        min=min(samples),
        max=max(samples),
        p50=percentile(samples, 50),
        p95=percentile(samples, 95),
        p99=percentile(samples, 99),
    )


class Timer:
    """Simple timer for manual timing control."""

    def __init__(self, name: str = "timer"):
        self.name = name
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self._running = False

    def start(self) -> "Timer":
        """Start the timer."""
        self.start_time = time.perf_counter()
        self._running = True
        return self

    def stop(self) -> "Timer":
        """Stop the timer."""
        self.end_time = time.perf_counter()
        self._running = False
        return self

    @property
    def elapsed_ms(self) -> float:
        """Elapsed time in milliseconds."""
        end = self.end_time if not self._running else time.perf_counter()
        return (end - self.start_time) * 1000


@asynccontextmanager
async def async_timed(name: str = "operation") -> AsyncIterator[Timer]:
    """Async context manager for timing async operations.

    The timer is stopped even when the body raises, so the elapsed time of a
    failed operation is still available to the caller.

    Usage:
        async with async_timed("embed") as timer:
            await backend.embed(text)
        print(f"Elapsed: {timer.elapsed_ms}ms")
    """
    timer = Timer(name).start()
    try:
        yield timer
    finally:
        timer.stop()


class LatencyCollector:
    """Collects latency samples in iteration order and aggregates them."""

    def __init__(self):
        self.latencies: list[float] = []

    def add(self, latency_ms: float) -> None:
        """Add a latency sample."""
        self.latencies.append(latency_ms)

    def clear(self) -> None:
        """Clear all collected samples."""
        self.latencies.clear()

    @property
    def count(self) -> int:
        """Number of collected samples."""
        return len(self.latencies)

    def percentile(self, p: float) -> float:
        """Nearest-rank percentile of the collected samples."""
        return percentile(self.latencies, p)

    def stats(self) -> dict:
        """Calculate aggregate statistics."""
        summary = aggregate(self.latencies)
        return {
            "count": self.count,
            "latency_mean_ms": summary.avg,
            "latency_min_ms": summary.min,
            "latency_max_ms": summary.max,
            "latency_p50_ms": summary.p50,
            "latency_p95_ms": summary.p95,
            "latency_p99_ms": summary.p99,
        }


def ops_per_second(avg_latency_ms: float) -> Optional[float]:
    """Operations per second implied by an average latency, if measurable."""
    if avg_latency_ms <= 0:
        return None
    return 1000 / avg_latency_ms
