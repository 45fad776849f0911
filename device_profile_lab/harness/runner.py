"""
Timed benchmark execution.

Runs an async zero-argument operation through warmup, measured and cooldown
phases, racing every measured call against a timeout, and defines the
result shapes every probe produces.
"""

import asyncio
import json
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from ..instrumentation.device import DeviceInfo
from ..instrumentation.timing import LatencyCollector, Timer, aggregate, ops_per_second

T = TypeVar("T")

TIMEOUT_MESSAGE = "Benchmark timeout"

ProgressCallback = Callable[[int, int], None]


class BenchmarkStatus(str, Enum):
    """Outcome of a probe."""

    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


class BenchmarkCategory(str, Enum):
    """Capability category a probe belongs to."""

    LLM = "llm"
    VECTOR = "vector"
    MEMORY = "memory"
    ANALYSIS = "analysis"
    STORAGE = "storage"


class BenchmarkError(Exception):
    """A single measured iteration failed."""


class BenchmarkTimeoutError(BenchmarkError):
    """A single measured iteration exceeded the configured timeout."""

    def __init__(self, message: str = TIMEOUT_MESSAGE):
        super().__init__(message)


@dataclass(frozen=True)
class BenchmarkConfig:
    """Iteration and timing configuration for a probe."""

    warmup_iterations: int = 2
    test_iterations: int = 5
    cooldown_ms: float = 100
    timeout_ms: float = 60000

    def __post_init__(self):
        for name in ("warmup_iterations", "test_iterations", "cooldown_ms", "timeout_ms"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")

    def replace(self, **changes) -> "BenchmarkConfig":
        """Copy with some fields changed."""
        return replace(self, **changes)

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "warmup_iterations": self.warmup_iterations,
            "test_iterations": self.test_iterations,
            "cooldown_ms": self.cooldown_ms,
            "timeout_ms": self.timeout_ms,
        }


DEFAULT_BENCHMARK_CONFIG = BenchmarkConfig()


@dataclass(frozen=True)
class BenchmarkMetrics:
    """Latency metrics derived from a probe's samples."""

    avg_latency_ms: float = 0.0
    min_latency_ms: float = 0.0
    max_latency_ms: float = 0.0
    p50_latency_ms: float = 0.0
    p95_latency_ms: float = 0.0
    p99_latency_ms: float = 0.0
    throughput: Optional[float] = None  # operations per second
    memory_used_mb: Optional[float] = None

    @classmethod
    def from_latencies(
        cls,
        latencies: list[float],
        with_throughput: bool = True,
        memory_used_mb: Optional[float] = None,
    ) -> "BenchmarkMetrics":
        """Reduce raw samples into metrics."""
        stats = aggregate(latencies)
        return cls(
            avg_latency_ms=stats.avg,
            min_latency_ms=stats.min,
            max_latency_ms=stats.max,
            p50_latency_ms=stats.p50,
            p95_latency_ms=stats.p95,
            p99_latency_ms=stats.p99,
            throughput=ops_per_second(stats.avg) if with_throughput else None,
            memory_used_mb=memory_used_mb,
        )

    @classmethod
    def single(cls, duration_ms: float, memory_used_mb: Optional[float] = None) -> "BenchmarkMetrics":
        """Metrics for a one-shot measurement: every field is the same duration."""
        return cls(
            avg_latency_ms=duration_ms,
            min_latency_ms=duration_ms,
            max_latency_ms=duration_ms,
            p50_latency_ms=duration_ms,
            p95_latency_ms=duration_ms,
            p99_latency_ms=duration_ms,
            memory_used_mb=memory_used_mb,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "avg_latency_ms": self.avg_latency_ms,
            "min_latency_ms": self.min_latency_ms,
            "max_latency_ms": self.max_latency_ms,
            "p50_latency_ms": self.p50_latency_ms,
            "p95_latency_ms": self.p95_latency_ms,
            "p99_latency_ms": self.p99_latency_ms,
            "throughput": self.throughput,
            "memory_used_mb": self.memory_used_mb,
        }


@dataclass(frozen=True)
class BenchmarkResult:
    """Outcome of one probe invocation."""

    name: str
    category: BenchmarkCategory
    metrics: BenchmarkMetrics
    iterations: int
    device_info: DeviceInfo
    status: BenchmarkStatus
    error: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        """Convert result to dictionary for serialization."""
        return {
            "name": self.name,
            "category": self.category.value,
            "metrics": self.metrics.to_dict(),
            "iterations": self.iterations,
            "timestamp": self.timestamp.isoformat(),
            "device_info": self.device_info.to_dict(),
            "status": self.status.value,
            "error": self.error,
        }


@dataclass(frozen=True)
class MemoryGrowthResult(BenchmarkResult):
    """Memory-growth probe result with the observed growth attached."""

    memory_growth_mb: float = 0.0

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["memory_growth_mb"] = self.memory_growth_mb
        return data


@dataclass
class TimedRun(Generic[T]):
    """Raw output of run_timed.

    latencies always has one entry per measured iteration. results and errors
    are appended independently, so use len(errors), not positions, to judge
    how many iterations failed.
    """

    latencies: list[float] = field(default_factory=list)
    results: list[T] = field(default_factory=list)
    errors: list[BenchmarkError] = field(default_factory=list)


def classify_status(error_count: int, test_iterations: int) -> BenchmarkStatus:
    """success with no errors, failed when every iteration failed, else partial."""
    if error_count == 0:
        return BenchmarkStatus.SUCCESS
    if error_count < test_iterations:
        return BenchmarkStatus.PARTIAL
    return BenchmarkStatus.FAILED


def failed_result(
    name: str,
    category: BenchmarkCategory,
    error: str,
    device_info: DeviceInfo,
) -> BenchmarkResult:
    """Zero-iteration result for a probe whose precondition was not met."""
    return BenchmarkResult(
        name=name,
        category=category,
        metrics=BenchmarkMetrics(),
        iterations=0,
        device_info=device_info,
        status=BenchmarkStatus.FAILED,
        error=error,
    )


def result_from_run(
    name: str,
    category: BenchmarkCategory,
    run: TimedRun,
    config: BenchmarkConfig,
    device_info: DeviceInfo,
    memory_used_mb: Optional[float] = None,
    with_throughput: bool = True,
) -> BenchmarkResult:
    """Reduce a TimedRun into a BenchmarkResult."""
    return BenchmarkResult(
        name=name,
        category=category,
        metrics=BenchmarkMetrics.from_latencies(
            run.latencies,
            with_throughput=with_throughput,
            memory_used_mb=memory_used_mb,
        ),
        iterations=config.test_iterations,
        device_info=device_info,
        status=classify_status(len(run.errors), config.test_iterations),
        error=str(run.errors[0]) if run.errors else None,
    )


# Operations abandoned after a timeout keep running; hold a reference until
# they settle so they are not garbage collected mid-flight.
_abandoned: set[asyncio.Future] = set()


def _release(task: asyncio.Future) -> None:
    _abandoned.discard(task)
    if not task.cancelled():
        task.exception()


async def run_single(fn: Callable[[], Awaitable[T]], timeout_ms: float) -> T:
    """Await one call of fn, giving up waiting after timeout_ms.

    The underlying operation is not cancelled on timeout, only ignored.
    """
    task = asyncio.ensure_future(fn())
    done, _ = await asyncio.wait({task}, timeout=timeout_ms / 1000)
    if task not in done:
        _abandoned.add(task)
        task.add_done_callback(_release)
        raise BenchmarkTimeoutError()
    # a TimeoutError raised by fn itself propagates with its own message
    return task.result()


async def run_timed(
    fn: Callable[[], Awaitable[T]],
    config: BenchmarkConfig = DEFAULT_BENCHMARK_CONFIG,
    on_progress: Optional[ProgressCallback] = None,
    name: str = "benchmark",
    verbose: bool = False,
) -> TimedRun[T]:
    """Run fn through warmup and measured iterations.

    Args:
        fn: Async zero-argument operation
        config: Iteration and timing configuration
        on_progress: Optional callback(current, total), called before each measured iteration
        name: Label used in verbose output
        verbose: Print per-iteration progress

    No per-iteration exception escapes: failures (timeouts included) are
    wrapped in BenchmarkError and collected.
    """
    collector = LatencyCollector()
    run: TimedRun[T] = TimedRun(latencies=collector.latencies)
    cooldown = config.cooldown_ms / 1000

    if verbose:
        print(f"\nRunning benchmark: {name}")
        print(f"  Warmup runs: {config.warmup_iterations}")
        print(f"  Benchmark runs: {config.test_iterations}")

    # Warmup runs
    for i in range(config.warmup_iterations):
        try:
            await fn()
        except Exception as e:
            if verbose:
                print(f"  Warmup {i + 1} failed: {e}")
        await asyncio.sleep(cooldown)

    # Measured runs
    total = config.test_iterations
    for i in range(total):
        if on_progress:
            on_progress(i + 1, total)

        timer = Timer(name).start()
        try:
            result = await run_single(fn, config.timeout_ms)
            timer.stop()
            collector.add(timer.elapsed_ms)
            run.results.append(result)
            if verbose:
                print(f"  Run {i + 1}/{total}: {timer.elapsed_ms:.1f}ms")
        except Exception as e:
            timer.stop()
            collector.add(timer.elapsed_ms)
            error = e if isinstance(e, BenchmarkError) else BenchmarkError(str(e))
            run.errors.append(error)
            if verbose:
                print(f"  Run {i + 1}/{total}: error: {error}")

        await asyncio.sleep(cooldown)

    if verbose and collector.count:
        stats = collector.stats()
        print(f"  p50 latency: {stats['latency_p50_ms']:.1f}ms")
        print(f"  p95 latency: {stats['latency_p95_ms']:.1f}ms")
        print(f"  p99 latency: {stats['latency_p99_ms']:.1f}ms")

    return run


def save_json(data: Any, path: Path) -> Path:
    """Write a JSON document, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
    return path
