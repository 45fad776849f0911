"""
Memory benchmarks - process memory footprint at rest and under load.

Measures:
- Baseline memory (average of a few readings)
- Memory growth while repeating an operation
- Memory after a garbage collection pass (single shot)
"""

import asyncio
import gc
from typing import Awaitable, Callable, Optional

from ...harness.context import ProbeContext
from ...harness.runner import (
    BenchmarkCategory,
    BenchmarkMetrics,
    BenchmarkResult,
    BenchmarkStatus,
    MemoryGrowthResult,
    ProgressCallback,
    failed_result,
)
from ...instrumentation.timing import async_timed

BASELINE_NAME = "Baseline Memory Usage"
GROWTH_NAME = "Memory Growth During Operations"
AFTER_GC_NAME = "Memory After GC Hint"

MEMORY_NOT_AVAILABLE = "Memory API not available"

BASELINE_READINGS = 5
BASELINE_INTERVAL_SECONDS = 0.1
GROWTH_OPERATION_COUNT = 10
GROWTH_INTERVAL_SECONDS = 0.05
GC_SETTLE_SECONDS = 1.0
GARBAGE_ITEMS = 10000
GARBAGE_ITEM_SIZE = 1000


async def benchmark_baseline_memory(
    ctx: ProbeContext,
    readings: int = BASELINE_READINGS,
    interval_seconds: float = BASELINE_INTERVAL_SECONDS,
) -> BenchmarkResult:
    """Average of a few memory readings taken at rest.

    Latency fields are not meaningful here and stay 0; iterations is the
    number of readings actually obtained.
    """
    device_info = ctx.device_info()

    if not ctx.memory_available():
        return failed_result(BASELINE_NAME, BenchmarkCategory.MEMORY, MEMORY_NOT_AVAILABLE, device_info)

    snapshots: list[float] = []
    for _ in range(readings):
        used = ctx.memory_used_mb()
        if used:
            snapshots.append(used)
        await asyncio.sleep(interval_seconds)

    if not snapshots:
        return failed_result(BASELINE_NAME, BenchmarkCategory.MEMORY, MEMORY_NOT_AVAILABLE, device_info)

    avg_memory = sum(snapshots) / len(snapshots)
    if ctx.verbose:
        print(f"  Baseline memory: {avg_memory:.1f}MB over {len(snapshots)} readings")

    return BenchmarkResult(
        name=BASELINE_NAME,
        category=BenchmarkCategory.MEMORY,
        metrics=BenchmarkMetrics(memory_used_mb=avg_memory),
        iterations=len(snapshots),
        device_info=device_info,
        status=BenchmarkStatus.SUCCESS,
    )


async def benchmark_memory_growth(
    ctx: ProbeContext,
    operation: Callable[[], Awaitable[object]],
    operation_count: int = GROWTH_OPERATION_COUNT,
    on_progress: Optional[ProgressCallback] = None,
    interval_seconds: float = GROWTH_INTERVAL_SECONDS,
) -> MemoryGrowthResult:
    """Track memory while running operation repeatedly.

    Args:
        ctx: Probe context
        operation: Async zero-argument operation to repeat
        operation_count: Number of times to run it
        on_progress: callback(current, total) after each run
        interval_seconds: Pause after each reading
    """
    device_info = ctx.device_info()

    if not ctx.memory_available():
        return MemoryGrowthResult(
            name=GROWTH_NAME,
            category=BenchmarkCategory.MEMORY,
            metrics=BenchmarkMetrics(),
            iterations=0,
            device_info=device_info,
            status=BenchmarkStatus.FAILED,
            error=MEMORY_NOT_AVAILABLE,
        )

    initial = ctx.memory_used_mb() or 0.0
    readings = [initial]

    for i in range(operation_count):
        await operation()
        current = ctx.memory_used_mb()
        if current:
            readings.append(current)
        if on_progress:
            on_progress(i + 1, operation_count)
        await asyncio.sleep(interval_seconds)

    growth = readings[-1] - initial
    avg_memory = sum(readings) / len(readings)

    if ctx.verbose:
        print(f"  Memory growth over {operation_count} operations: {growth:+.1f}MB")

    return MemoryGrowthResult(
        name=GROWTH_NAME,
        category=BenchmarkCategory.MEMORY,
        metrics=BenchmarkMetrics(memory_used_mb=avg_memory),
        iterations=operation_count,
        device_info=device_info,
        status=BenchmarkStatus.SUCCESS,
        memory_growth_mb=growth,
    )


async def benchmark_memory_after_gc(
    ctx: ProbeContext,
    settle_seconds: float = GC_SETTLE_SECONDS,
) -> BenchmarkResult:
    """Create garbage, force a collection, then read memory once.

    The collection pass is the single timed operation.
    """
    device_info = ctx.device_info()

    if not ctx.memory_available():
        return failed_result(AFTER_GC_NAME, BenchmarkCategory.MEMORY, MEMORY_NOT_AVAILABLE, device_info)

    garbage = ["x" * GARBAGE_ITEM_SIZE for _ in range(GARBAGE_ITEMS)]
    del garbage

    async with async_timed(AFTER_GC_NAME) as timer:
        gc.collect()

    await asyncio.sleep(settle_seconds)
    after_gc = ctx.memory_used_mb() or 0.0

    if ctx.verbose:
        print(f"  Memory after GC: {after_gc:.1f}MB (collect took {timer.elapsed_ms:.1f}ms)")

    return BenchmarkResult(
        name=AFTER_GC_NAME,
        category=BenchmarkCategory.MEMORY,
        metrics=BenchmarkMetrics.single(timer.elapsed_ms, memory_used_mb=after_gc),
        iterations=1,
        device_info=device_info,
        status=BenchmarkStatus.SUCCESS,
    )


async def run_all_memory_benchmarks(
    ctx: ProbeContext,
    on_progress: Optional[Callable[[str, int, int], None]] = None,
    baseline_interval_seconds: float = BASELINE_INTERVAL_SECONDS,
    gc_settle_seconds: float = GC_SETTLE_SECONDS,
) -> list[BenchmarkResult]:
    """Run the memory phase: baseline, then after-GC."""
    results: list[BenchmarkResult] = []

    if on_progress:
        on_progress("Baseline Memory", 0, 1)
    results.append(await benchmark_baseline_memory(ctx, interval_seconds=baseline_interval_seconds))
    if on_progress:
        on_progress("Baseline Memory", 1, 1)

    if on_progress:
        on_progress("Memory After GC", 0, 1)
    results.append(await benchmark_memory_after_gc(ctx, settle_seconds=gc_settle_seconds))
    if on_progress:
        on_progress("Memory After GC", 1, 1)

    return results
