"""
Memory benchmarks - baseline footprint, growth under load, post-collection.
"""

from .benchmark import (
    benchmark_baseline_memory,
    benchmark_memory_growth,
    benchmark_memory_after_gc,
    run_all_memory_benchmarks,
    BASELINE_NAME,
    GROWTH_NAME,
    AFTER_GC_NAME,
    MEMORY_NOT_AVAILABLE,
)

__all__ = [
    "benchmark_baseline_memory",
    "benchmark_memory_growth",
    "benchmark_memory_after_gc",
    "run_all_memory_benchmarks",
    "BASELINE_NAME",
    "GROWTH_NAME",
    "AFTER_GC_NAME",
    "MEMORY_NOT_AVAILABLE",
]
