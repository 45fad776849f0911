"""
Benchmark harness for device profiling.

Provides the timed runner, suite orchestration, classification and reporting.
"""

from .runner import (
    BenchmarkCategory,
    BenchmarkConfig,
    BenchmarkError,
    BenchmarkMetrics,
    BenchmarkResult,
    BenchmarkStatus,
    BenchmarkTimeoutError,
    DEFAULT_BENCHMARK_CONFIG,
    MemoryGrowthResult,
    TimedRun,
    classify_status,
    run_timed,
)

from .context import ProbeContext

from .classifier import (
    BenchmarkSummary,
    DeviceTier,
    ScoringPolicy,
    TierThresholds,
    classify_device_tier,
    compute_score,
    estimate_device_tier,
    generate_recommendations,
    generate_summary,
)

# suite imports the probe modules, which import runner and context above
from .suite import (
    BenchmarkSuite,
    SuiteOrchestrator,
    run_full_benchmark_suite,
    run_quick_benchmarks,
)

from .reporter import (
    ChartReporter,
    ConsoleReporter,
    JSONReporter,
    MarkdownReporter,
    SuiteComparison,
)

__all__ = [
    # Runner
    "BenchmarkCategory",
    "BenchmarkConfig",
    "BenchmarkError",
    "BenchmarkMetrics",
    "BenchmarkResult",
    "BenchmarkStatus",
    "BenchmarkTimeoutError",
    "DEFAULT_BENCHMARK_CONFIG",
    "MemoryGrowthResult",
    "TimedRun",
    "classify_status",
    "run_timed",
    "ProbeContext",
    # Classifier
    "BenchmarkSummary",
    "DeviceTier",
    "ScoringPolicy",
    "TierThresholds",
    "classify_device_tier",
    "compute_score",
    "estimate_device_tier",
    "generate_recommendations",
    "generate_summary",
    # Suite
    "BenchmarkSuite",
    "SuiteOrchestrator",
    "run_full_benchmark_suite",
    "run_quick_benchmarks",
    # Reporter
    "ChartReporter",
    "ConsoleReporter",
    "JSONReporter",
    "MarkdownReporter",
    "SuiteComparison",
]
