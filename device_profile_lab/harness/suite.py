"""
Suite orchestration.

Runs the probe phases in order (memory, vector, LLM), forwards progress,
and reduces the collected results into a BenchmarkSuite.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Sequence

from ..benchmarks.llm import (
    DEFAULT_MODEL_ID,
    benchmark_short_prompt_inference,
    run_all_llm_benchmarks,
)
from ..benchmarks.llm.benchmark import UNLOAD_SETTLE_SECONDS
from ..benchmarks.memory import benchmark_baseline_memory, run_all_memory_benchmarks
from ..benchmarks.memory.benchmark import BASELINE_INTERVAL_SECONDS, GC_SETTLE_SECONDS
from ..benchmarks.vector import (
    benchmark_embedding_init,
    benchmark_vector_search,
    run_all_vector_benchmarks,
)
from ..instrumentation.device import DeviceInfo
from ..instrumentation.timing import Timer
from ..instrumentation.traces import Tracer
from .classifier import (
    DEFAULT_SCORING,
    DEFAULT_THRESHOLDS,
    BenchmarkSummary,
    DeviceTier,
    ScoringPolicy,
    TierThresholds,
    classify_device_tier,
    generate_summary,
)
from .context import ProbeContext
from .runner import DEFAULT_BENCHMARK_CONFIG, BenchmarkConfig, BenchmarkResult, save_json

SUITE_VERSION = "1.0.0"
FULL_SUITE_NAME = "Device Profile Benchmark Suite"
QUICK_SUITE_NAME = "Device Profile Quick Benchmark"

PHASES = ("memory", "vector", "llm")

QUICK_TEST_ITERATIONS = 2
LLM_TEST_ITERATIONS = 3

# (phase, probe_name, current, total)
SuiteProgressCallback = Callable[[str, str, int, int], None]


@dataclass
class BenchmarkSuite:
    """Terminal artifact of one orchestration run."""

    name: str
    version: str
    run_date: datetime
    device_info: DeviceInfo
    results: list[BenchmarkResult] = field(default_factory=list)
    summary: Optional[BenchmarkSummary] = None
    thresholds: TierThresholds = field(default=DEFAULT_THRESHOLDS, repr=False)

    @property
    def device_tier(self) -> DeviceTier:
        """Tier derived from the results, never stored."""
        return classify_device_tier(self.results, self.thresholds)

    def to_dict(self) -> dict:
        """Convert suite to dictionary for serialization."""
        return {
            "name": self.name,
            "version": self.version,
            "run_date": self.run_date.isoformat(),
            "device_info": self.device_info.to_dict(),
            "device_tier": self.device_tier.value,
            "results": [r.to_dict() for r in self.results],
            "summary": self.summary.to_dict() if self.summary else None,
        }

    def save(self, path: Path) -> None:
        """Save suite to JSON file."""
        save_json(self.to_dict(), path)


class SuiteOrchestrator:
    """Runs the memory, vector and LLM phases against one ProbeContext."""

    def __init__(
        self,
        ctx: ProbeContext,
        config: BenchmarkConfig = DEFAULT_BENCHMARK_CONFIG,
        model_id: str = DEFAULT_MODEL_ID,
        llm_test_iterations: int = LLM_TEST_ITERATIONS,
        scale_vector_count: Optional[int] = None,
        tracer: Optional[Tracer] = None,
        thresholds: TierThresholds = DEFAULT_THRESHOLDS,
        policy: ScoringPolicy = DEFAULT_SCORING,
        settle_seconds: float = UNLOAD_SETTLE_SECONDS,
        baseline_interval_seconds: float = BASELINE_INTERVAL_SECONDS,
        gc_settle_seconds: float = GC_SETTLE_SECONDS,
    ):
        self.ctx = ctx
        self.config = config
        self.model_id = model_id
        self.llm_config = config.replace(test_iterations=llm_test_iterations)
        self.scale_vector_count = scale_vector_count
        self.tracer = tracer
        self.thresholds = thresholds
        self.policy = policy
        self.settle_seconds = settle_seconds
        self.baseline_interval_seconds = baseline_interval_seconds
        self.gc_settle_seconds = gc_settle_seconds

    def _log(self, message: str) -> None:
        if self.ctx.verbose:
            print(message)

    async def _traced(self, name: str, attributes: dict, run):
        """Await run() inside a span when tracing is configured."""
        if self.tracer is None:
            return await run()
        async with self.tracer.async_span(name, attributes) as span:
            results = await run()
            if span:
                span.set_attribute("phase.result_count", len(results))
            return results

    async def run_memory_phase(
        self,
        on_progress: Optional[SuiteProgressCallback] = None,
    ) -> list[BenchmarkResult]:
        """Memory probes, never gating later phases."""
        self._log("\n=== Memory phase ===")
        if on_progress:
            on_progress("Memory", "Baseline", 0, 2)

        return await self._traced(
            "phase.memory",
            {"phase.name": "memory"},
            lambda: run_all_memory_benchmarks(
                self.ctx,
                on_progress=(lambda n, i, t: on_progress("Memory", n, i, t)) if on_progress else None,
                baseline_interval_seconds=self.baseline_interval_seconds,
                gc_settle_seconds=self.gc_settle_seconds,
            ),
        )

    async def run_vector_phase(
        self,
        on_progress: Optional[SuiteProgressCallback] = None,
    ) -> list[BenchmarkResult]:
        """Vector probes; stops after init when the backend is unavailable."""
        self._log("\n=== Vector phase ===")
        if on_progress:
            on_progress("Vector", "Initialization", 0, 4)

        return await self._traced(
            "phase.vector",
            {"phase.name": "vector"},
            lambda: run_all_vector_benchmarks(
                self.ctx,
                self.config,
                on_progress=(lambda n, i, t: on_progress("Vector", n, i, t)) if on_progress else None,
                scale_vector_count=self.scale_vector_count,
            ),
        )

    async def run_llm_phase(
        self,
        on_progress: Optional[SuiteProgressCallback] = None,
    ) -> list[BenchmarkResult]:
        """LLM probes; cold start first when the engine is not ready."""
        self._log("\n=== LLM phase ===")
        if on_progress:
            on_progress("LLM", "Starting", 0, 4)

        return await self._traced(
            "phase.llm",
            {"phase.name": "llm", "llm.model_id": self.model_id},
            lambda: run_all_llm_benchmarks(
                self.ctx,
                self.model_id,
                self.llm_config,
                on_progress=(lambda n, i, t: on_progress("LLM", n, i, t)) if on_progress else None,
                settle_seconds=self.settle_seconds,
            ),
        )

    def _build_suite(
        self,
        name: str,
        device_info: DeviceInfo,
        results: list[BenchmarkResult],
        timer: Timer,
    ) -> BenchmarkSuite:
        timer.stop()
        summary = generate_summary(results, timer.elapsed_ms, self.thresholds, self.policy)
        suite = BenchmarkSuite(
            name=name,
            version=SUITE_VERSION,
            run_date=datetime.now(),
            device_info=device_info,
            results=results,
            summary=summary,
            thresholds=self.thresholds,
        )
        self._log(
            f"\n{name}: {summary.passed}/{summary.total_tests} passed, "
            f"score {summary.overall_score}/100, tier {suite.device_tier.value}"
        )
        return suite

    async def run_full(
        self,
        on_progress: Optional[SuiteProgressCallback] = None,
    ) -> BenchmarkSuite:
        """Run every phase in order: memory, vector, LLM.

        The LLM phase itself stops after a failed cold start; since it is
        the last phase the suite then ends with the results collected so far.
        """
        return await self.run_phases(PHASES, on_progress, name=FULL_SUITE_NAME)

    async def run_phases(
        self,
        phases: Sequence[str],
        on_progress: Optional[SuiteProgressCallback] = None,
        name: Optional[str] = None,
    ) -> BenchmarkSuite:
        """Run a subset of phases, always in memory, vector, LLM order."""
        unknown = set(phases) - set(PHASES)
        if unknown:
            raise ValueError(f"Unknown phase(s): {sorted(unknown)}")

        runners = {
            "memory": self.run_memory_phase,
            "vector": self.run_vector_phase,
            "llm": self.run_llm_phase,
        }
        name = name or f"{FULL_SUITE_NAME} ({', '.join(p for p in PHASES if p in phases)})"

        timer = Timer(name).start()
        device_info = self.ctx.device_info()
        results: list[BenchmarkResult] = []

        for phase in PHASES:
            if phase in phases:
                results.extend(await runners[phase](on_progress))

        return self._build_suite(name, device_info, results, timer)

    async def run_quick(
        self,
        on_progress: Optional[SuiteProgressCallback] = None,
    ) -> BenchmarkSuite:
        """Reduced probe set: one memory check, embedding init, a short vector
        search, and a short LLM check only if the engine is already ready."""
        timer = Timer(QUICK_SUITE_NAME).start()
        device_info = self.ctx.device_info()
        quick_config = self.config.replace(test_iterations=QUICK_TEST_ITERATIONS)
        results: list[BenchmarkResult] = []

        def notify(phase: str, probe: str, current: int) -> None:
            if on_progress:
                on_progress(phase, probe, current, 1)

        def iterations(phase: str, probe: str):
            if on_progress is None:
                return None
            return lambda i, t: on_progress(phase, probe, i, t)

        notify("Memory", "Memory Check", 0)
        results.append(
            await benchmark_baseline_memory(self.ctx, interval_seconds=self.baseline_interval_seconds)
        )
        notify("Memory", "Memory Check", 1)

        notify("Vector", "Embedding Check", 0)
        results.append(await benchmark_embedding_init(self.ctx))
        notify("Vector", "Embedding Check", 1)

        notify("Vector", "Vector Search", 0)
        results.append(
            await benchmark_vector_search(self.ctx, quick_config, iterations("Vector", "Vector Search"))
        )

        notify("LLM", "LLM Check", 0)
        if self.ctx.engine_ready():
            results.append(
                await benchmark_short_prompt_inference(
                    self.ctx, quick_config, iterations("LLM", "LLM Check")
                )
            )
        notify("LLM", "LLM Check", 1)

        return self._build_suite(QUICK_SUITE_NAME, device_info, results, timer)


async def run_full_benchmark_suite(
    ctx: ProbeContext,
    config: BenchmarkConfig = DEFAULT_BENCHMARK_CONFIG,
    on_progress: Optional[SuiteProgressCallback] = None,
    **kwargs,
) -> BenchmarkSuite:
    """Convenience wrapper around SuiteOrchestrator.run_full."""
    return await SuiteOrchestrator(ctx, config, **kwargs).run_full(on_progress)


async def run_quick_benchmarks(
    ctx: ProbeContext,
    config: BenchmarkConfig = DEFAULT_BENCHMARK_CONFIG,
    on_progress: Optional[SuiteProgressCallback] = None,
    **kwargs,
) -> BenchmarkSuite:
    """Convenience wrapper around SuiteOrchestrator.run_quick."""
    return await SuiteOrchestrator(ctx, config, **kwargs).run_quick(on_progress)
