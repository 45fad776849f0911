"""
LLM benchmarks - cold start and inference latency.

Measures:
- Model load time (cold start, single shot)
- Short prompt inference (< 20 tokens)
- Medium prompt inference (50-100 tokens)
- Conversation inference with a 4-turn history
"""

import asyncio
from typing import Callable, Optional

from ...engines.base import GenerationOptions
from ...harness.context import ProbeContext
from ...harness.runner import (
    DEFAULT_BENCHMARK_CONFIG,
    BenchmarkCategory,
    BenchmarkConfig,
    BenchmarkMetrics,
    BenchmarkResult,
    BenchmarkStatus,
    ProgressCallback,
    failed_result,
    result_from_run,
    run_timed,
)
from ...instrumentation.timing import async_timed
from ...scenarios.definitions import (
    CONVERSATION_HISTORY,
    FOLLOW_UP_QUESTIONS,
    MEDIUM_PROMPTS,
    SHORT_PROMPTS,
    PromptPool,
)

DEFAULT_MODEL_ID = "haiku"

# The LLM phase runs fewer measured iterations than the other phases
LLM_BENCHMARK_CONFIG = DEFAULT_BENCHMARK_CONFIG.replace(test_iterations=3)

UNLOAD_SETTLE_SECONDS = 1.0

SHORT_PROMPT_NAME = "Short Prompt Inference (< 20 tokens)"
MEDIUM_PROMPT_NAME = "Medium Prompt Inference (50-100 tokens)"
CONVERSATION_NAME = f"Conversation Inference (with {len(CONVERSATION_HISTORY)}-turn context)"

MODEL_NOT_LOADED = "Model not loaded"
ENGINE_NOT_CONFIGURED = "Inference engine not configured"


def model_load_name(model_id: str) -> str:
    return f"Model Load: {model_id}"


async def benchmark_model_load(
    ctx: ProbeContext,
    model_id: str = DEFAULT_MODEL_ID,
    on_progress: Optional[Callable[[str], None]] = None,
    settle_seconds: float = UNLOAD_SETTLE_SECONDS,
) -> BenchmarkResult:
    """Benchmark model cold start.

    Unloads the model first when it is already loaded, waits for the engine
    to settle, then times a single initialize(model_id).
    """
    device_info = ctx.device_info()
    name = model_load_name(model_id)

    if ctx.engine is None:
        return failed_result(name, BenchmarkCategory.LLM, ENGINE_NOT_CONFIGURED, device_info)

    if on_progress:
        on_progress(f"Starting model load benchmark for {model_id}...")

    error: Optional[str] = None
    async with async_timed(name) as timer:
        try:
            if ctx.engine.is_ready():
                await ctx.engine.unload()
                await asyncio.sleep(settle_seconds)

            await ctx.engine.initialize(model_id)
        except Exception as e:
            error = str(e)

    if ctx.verbose:
        outcome = f"error: {error}" if error else "done"
        print(f"  Model load {model_id}: {timer.elapsed_ms:.0f}ms ({outcome})")

    return BenchmarkResult(
        name=name,
        category=BenchmarkCategory.LLM,
        metrics=BenchmarkMetrics.single(timer.elapsed_ms, memory_used_mb=ctx.memory_used_mb()),
        iterations=1,
        device_info=device_info,
        status=BenchmarkStatus.FAILED if error else BenchmarkStatus.SUCCESS,
        error=error,
    )


async def _benchmark_generation(
    ctx: ProbeContext,
    name: str,
    pool: PromptPool,
    config: BenchmarkConfig,
    on_progress: Optional[ProgressCallback],
    with_history: bool = False,
) -> BenchmarkResult:
    """Shared body of the steady-state inference probes."""
    device_info = ctx.device_info()

    if not ctx.engine_ready():
        return failed_result(name, BenchmarkCategory.LLM, MODEL_NOT_LOADED, device_info)

    engine = ctx.engine
    options = GenerationOptions(max_tokens=pool.max_tokens)
    history = CONVERSATION_HISTORY if with_history else None

    async def generate() -> str:
        return await engine.generate(pool.pick(), options, history)

    run = await run_timed(generate, config, on_progress, name=name, verbose=ctx.verbose)

    return result_from_run(
        name,
        BenchmarkCategory.LLM,
        run,
        config,
        device_info,
        memory_used_mb=ctx.memory_used_mb(),
    )


async def benchmark_short_prompt_inference(
    ctx: ProbeContext,
    config: BenchmarkConfig = DEFAULT_BENCHMARK_CONFIG,
    on_progress: Optional[ProgressCallback] = None,
) -> BenchmarkResult:
    """Benchmark inference on trivial prompts (prompts per second as throughput)."""
    return await _benchmark_generation(ctx, SHORT_PROMPT_NAME, SHORT_PROMPTS, config, on_progress)


async def benchmark_medium_prompt_inference(
    ctx: ProbeContext,
    config: BenchmarkConfig = DEFAULT_BENCHMARK_CONFIG,
    on_progress: Optional[ProgressCallback] = None,
) -> BenchmarkResult:
    """Benchmark inference on one-paragraph prompts."""
    return await _benchmark_generation(ctx, MEDIUM_PROMPT_NAME, MEDIUM_PROMPTS, config, on_progress)


async def benchmark_conversation_inference(
    ctx: ProbeContext,
    config: BenchmarkConfig = DEFAULT_BENCHMARK_CONFIG,
    on_progress: Optional[ProgressCallback] = None,
) -> BenchmarkResult:
    """Benchmark inference with a multi-turn conversation history as context."""
    return await _benchmark_generation(
        ctx,
        CONVERSATION_NAME,
        FOLLOW_UP_QUESTIONS,
        config,
        on_progress,
        with_history=True,
    )


async def run_all_llm_benchmarks(
    ctx: ProbeContext,
    model_id: str = DEFAULT_MODEL_ID,
    config: BenchmarkConfig = LLM_BENCHMARK_CONFIG,
    on_progress: Optional[Callable[[str, int, int], None]] = None,
    settle_seconds: float = UNLOAD_SETTLE_SECONDS,
) -> list[BenchmarkResult]:
    """Run all LLM benchmarks.

    Runs the cold-start probe first when the engine is not ready. If that
    fails, returns immediately: nothing else can run without a model.
    """
    results: list[BenchmarkResult] = []

    def progress(label: str) -> Optional[ProgressCallback]:
        if on_progress is None:
            return None
        return lambda i, t: on_progress(label, i, t)

    if not ctx.engine_ready():
        if on_progress:
            on_progress("Model Load", 0, 1)
        load_result = await benchmark_model_load(ctx, model_id, settle_seconds=settle_seconds)
        results.append(load_result)
        if on_progress:
            on_progress("Model Load", 1, 1)

        if load_result.status == BenchmarkStatus.FAILED:
            return results

    probes = [
        ("Short Prompt", benchmark_short_prompt_inference),
        ("Medium Prompt", benchmark_medium_prompt_inference),
        ("Conversation", benchmark_conversation_inference),
    ]
    for label, probe in probes:
        if on_progress:
            on_progress(label, 0, config.test_iterations)
        results.append(await probe(ctx, config, progress(label)))

    return results
