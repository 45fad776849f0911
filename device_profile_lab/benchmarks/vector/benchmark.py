"""
Vector benchmarks - embedding and similarity search latency.

Measures:
- Embedding backend initialization (single shot, includes one warm-up embed)
- Single embedding generation
- Vector storage (embed + store + index)
- Top-10 similarity search over a small store
- Top-10 similarity search over a store seeded to N items
"""

import uuid
from datetime import datetime
from typing import Callable, Optional

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
    SCALE_SEARCH_QUERIES,
    SEARCH_QUERIES,
    generate_test_messages,
)

EMBEDDING_INIT_NAME = "Embedding Model Initialization"
EMBEDDING_GENERATION_NAME = "Single Embedding Generation"
VECTOR_STORAGE_NAME = "Vector Storage (embed + store + index)"
VECTOR_SEARCH_NAME = "Vector Similarity Search (top 10)"

EMBEDDING_NOT_AVAILABLE = "Embedding model not available"

SEARCH_TOP_K = 10
MIN_SEARCH_ITEMS = 10
SEED_ITEMS = 20
DEFAULT_SCALE_VECTOR_COUNT = 100
SEED_PROGRESS_EVERY = 10

PhaseProgressCallback = Callable[[str, float], None]


def search_at_scale_name(vector_count: int) -> str:
    return f"Vector Search at Scale ({vector_count} vectors)"


def _metadata(session_id: str) -> dict:
    return {"session_id": session_id, "role": "user", "timestamp": datetime.now().isoformat()}


def _item_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex}"


async def benchmark_embedding_init(ctx: ProbeContext) -> BenchmarkResult:
    """Benchmark embedding backend initialization plus one warm-up embedding."""
    device_info = ctx.device_info()

    if ctx.vector_backend is None:
        return failed_result(
            EMBEDDING_INIT_NAME, BenchmarkCategory.VECTOR, EMBEDDING_NOT_AVAILABLE, device_info
        )

    error: Optional[str] = None
    async with async_timed(EMBEDDING_INIT_NAME) as timer:
        try:
            await ctx.vector_backend.init()
            await ctx.vector_backend.embed("test")
        except Exception as e:
            error = str(e)

    return BenchmarkResult(
        name=EMBEDDING_INIT_NAME,
        category=BenchmarkCategory.VECTOR,
        metrics=BenchmarkMetrics.single(timer.elapsed_ms, memory_used_mb=ctx.memory_used_mb()),
        iterations=1,
        device_info=device_info,
        status=BenchmarkStatus.FAILED if error else BenchmarkStatus.SUCCESS,
        error=error,
    )


async def benchmark_embedding_generation(
    ctx: ProbeContext,
    config: BenchmarkConfig = DEFAULT_BENCHMARK_CONFIG,
    on_progress: Optional[ProgressCallback] = None,
) -> BenchmarkResult:
    """Benchmark single embedding generation (embeddings per second)."""
    device_info = ctx.device_info()

    if not ctx.embedding_available():
        return failed_result(
            EMBEDDING_GENERATION_NAME, BenchmarkCategory.VECTOR, EMBEDDING_NOT_AVAILABLE, device_info
        )

    backend = ctx.vector_backend
    messages = generate_test_messages(config.test_iterations + config.warmup_iterations)
    counter = 0

    async def embed():
        nonlocal counter
        message = messages[counter % len(messages)]
        counter += 1
        return await backend.embed(message)

    run = await run_timed(
        embed, config, on_progress, name=EMBEDDING_GENERATION_NAME, verbose=ctx.verbose
    )

    return result_from_run(
        EMBEDDING_GENERATION_NAME,
        BenchmarkCategory.VECTOR,
        run,
        config,
        device_info,
        memory_used_mb=ctx.memory_used_mb(),
    )


async def benchmark_vector_storage(
    ctx: ProbeContext,
    config: BenchmarkConfig = DEFAULT_BENCHMARK_CONFIG,
    on_progress: Optional[ProgressCallback] = None,
) -> BenchmarkResult:
    """Benchmark embed + store + index of a single message."""
    device_info = ctx.device_info()

    if not ctx.embedding_available():
        return failed_result(
            VECTOR_STORAGE_NAME, BenchmarkCategory.VECTOR, EMBEDDING_NOT_AVAILABLE, device_info
        )

    backend = ctx.vector_backend
    try:
        await backend.init()
    except Exception as e:
        return failed_result(VECTOR_STORAGE_NAME, BenchmarkCategory.VECTOR, str(e), device_info)

    messages = generate_test_messages(config.test_iterations + config.warmup_iterations)
    counter = 0

    async def store():
        nonlocal counter
        message = messages[counter % len(messages)]
        counter += 1
        await backend.store(
            _item_id("benchmark"),
            message,
            _metadata("benchmark"),
        )

    run = await run_timed(store, config, on_progress, name=VECTOR_STORAGE_NAME, verbose=ctx.verbose)

    return result_from_run(
        VECTOR_STORAGE_NAME,
        BenchmarkCategory.VECTOR,
        run,
        config,
        device_info,
        memory_used_mb=ctx.memory_used_mb(),
    )


async def benchmark_vector_search(
    ctx: ProbeContext,
    config: BenchmarkConfig = DEFAULT_BENCHMARK_CONFIG,
    on_progress: Optional[ProgressCallback] = None,
) -> BenchmarkResult:
    """Benchmark top-10 similarity search (queries per second).

    Seeds a handful of messages first when the store is nearly empty.
    """
    device_info = ctx.device_info()

    if not ctx.embedding_available():
        return failed_result(
            VECTOR_SEARCH_NAME, BenchmarkCategory.VECTOR, EMBEDDING_NOT_AVAILABLE, device_info
        )

    backend = ctx.vector_backend
    try:
        stats = await backend.stats()
        if stats.item_count < MIN_SEARCH_ITEMS:
            for message in generate_test_messages(SEED_ITEMS):
                await backend.store(
                    _item_id("benchmark-seed"),
                    message,
                    _metadata("benchmark-seed"),
                )
    except Exception as e:
        return failed_result(VECTOR_SEARCH_NAME, BenchmarkCategory.VECTOR, str(e), device_info)

    async def search():
        return await backend.search(SEARCH_QUERIES.pick(), SEARCH_TOP_K)

    run = await run_timed(search, config, on_progress, name=VECTOR_SEARCH_NAME, verbose=ctx.verbose)

    return result_from_run(
        VECTOR_SEARCH_NAME,
        BenchmarkCategory.VECTOR,
        run,
        config,
        device_info,
        memory_used_mb=ctx.memory_used_mb(),
    )


async def benchmark_vector_search_at_scale(
    ctx: ProbeContext,
    vector_count: int = DEFAULT_SCALE_VECTOR_COUNT,
    config: BenchmarkConfig = DEFAULT_BENCHMARK_CONFIG,
    on_progress: Optional[ProgressCallback] = None,
    on_seed_progress: Optional[PhaseProgressCallback] = None,
) -> BenchmarkResult:
    """Benchmark search after seeding the store up to vector_count items.

    Args:
        ctx: Probe context
        vector_count: Target number of stored items
        config: Benchmark configuration
        on_progress: callback(current, total) for measured iterations
        on_seed_progress: callback(phase, percent) for the seeding phase
    """
    device_info = ctx.device_info()
    name = search_at_scale_name(vector_count)

    if not ctx.embedding_available():
        return failed_result(name, BenchmarkCategory.VECTOR, EMBEDDING_NOT_AVAILABLE, device_info)

    backend = ctx.vector_backend
    try:
        await backend.init()
        stats = await backend.stats()
        needed = vector_count - stats.item_count

        if needed > 0:
            if on_seed_progress:
                on_seed_progress("Seeding vectors", 0)
            messages = generate_test_messages(needed)
            for i, message in enumerate(messages):
                await backend.store(
                    _item_id("benchmark-scale"),
                    message,
                    _metadata("benchmark-scale"),
                )
                if on_seed_progress and i % SEED_PROGRESS_EVERY == 0:
                    on_seed_progress("Seeding vectors", (i / needed) * 100)
            if ctx.verbose:
                print(f"  Seeded {needed} vectors for {name}")
    except Exception as e:
        if ctx.verbose:
            print(f"  Setup for {name} failed: {e}")
        return failed_result(name, BenchmarkCategory.VECTOR, str(e), device_info)

    if on_seed_progress:
        on_seed_progress("Running search benchmark", 0)

    async def search():
        return await backend.search(SCALE_SEARCH_QUERIES.pick(), SEARCH_TOP_K)

    run = await run_timed(search, config, on_progress, name=name, verbose=ctx.verbose)

    return result_from_run(
        name,
        BenchmarkCategory.VECTOR,
        run,
        config,
        device_info,
        memory_used_mb=ctx.memory_used_mb(),
    )


async def run_all_vector_benchmarks(
    ctx: ProbeContext,
    config: BenchmarkConfig = DEFAULT_BENCHMARK_CONFIG,
    on_progress: Optional[Callable[[str, int, int], None]] = None,
    scale_vector_count: Optional[int] = None,
) -> list[BenchmarkResult]:
    """Run all vector benchmarks.

    Stops after the initialization probe when the embedding backend is
    unavailable. The search-at-scale probe runs only when scale_vector_count
    is given.
    """
    results: list[BenchmarkResult] = []

    def progress(label: str) -> Optional[ProgressCallback]:
        if on_progress is None:
            return None
        return lambda i, t: on_progress(label, i, t)

    if on_progress:
        on_progress("Embedding Init", 0, 1)
    results.append(await benchmark_embedding_init(ctx))

    if not ctx.embedding_available():
        return results

    probes = [
        ("Embedding Generation", benchmark_embedding_generation),
        ("Vector Storage", benchmark_vector_storage),
        ("Vector Search", benchmark_vector_search),
    ]
    for label, probe in probes:
        if on_progress:
            on_progress(label, 0, config.test_iterations)
        results.append(await probe(ctx, config, progress(label)))

    if scale_vector_count:
        label = "Vector Search at Scale"
        if on_progress:
            on_progress(label, 0, config.test_iterations)
        results.append(
            await benchmark_vector_search_at_scale(
                ctx,
                scale_vector_count,
                config,
                on_progress=progress(label),
            )
        )

    return results
