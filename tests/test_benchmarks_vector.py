"""Tests for the vector probes."""

import asyncio

from device_profile_lab.benchmarks.vector import (
    EMBEDDING_GENERATION_NAME,
    EMBEDDING_INIT_NAME,
    VECTOR_SEARCH_NAME,
    VECTOR_STORAGE_NAME,
    benchmark_embedding_generation,
    benchmark_embedding_init,
    benchmark_vector_search,
    benchmark_vector_search_at_scale,
    benchmark_vector_storage,
    run_all_vector_benchmarks,
    search_at_scale_name,
)
from device_profile_lab.harness.runner import BenchmarkCategory, BenchmarkStatus

from conftest import StubVectorBackend, make_context


class TestEmbeddingInit:
    def test_success_times_init_and_embed(self):
        backend = StubVectorBackend()
        ctx = make_context(vector_backend=backend)

        result = asyncio.run(benchmark_embedding_init(ctx))

        assert result.name == EMBEDDING_INIT_NAME
        assert result.status == BenchmarkStatus.SUCCESS
        assert result.iterations == 1
        assert backend.init_calls == 1
        assert backend.embedded == ["test"]

    def test_init_error(self):
        ctx = make_context(vector_backend=StubVectorBackend(init_error="no model"))

        result = asyncio.run(benchmark_embedding_init(ctx))

        assert result.status == BenchmarkStatus.FAILED
        assert result.error == "no model"
        assert result.category == BenchmarkCategory.VECTOR

    def test_no_backend(self):
        result = asyncio.run(benchmark_embedding_init(make_context()))
        assert result.status == BenchmarkStatus.FAILED
        assert result.error == "Embedding model not available"
        assert result.iterations == 0


class TestProbes:
    def test_unavailable_short_circuits(self, fast_config):
        backend = StubVectorBackend(available=False)
        ctx = make_context(vector_backend=backend)

        for probe, name in (
            (benchmark_embedding_generation, EMBEDDING_GENERATION_NAME),
            (benchmark_vector_storage, VECTOR_STORAGE_NAME),
            (benchmark_vector_search, VECTOR_SEARCH_NAME),
        ):
            result = asyncio.run(probe(ctx, fast_config))
            assert result.name == name
            assert result.status == BenchmarkStatus.FAILED
            assert result.iterations == 0

        assert backend.embedded == []

    def test_embedding_generation_rotates_messages(self, fast_config):
        backend = StubVectorBackend(available=True)
        ctx = make_context(vector_backend=backend)

        result = asyncio.run(benchmark_embedding_generation(ctx, fast_config))

        assert result.status == BenchmarkStatus.SUCCESS
        assert result.metrics.throughput is None or result.metrics.throughput > 0
        assert len(backend.embedded) == 5
        assert len(set(backend.embedded)) == 5

    def test_storage_records_metadata(self, fast_config):
        backend = StubVectorBackend(available=True)
        ctx = make_context(vector_backend=backend)

        asyncio.run(benchmark_vector_storage(ctx, fast_config))

        assert len(backend.items) == 5
        ids = [item_id for item_id, _, _ in backend.items]
        assert len(set(ids)) == 5
        metadata = backend.items[0][2]
        assert set(metadata) == {"session_id", "role", "timestamp"}

    def test_search_seeds_small_store(self, fast_config):
        backend = StubVectorBackend(available=True, item_count=3)
        ctx = make_context(vector_backend=backend)

        result = asyncio.run(benchmark_vector_search(ctx, fast_config))

        assert result.status == BenchmarkStatus.SUCCESS
        assert len(backend.items) == 23
        assert len(backend.searches) == 5
        assert all(k == 10 for _, k in backend.searches)

    def test_search_does_not_seed_large_store(self, fast_config):
        backend = StubVectorBackend(available=True, item_count=10)
        ctx = make_context(vector_backend=backend)

        asyncio.run(benchmark_vector_search(ctx, fast_config))

        assert len(backend.items) == 10


class TestSearchAtScale:
    def test_seeds_to_target(self, fast_config):
        backend = StubVectorBackend(available=True, item_count=5)
        ctx = make_context(vector_backend=backend)
        seed_events = []
        measure_events = []

        result = asyncio.run(
            benchmark_vector_search_at_scale(
                ctx,
                50,
                fast_config,
                on_progress=lambda i, t: measure_events.append((i, t)),
                on_seed_progress=lambda phase, pct: seed_events.append((phase, pct)),
            )
        )

        assert result.name == search_at_scale_name(50)
        assert result.status == BenchmarkStatus.SUCCESS
        assert len(backend.items) == 50
        assert seed_events[0] == ("Seeding vectors", 0)
        assert seed_events[-1] == ("Running search benchmark", 0)
        seeding = [pct for phase, pct in seed_events if phase == "Seeding vectors"]
        assert all(0 <= pct < 100 for pct in seeding)
        assert measure_events == [(i, 5) for i in range(1, 6)]

    def test_already_at_target(self, fast_config):
        backend = StubVectorBackend(available=True, item_count=60)
        ctx = make_context(vector_backend=backend)
        seed_events = []

        asyncio.run(
            benchmark_vector_search_at_scale(
                ctx, 50, fast_config, on_seed_progress=lambda p, pct: seed_events.append(p)
            )
        )

        assert len(backend.items) == 60
        assert "Seeding vectors" not in seed_events


class TestRunAll:
    def test_unavailable_backend_stops_after_init(self, fast_config):
        ctx = make_context(vector_backend=StubVectorBackend(init_error="no model"))

        results = asyncio.run(run_all_vector_benchmarks(ctx, fast_config))

        assert [r.name for r in results] == [EMBEDDING_INIT_NAME]

    def test_runs_every_probe(self, fast_config):
        ctx = make_context(vector_backend=StubVectorBackend())

        results = asyncio.run(run_all_vector_benchmarks(ctx, fast_config))

        assert [r.name for r in results] == [
            EMBEDDING_INIT_NAME,
            EMBEDDING_GENERATION_NAME,
            VECTOR_STORAGE_NAME,
            VECTOR_SEARCH_NAME,
        ]

    def test_scale_probe_is_opt_in(self, fast_config):
        ctx = make_context(vector_backend=StubVectorBackend())

        results = asyncio.run(run_all_vector_benchmarks(ctx, fast_config, scale_vector_count=30))

        assert results[-1].name == search_at_scale_name(30)


class TestSetupFailures:
    def test_search_seeding_failure_is_reported(self, fast_config):
        backend = StubVectorBackend(available=True, store_error="disk full")
        ctx = make_context(vector_backend=backend)

        result = asyncio.run(benchmark_vector_search(ctx, fast_config))

        assert result.name == VECTOR_SEARCH_NAME
        assert result.status == BenchmarkStatus.FAILED
        assert result.error == "disk full"
        assert result.iterations == 0
        assert backend.searches == []

    def test_scale_seeding_failure_is_reported(self, fast_config):
        backend = StubVectorBackend(available=True, store_error="disk full")
        ctx = make_context(vector_backend=backend)

        result = asyncio.run(benchmark_vector_search_at_scale(ctx, 30, fast_config))

        assert result.name == search_at_scale_name(30)
        assert result.status == BenchmarkStatus.FAILED
        assert result.error == "disk full"

    def test_storage_init_failure_is_reported(self, fast_config):
        backend = StubVectorBackend(available=True, init_error="index locked")
        ctx = make_context(vector_backend=backend)

        result = asyncio.run(benchmark_vector_storage(ctx, fast_config))

        assert result.status == BenchmarkStatus.FAILED
        assert result.error == "index locked"
        assert backend.items == []
