"""Shared stub collaborators for the device profiling tests."""

import asyncio
from typing import Callable, Optional

import pytest

from device_profile_lab.engines.base import SearchHit, VectorStats
from device_profile_lab.harness.context import ProbeContext
from device_profile_lab.harness.runner import (
    BenchmarkCategory,
    BenchmarkConfig,
    BenchmarkMetrics,
    BenchmarkResult,
    BenchmarkStatus,
)
from device_profile_lab.instrumentation.device import DeviceInfo
from device_profile_lab.instrumentation.memory import MemoryReading

FIXED_DEVICE = DeviceInfo(
    user_agent="CPython/3.12 (test)",
    platform="linux",
    core_count=8,
    gpu_supported=True,
    memory_gb=16.0,
    gpu_adapter_name="Test GPU",
)


class StubEngine:
    """InferenceEngine with scripted latency and failures.

    fail_on(call_index) decides whether the n-th generate call (0-based,
    warmup calls included) raises.
    """

    def __init__(
        self,
        ready: bool = False,
        load_error: Optional[str] = None,
        delay: float = 0.0,
        fail_on: Optional[Callable[[int], bool]] = None,
    ):
        self.ready = ready
        self.load_error = load_error
        self.delay = delay
        self.fail_on = fail_on or (lambda _i: False)
        self.generate_calls = 0
        self.prompts: list[str] = []
        self.histories: list = []
        self.initialized_with: list[str] = []
        self.unload_calls = 0

    def is_ready(self) -> bool:
        return self.ready

    async def initialize(self, model_id: str) -> None:
        self.initialized_with.append(model_id)
        if self.load_error:
            raise RuntimeError(self.load_error)
        self.ready = True

    async def unload(self) -> None:
        self.unload_calls += 1
        self.ready = False

    async def generate(self, prompt, options=None, history=None) -> str:
        index = self.generate_calls
        self.generate_calls += 1
        self.prompts.append(prompt)
        self.histories.append(history)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_on(index):
            raise RuntimeError(f"generation failed on call {index}")
        return "ok"


class StubVectorBackend:
    """VectorBackend counting calls, optionally failing on init or store."""

    def __init__(
        self,
        available: bool = False,
        init_error: Optional[str] = None,
        item_count: int = 0,
        store_error: Optional[str] = None,
    ):
        self.available = available
        self.init_error = init_error
        self.store_error = store_error
        self.items: list[tuple[str, str, dict]] = [
            (f"existing-{i}", f"existing message {i}", {}) for i in range(item_count)
        ]
        self.embedded: list[str] = []
        self.searches: list[tuple[str, int]] = []
        self.init_calls = 0

    def is_available(self) -> bool:
        return self.available

    async def init(self) -> None:
        self.init_calls += 1
        if self.init_error:
            raise RuntimeError(self.init_error)
        self.available = True

    async def embed(self, text: str):
        self.embedded.append(text)
        return [0.0, 1.0]

    async def store(self, item_id: str, text: str, metadata: dict) -> None:
        if self.store_error:
            raise RuntimeError(self.store_error)
        self.items.append((item_id, text, metadata))

    async def search(self, query: str, k: int) -> list[SearchHit]:
        self.searches.append((query, k))
        return [SearchHit(id=item_id, score=1.0, text=text) for item_id, text, _ in self.items[:k]]

    async def stats(self) -> VectorStats:
        return VectorStats(item_count=len(self.items))


class StubMemoryProbe:
    """MemoryProbe returning scripted readings (the last one repeats)."""

    def __init__(self, readings=(512.0,), available: bool = True):
        self.readings = list(readings)
        self.available = available
        self.reads = 0

    def is_available(self) -> bool:
        return self.available

    def read(self) -> Optional[MemoryReading]:
        value = self.readings[min(self.reads, len(self.readings) - 1)]
        self.reads += 1
        return MemoryReading(used_mb=value, total_mb=1024.0, limit_mb=4096.0)


def make_context(engine=None, vector_backend=None, memory_probe=None) -> ProbeContext:
    return ProbeContext(
        engine=engine,
        vector_backend=vector_backend,
        memory_probe=memory_probe or StubMemoryProbe(),
        device_info_provider=lambda: FIXED_DEVICE,
    )


def make_result(
    name: str,
    category: BenchmarkCategory = BenchmarkCategory.LLM,
    status: BenchmarkStatus = BenchmarkStatus.SUCCESS,
    avg_ms: float = 10.0,
    memory_used_mb: Optional[float] = None,
) -> BenchmarkResult:
    return BenchmarkResult(
        name=name,
        category=category,
        metrics=BenchmarkMetrics(
            avg_latency_ms=avg_ms,
            min_latency_ms=avg_ms,
            max_latency_ms=avg_ms,
            p50_latency_ms=avg_ms,
            p95_latency_ms=avg_ms,
            p99_latency_ms=avg_ms,
            memory_used_mb=memory_used_mb,
        ),
        iterations=5,
        device_info=FIXED_DEVICE,
        status=status,
    )


@pytest.fixture
def fast_config() -> BenchmarkConfig:
    return BenchmarkConfig(warmup_iterations=0, test_iterations=5, cooldown_ms=0, timeout_ms=1000)


@pytest.fixture
def ready_context() -> ProbeContext:
    return make_context(
        engine=StubEngine(ready=True),
        vector_backend=StubVectorBackend(available=True),
    )
