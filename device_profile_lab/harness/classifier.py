"""
Device classification.

Turns a set of BenchmarkResults into a device tier, a 0-100 health score
and a list of rule-based recommendations.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from ..instrumentation.device import DeviceInfo
from .runner import BenchmarkCategory, BenchmarkResult, BenchmarkStatus

SHORT_PROMPT_KEY = "Short Prompt"
VECTOR_SEARCH_KEY = "Vector Similarity Search"
EMBEDDING_KEY = "Single Embedding"


class DeviceTier(str, Enum):
    """Coarse capability bucket."""

    HIGH = "high"
    MID = "mid"
    LOW = "low"
    UNSUPPORTED = "unsupported"


# Worst first
_TIER_ORDER = (DeviceTier.LOW, DeviceTier.MID, DeviceTier.HIGH)


@dataclass(frozen=True)
class LatencyBand:
    """Below high_ms is high tier, above low_ms is low tier, mid otherwise."""

    high_ms: float
    low_ms: float

    def tier(self, latency_ms: float) -> DeviceTier:
        if latency_ms < self.high_ms:
            return DeviceTier.HIGH
        if latency_ms > self.low_ms:
            return DeviceTier.LOW
        return DeviceTier.MID


@dataclass(frozen=True)
class TierThresholds:
    """Per-category latency bands used for tiering."""

    llm_inference: LatencyBand = field(default_factory=lambda: LatencyBand(2000, 5000))
    vector_search: LatencyBand = field(default_factory=lambda: LatencyBand(50, 200))
    embedding_generation: LatencyBand = field(default_factory=lambda: LatencyBand(100, 500))


@dataclass(frozen=True)
class ScoringPolicy:
    """Penalties applied when computing the health score."""

    failed_penalty: int = 15
    partial_penalty: int = 5
    slow_llm_penalty: int = 10
    slow_llm_ms: float = 5000
    high_memory_mb: float = 2000


DEFAULT_THRESHOLDS = TierThresholds()
DEFAULT_SCORING = ScoringPolicy()


@dataclass(frozen=True)
class Recommendations:
    """Fixed recommendation texts."""

    unsupported: tuple[str, ...] = (
        "Your device does not meet minimum requirements. A working inference and embedding stack is required.",
        "Check that the model API is reachable and the embedding backend initializes, then re-run the profile.",
    )
    low_tier: tuple[str, ...] = (
        "Consider using the smaller haiku model for faster responses.",
        "Reduce conversation history length in settings for better performance.",
    )
    slow_llm: str = "LLM inference is slower than optimal. Try closing other resource-heavy processes."
    vector_failed: str = "Vector embeddings are disabled. Semantic search features will be limited."
    high_memory: str = "High memory usage detected. Consider clearing conversation history periodically."
    well_suited: str = "Your device is well-suited for all features including the full model."


DEFAULT_RECOMMENDATIONS = Recommendations()


@dataclass(frozen=True)
class BenchmarkSummary:
    """Totals, score and recommendations derived from a result set."""

    total_tests: int
    passed: int
    failed: int
    total_duration_ms: float
    overall_score: int
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total_tests": self.total_tests,
            "passed": self.passed,
            "failed": self.failed,
            "total_duration_ms": self.total_duration_ms,
            "overall_score": self.overall_score,
            "recommendations": list(self.recommendations),
        }


def find_result(results: Sequence[BenchmarkResult], key: str) -> Optional[BenchmarkResult]:
    """First result whose name contains key."""
    return next((r for r in results if key in r.name), None)


def _category_tier(result: Optional[BenchmarkResult], band: LatencyBand) -> DeviceTier:
    if result is None or result.status == BenchmarkStatus.FAILED:
        return DeviceTier.MID
    return band.tier(result.metrics.avg_latency_ms)


def worst_tier(tiers: Sequence[DeviceTier]) -> DeviceTier:
    for tier in _TIER_ORDER:
        if tier in tiers:
            return tier
    return DeviceTier.HIGH


def classify_device_tier(
    results: Sequence[BenchmarkResult],
    thresholds: TierThresholds = DEFAULT_THRESHOLDS,
) -> DeviceTier:
    """Derive a tier from latency results.

    Every result failed (an empty set included) means unsupported. Otherwise
    each of the short-prompt, vector-search and single-embedding results is
    tiered on its own band, defaulting to mid when missing or failed, and the
    worst of the three wins.
    """
    if all(r.status == BenchmarkStatus.FAILED for r in results):
        return DeviceTier.UNSUPPORTED

    tiers = [
        _category_tier(find_result(results, SHORT_PROMPT_KEY), thresholds.llm_inference),
        _category_tier(find_result(results, VECTOR_SEARCH_KEY), thresholds.vector_search),
        _category_tier(find_result(results, EMBEDDING_KEY), thresholds.embedding_generation),
    ]
    return worst_tier(tiers)


def compute_score(
    results: Sequence[BenchmarkResult],
    policy: ScoringPolicy = DEFAULT_SCORING,
) -> int:
    """Health score in [0, 100]."""
    failed = sum(1 for r in results if r.status == BenchmarkStatus.FAILED)
    partial = sum(1 for r in results if r.status == BenchmarkStatus.PARTIAL)

    score = 100
    score -= failed * policy.failed_penalty
    score -= partial * policy.partial_penalty

    llm_result = find_result(results, SHORT_PROMPT_KEY)
    if llm_result and llm_result.metrics.avg_latency_ms > policy.slow_llm_ms:
        score -= policy.slow_llm_penalty

    return max(0, min(100, score))


def generate_recommendations(
    results: Sequence[BenchmarkResult],
    device_tier: DeviceTier,
    policy: ScoringPolicy = DEFAULT_SCORING,
    texts: Recommendations = DEFAULT_RECOMMENDATIONS,
) -> list[str]:
    """Ordered, cumulative rule-based recommendations."""
    recommendations: list[str] = []

    if device_tier == DeviceTier.UNSUPPORTED:
        recommendations.extend(texts.unsupported)
        return recommendations

    if device_tier == DeviceTier.LOW:
        recommendations.extend(texts.low_tier)

    if any(
        r.category == BenchmarkCategory.LLM and r.metrics.avg_latency_ms > policy.slow_llm_ms
        for r in results
    ):
        recommendations.append(texts.slow_llm)

    if any(
        r.category == BenchmarkCategory.VECTOR and r.status == BenchmarkStatus.FAILED
        for r in results
    ):
        recommendations.append(texts.vector_failed)

    if any(
        r.category == BenchmarkCategory.MEMORY
        and r.metrics.memory_used_mb
        and r.metrics.memory_used_mb > policy.high_memory_mb
        for r in results
    ):
        recommendations.append(texts.high_memory)

    if device_tier == DeviceTier.HIGH and not recommendations:
        recommendations.append(texts.well_suited)

    return recommendations


def generate_summary(
    results: Sequence[BenchmarkResult],
    total_duration_ms: float,
    thresholds: TierThresholds = DEFAULT_THRESHOLDS,
    policy: ScoringPolicy = DEFAULT_SCORING,
) -> BenchmarkSummary:
    """Reduce results into a BenchmarkSummary."""
    device_tier = classify_device_tier(results, thresholds)
    return BenchmarkSummary(
        total_tests=len(results),
        passed=sum(1 for r in results if r.status == BenchmarkStatus.SUCCESS),
        failed=sum(1 for r in results if r.status == BenchmarkStatus.FAILED),
        total_duration_ms=total_duration_ms,
        overall_score=compute_score(results, policy),
        recommendations=generate_recommendations(results, device_tier, policy),
    )


def estimate_device_tier(device_info: DeviceInfo) -> Optional[DeviceTier]:
    """Rough tier from hardware alone, before any probe has run.

    Returns None when the hardware falls below every bucket.
    """
    if not device_info.gpu_supported:
        return DeviceTier.LOW

    memory = device_info.memory_gb or 4
    cores = device_info.core_count

    if memory >= 16 and cores >= 8:
        return DeviceTier.HIGH
    if memory >= 8 and cores >= 4:
        return DeviceTier.MID
    if memory >= 4 and cores >= 2:
        return DeviceTier.LOW
    return None
