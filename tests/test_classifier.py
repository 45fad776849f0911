"""Tests for tiering, scoring and recommendations."""

import pytest

from device_profile_lab.harness.classifier import (
    DEFAULT_RECOMMENDATIONS,
    DeviceTier,
    ScoringPolicy,
    classify_device_tier,
    compute_score,
    estimate_device_tier,
    generate_recommendations,
    generate_summary,
)
from device_profile_lab.harness.runner import BenchmarkCategory, BenchmarkStatus
from device_profile_lab.instrumentation.device import DeviceInfo

from conftest import make_result

LLM = BenchmarkCategory.LLM
VECTOR = BenchmarkCategory.VECTOR
MEMORY = BenchmarkCategory.MEMORY
FAILED = BenchmarkStatus.FAILED
PARTIAL = BenchmarkStatus.PARTIAL


def profile(llm_ms=1500.0, search_ms=30.0, embed_ms=50.0):
    return [
        make_result("Short Prompt Inference (< 20 tokens)", LLM, avg_ms=llm_ms),
        make_result("Vector Similarity Search (top 10)", VECTOR, avg_ms=search_ms),
        make_result("Single Embedding Generation", VECTOR, avg_ms=embed_ms),
    ]


class TestTiering:
    def test_all_failed_is_unsupported(self):
        results = [
            make_result("Short Prompt Inference (< 20 tokens)", LLM, FAILED, avg_ms=1.0),
            make_result("Vector Similarity Search (top 10)", VECTOR, FAILED, avg_ms=1.0),
        ]
        assert classify_device_tier(results) == DeviceTier.UNSUPPORTED

    def test_empty_is_unsupported(self):
        assert classify_device_tier([]) == DeviceTier.UNSUPPORTED

    def test_fast_device_is_high(self):
        assert classify_device_tier(profile()) == DeviceTier.HIGH

    def test_worst_of_three(self):
        assert classify_device_tier(profile(llm_ms=6000.0)) == DeviceTier.LOW
        assert classify_device_tier(profile(search_ms=100.0)) == DeviceTier.MID
        assert classify_device_tier(profile(embed_ms=600.0)) == DeviceTier.LOW

    def test_missing_category_defaults_to_mid(self):
        results = profile()[1:]
        assert classify_device_tier(results) == DeviceTier.MID

    def test_failed_category_defaults_to_mid(self):
        results = profile()
        results[0] = make_result("Short Prompt Inference (< 20 tokens)", LLM, FAILED, avg_ms=9000.0)
        assert classify_device_tier(results) == DeviceTier.MID

    @pytest.mark.parametrize("latency,tier", [(1999.0, DeviceTier.HIGH), (2000.0, DeviceTier.MID),
                                              (5000.0, DeviceTier.MID), (5001.0, DeviceTier.LOW)])
    def test_llm_boundaries(self, latency, tier):
        assert classify_device_tier(profile(llm_ms=latency)) == tier


class TestScoring:
    def test_penalties(self):
        results = profile() + [make_result(f"ok {i}") for i in range(4)]
        results += [
            make_result("broken 1", status=FAILED),
            make_result("broken 2", status=FAILED),
            make_result("flaky", status=PARTIAL),
        ]
        assert len(results) == 10
        assert compute_score(results) == 65

    def test_slow_llm_penalty(self):
        assert compute_score(profile(llm_ms=5001.0)) == 90
        assert compute_score(profile(llm_ms=5000.0)) == 100

    def test_clamped_at_zero(self):
        results = [make_result(f"broken {i}", status=FAILED) for i in range(10)]
        assert compute_score(results) == 0

    def test_custom_policy(self):
        results = [make_result("broken", status=FAILED)]
        assert compute_score(results, ScoringPolicy(failed_penalty=40)) == 60


class TestRecommendations:
    def test_unsupported_returns_early(self):
        results = [make_result("memory", MEMORY, FAILED, memory_used_mb=5000.0)]
        recs = generate_recommendations(results, DeviceTier.UNSUPPORTED)
        assert recs == list(DEFAULT_RECOMMENDATIONS.unsupported)

    def test_high_with_nothing_else(self):
        recs = generate_recommendations(profile(), DeviceTier.HIGH)
        assert recs == [DEFAULT_RECOMMENDATIONS.well_suited]

    def test_low_tier_and_cumulative_rules(self):
        results = profile(llm_ms=6000.0) + [
            make_result("Vector Storage (embed + store + index)", VECTOR, FAILED),
            make_result("Baseline Memory Usage", MEMORY, memory_used_mb=2500.0),
        ]
        recs = generate_recommendations(results, DeviceTier.LOW)
        texts = DEFAULT_RECOMMENDATIONS
        assert recs == [
            *texts.low_tier,
            texts.slow_llm,
            texts.vector_failed,
            texts.high_memory,
        ]

    def test_high_tier_with_warning_has_no_confirmation(self):
        results = profile() + [make_result("Baseline Memory Usage", MEMORY, memory_used_mb=2500.0)]
        recs = generate_recommendations(results, DeviceTier.HIGH)
        assert recs == [DEFAULT_RECOMMENDATIONS.high_memory]

    def test_mid_tier_no_rules(self):
        assert generate_recommendations(profile(search_ms=100.0), DeviceTier.MID) == []


def test_summary():
    results = profile() + [make_result("broken", status=FAILED), make_result("flaky", status=PARTIAL)]
    summary = generate_summary(results, 1234.0)
    assert summary.total_tests == 5
    assert summary.passed == 3
    assert summary.failed == 1
    assert summary.overall_score == 80
    assert summary.total_duration_ms == 1234.0
    assert summary.to_dict()["recommendations"] == summary.recommendations


class TestEstimateDeviceTier:
    def device(self, memory_gb, cores, gpu=True):
        return DeviceInfo(
            user_agent="test",
            platform="linux",
            core_count=cores,
            gpu_supported=gpu,
            memory_gb=memory_gb,
        )

    def test_no_gpu_is_low(self):
        assert estimate_device_tier(self.device(64, 32, gpu=False)) == DeviceTier.LOW

    def test_buckets(self):
        assert estimate_device_tier(self.device(16, 8)) == DeviceTier.HIGH
        assert estimate_device_tier(self.device(8, 4)) == DeviceTier.MID
        assert estimate_device_tier(self.device(4, 2)) == DeviceTier.LOW
        assert estimate_device_tier(self.device(2, 1)) is None

    def test_unknown_memory_assumes_four(self):
        assert estimate_device_tier(self.device(None, 8)) == DeviceTier.LOW
