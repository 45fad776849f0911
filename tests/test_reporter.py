"""Tests for console, markdown, JSON and chart reporting."""

from dataclasses import replace
from datetime import datetime

import pytest

from device_profile_lab.harness.classifier import generate_summary
from device_profile_lab.harness.reporter import (
    ChartReporter,
    ConsoleReporter,
    JSONReporter,
    MarkdownReporter,
    SuiteComparison,
)
from device_profile_lab.harness.runner import BenchmarkCategory, BenchmarkStatus
from device_profile_lab.harness.suite import BenchmarkSuite

from conftest import FIXED_DEVICE, make_result

SHORT = "Short Prompt Inference (< 20 tokens)"
SEARCH = "Vector Similarity Search (top 10)"
EMBED = "Single Embedding Generation"


def make_suite(llm_ms=1500.0, search_ms=30.0, extra=()):
    results = [
        make_result(SHORT, BenchmarkCategory.LLM, avg_ms=llm_ms),
        make_result(SEARCH, BenchmarkCategory.VECTOR, avg_ms=search_ms),
        make_result(EMBED, BenchmarkCategory.VECTOR, avg_ms=40.0),
        *extra,
    ]
    return BenchmarkSuite(
        name="Device Profile Benchmark Suite",
        version="1.0.0",
        run_date=datetime(2026, 1, 2, 3, 4, 5),
        device_info=FIXED_DEVICE,
        results=results,
        summary=generate_summary(results, 2500.0),
    )


class TestConsoleReporter:
    def test_format_duration(self):
        reporter = ConsoleReporter(use_color=False)
        assert reporter.format_duration(12.34) == "12.3ms"
        assert reporter.format_duration(2500) == "2.50s"

    def test_format_change_without_color(self):
        reporter = ConsoleReporter(use_color=False)
        assert reporter.format_change(12.0) == "+12.0%"
        assert reporter.format_change(-3.0) == "-3.0%"

    def test_empty_table(self):
        assert ConsoleReporter().results_table([]) == "No results to display"

    def test_suite_report(self):
        broken = replace(
            make_result("Vector Storage (embed + store + index)", BenchmarkCategory.VECTOR,
                        BenchmarkStatus.FAILED),
            error="disk full",
        )
        report = ConsoleReporter(use_color=False).suite_report(make_suite(extra=[broken]))

        assert "Device Profile Benchmark Suite v1.0.0" in report
        assert "Cores: 8" in report
        assert "Test GPU" in report
        assert "Score: 85/100" in report
        assert "Tier: high" in report
        assert "disk full" in report

    def test_long_names_are_truncated(self):
        result = make_result("x" * 60)
        table = ConsoleReporter(use_color=False).results_table([result])
        assert "x" * 41 + "..." in table
        assert "x" * 45 not in table


class TestMarkdownReporter:
    def test_render(self):
        text = MarkdownReporter().render(make_suite())

        assert text.startswith("# Device Profile Benchmark Suite")
        assert "## Device Information" in text
        assert "- **GPU Adapter:** Test GPU" in text
        assert "- **Tier:** high" in text
        assert f"| {SHORT} | 1500.0 |" in text
        assert "## Recommendations" in text

    def test_save(self, tmp_path):
        path = MarkdownReporter().save(make_suite(), tmp_path / "reports" / "suite.md")
        assert path.exists()
        assert "## Results" in path.read_text()


class TestJSONReporter:
    def test_save_and_load(self, tmp_path):
        reporter = JSONReporter(tmp_path)
        path = reporter.save_suite(make_suite())

        assert path.name == "device_profile_benchmark_suite_20260102_030405.json"
        data = reporter.load_suite(path)
        assert data["device_tier"] == "high"
        assert [r["name"] for r in data["results"]] == [SHORT, SEARCH, EMBED]
        assert data["results"][0]["status"] == "success"

    def test_save_results_and_load_all(self, tmp_path):
        reporter = JSONReporter(tmp_path)
        reporter.save_suite(make_suite(), filename="a.json")
        reporter.save_results([make_result(SHORT)], name="llm")

        loaded = reporter.load_all_suites()
        assert len(loaded) == 2
        assert {d["name"] for d in loaded} == {"Device Profile Benchmark Suite", "llm"}


class TestComparison:
    def test_against_saved_run(self, tmp_path):
        reporter = JSONReporter(tmp_path)
        previous = reporter.load_suite(reporter.save_suite(make_suite(llm_ms=2000.0)))
        current = make_suite(llm_ms=1500.0)

        comparison = SuiteComparison(previous, current)

        assert comparison.latency_change(SHORT) == pytest.approx(25.0)
        assert comparison.latency_change(SEARCH) == pytest.approx(0.0)
        assert comparison.latency_change("missing") is None
        assert comparison.score_change() == 0
        assert comparison.tier_changed()
        assert comparison.common_results() == [SHORT, SEARCH, EMBED]

    def test_tier_change_reported(self):
        comparison = SuiteComparison(make_suite(llm_ms=6000.0), make_suite())

        report = ConsoleReporter(use_color=False).comparison_report(comparison)

        assert comparison.tier_changed()
        assert "Tier changed: low -> high" in report
        assert "Score change: +10" in report

    def test_zero_previous_latency(self):
        comparison = SuiteComparison(make_suite(search_ms=0.0), make_suite())
        assert comparison.latency_change(SEARCH) is None


def test_latency_chart(tmp_path):
    pytest.importorskip("matplotlib")
    reporter = ChartReporter(tmp_path)

    path = reporter.latency_bar_chart(make_suite())

    assert path is not None
    assert path.exists()
