"""
Results reporting for benchmark suites.

Provides console tables, markdown reports, JSON export, charts, and
comparison against a previous run.
"""

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from .runner import BenchmarkResult, BenchmarkStatus, save_json
from .suite import BenchmarkSuite

STATUS_MARKS = {
    BenchmarkStatus.SUCCESS: "✅",
    BenchmarkStatus.PARTIAL: "⚠️",
    BenchmarkStatus.FAILED: "❌",
}


def _avg_latencies(suite: Union[BenchmarkSuite, dict]) -> dict[str, float]:
    """Map result name to avg latency for a suite or its to_dict() form."""
    if isinstance(suite, BenchmarkSuite):
        return {r.name: r.metrics.avg_latency_ms for r in suite.results}
    return {r["name"]: r["metrics"]["avg_latency_ms"] for r in suite.get("results", [])}


def _score(suite: Union[BenchmarkSuite, dict]) -> Optional[int]:
    if isinstance(suite, BenchmarkSuite):
        return suite.summary.overall_score if suite.summary else None
    summary = suite.get("summary") or {}
    return summary.get("overall_score")


def _tier(suite: Union[BenchmarkSuite, dict]) -> Optional[str]:
    if isinstance(suite, BenchmarkSuite):
        return suite.device_tier.value
    return suite.get("device_tier")


@dataclass
class SuiteComparison:
    """Compares a previous suite snapshot with the current run.

    previous may be a BenchmarkSuite or a dict loaded from a saved JSON report.
    """

    previous: Union[BenchmarkSuite, dict]
    current: BenchmarkSuite

    def latency_change(self, name: str) -> Optional[float]:
        """Avg-latency improvement for one result as a percentage.

        Positive means the current run is faster. None when either side is
        missing the result or the previous latency is 0.
        """
        before = _avg_latencies(self.previous).get(name)
        after = _avg_latencies(self.current).get(name)
        if before is None or after is None or before <= 0:
            return None
        return ((before - after) / before) * 100

    def score_change(self) -> Optional[int]:
        before = _score(self.previous)
        after = _score(self.current)
        if before is None or after is None:
            return None
        return after - before

    def tier_changed(self) -> bool:
        return _tier(self.previous) != _tier(self.current)

    def common_results(self) -> list[str]:
        """Result names present in both runs, in current-run order."""
        before = _avg_latencies(self.previous)
        return [r.name for r in self.current.results if r.name in before]


class ConsoleReporter:
    """Generates console/CLI reports."""

    def __init__(self, use_color: bool = True):
        self.use_color = use_color

    def _color(self, text: str, color: str) -> str:
        """Apply ANSI color if enabled."""
        if not self.use_color:
            return text

        colors = {
            "green": "\033[92m",
            "red": "\033[91m",
            "yellow": "\033[93m",
            "blue": "\033[94m",
            "bold": "\033[1m",
            "reset": "\033[0m",
        }

        return f"{colors.get(color, '')}{text}{colors['reset']}"

    def format_duration(self, ms: float) -> str:
        """Format duration for display."""
        if ms < 1000:
            return f"{ms:.1f}ms"
        return f"{ms / 1000:.2f}s"

    def format_change(self, pct: float) -> str:
        """Format improvement percentage with color."""
        if pct > 0:
            return self._color(f"+{pct:.1f}%", "green")
        elif pct < 0:
            return self._color(f"{pct:.1f}%", "red")
        return f"{pct:.1f}%"

    def format_status(self, status: BenchmarkStatus) -> str:
        color = {
            BenchmarkStatus.SUCCESS: "green",
            BenchmarkStatus.PARTIAL: "yellow",
            BenchmarkStatus.FAILED: "red",
        }[status]
        return self._color(status.value, color)

    def results_table(self, results: list[BenchmarkResult]) -> str:
        """Table of per-probe latency, memory and status."""
        if not results:
            return "No results to display"

        headers = ["Benchmark", "Avg", "p50", "p95", "Ops/s", "Mem MB", "Status"]
        col_widths = [44, 10, 10, 10, 9, 9, 8]

        lines = []
        header_row = ""
        for i, header in enumerate(headers):
            header_row += f"{header:<{col_widths[i]}}"
        lines.append(self._color(header_row, "bold"))
        lines.append("-" * sum(col_widths))

        for result in results:
            metrics = result.metrics
            name = result.name[:41] + "..." if len(result.name) > 44 else result.name
            row = [f"{name:<{col_widths[0]}}"]
            row.append(f"{self.format_duration(metrics.avg_latency_ms):<{col_widths[1]}}")
            row.append(f"{self.format_duration(metrics.p50_latency_ms):<{col_widths[2]}}")
            row.append(f"{self.format_duration(metrics.p95_latency_ms):<{col_widths[3]}}")
            ops = f"{metrics.throughput:.1f}" if metrics.throughput else "N/A"
            row.append(f"{ops:<{col_widths[4]}}")
            mem = f"{metrics.memory_used_mb:.0f}" if metrics.memory_used_mb else "N/A"
            row.append(f"{mem:<{col_widths[5]}}")
            row.append(self.format_status(result.status))
            lines.append("".join(row))

        return "\n".join(lines)

    def suite_report(self, suite: BenchmarkSuite) -> str:
        """Full console report for a suite."""
        lines = []
        lines.append(self._color(f"\n{'=' * 100}", "blue"))
        lines.append(self._color(f"{suite.name} v{suite.version}", "bold"))
        lines.append(self._color(f"{'=' * 100}", "blue"))

        info = suite.device_info
        lines.append("\nDevice:")
        lines.append(f"  Platform: {info.platform}")
        lines.append(f"  Cores: {info.core_count}")
        lines.append(f"  Memory: {info.memory_gb if info.memory_gb else 'Unknown'} GB")
        lines.append(f"  GPU: {info.gpu_adapter_name or ('Supported' if info.gpu_supported else 'Not supported')}")

        lines.append("")
        lines.append(self.results_table(suite.results))

        summary = suite.summary
        if summary:
            lines.append("\nSummary:")
            lines.append(f"  Tests: {summary.passed}/{summary.total_tests} passed, {summary.failed} failed")
            lines.append(f"  Duration: {self.format_duration(summary.total_duration_ms)}")
            lines.append(f"  Score: {summary.overall_score}/100")
            lines.append(f"  Tier: {self._color(suite.device_tier.value, 'bold')}")

            if summary.recommendations:
                lines.append(f"\n{self._color('Recommendations:', 'yellow')}")
                for rec in summary.recommendations:
                    lines.append(f"  - {rec}")

        errors = [r for r in suite.results if r.error]
        if errors:
            lines.append(f"\n{self._color('Errors:', 'red')}")
            for result in errors[:5]:
                lines.append(f"  - {result.name}: {result.error}")
            if len(errors) > 5:
                lines.append(f"  ... and {len(errors) - 5} more")

        return "\n".join(lines)

    def comparison_report(self, comparison: SuiteComparison) -> str:
        """Per-result latency change against the previous run."""
        lines = []
        lines.append(self._color(f"\n{'=' * 70}", "blue"))
        lines.append(self._color(f"Comparison: {comparison.current.name}", "bold"))
        lines.append(self._color(f"{'=' * 70}", "blue"))

        score_change = comparison.score_change()
        if score_change is not None:
            lines.append(f"\nScore change: {score_change:+d}")
        if comparison.tier_changed():
            lines.append(
                f"Tier changed: {_tier(comparison.previous)} -> {comparison.current.device_tier.value}"
            )

        names = comparison.common_results()
        if not names:
            lines.append("\nNo results in common with the previous run")
            return "\n".join(lines)

        current = _avg_latencies(comparison.current)
        lines.append("")
        for name in names:
            change = comparison.latency_change(name)
            change_str = self.format_change(change) if change is not None else "N/A"
            lines.append(f"  {name:<50} {self.format_duration(current[name]):<10} ({change_str})")

        return "\n".join(lines)


class MarkdownReporter:
    """Formats a suite as a markdown document."""

    def render(self, suite: BenchmarkSuite) -> str:
        lines = []

        lines.append(f"# {suite.name}")
        lines.append("")
        lines.append(f"**Version:** {suite.version}")
        lines.append(f"**Date:** {suite.run_date.isoformat()}")
        lines.append("")

        info = suite.device_info
        lines.append("## Device Information")
        lines.append("")
        lines.append(f"- **Platform:** {info.platform}")
        lines.append(f"- **Cores:** {info.core_count}")
        lines.append(f"- **Memory:** {info.memory_gb if info.memory_gb else 'Unknown'} GB")
        lines.append(f"- **GPU:** {'Supported' if info.gpu_supported else 'Not Supported'}")
        if info.gpu_adapter_name:
            lines.append(f"- **GPU Adapter:** {info.gpu_adapter_name}")
        lines.append("")

        summary = suite.summary
        if summary:
            lines.append("## Summary")
            lines.append("")
            lines.append(f"- **Total Tests:** {summary.total_tests}")
            lines.append(f"- **Passed:** {summary.passed}")
            lines.append(f"- **Failed:** {summary.failed}")
            lines.append(f"- **Duration:** {summary.total_duration_ms / 1000:.2f}s")
            lines.append(f"- **Score:** {summary.overall_score}/100")
            lines.append(f"- **Tier:** {suite.device_tier.value}")
            lines.append("")

        lines.append("## Results")
        lines.append("")
        lines.append("| Benchmark | Avg (ms) | P50 (ms) | P95 (ms) | Status |")
        lines.append("|-----------|----------|----------|----------|--------|")
        for result in suite.results:
            m = result.metrics
            lines.append(
                f"| {result.name} | {m.avg_latency_ms:.1f} | {m.p50_latency_ms:.1f} "
                f"| {m.p95_latency_ms:.1f} | {STATUS_MARKS[result.status]} |"
            )
        lines.append("")

        if summary and summary.recommendations:
            lines.append("## Recommendations")
            lines.append("")
            for rec in summary.recommendations:
                lines.append(f"- {rec}")
            lines.append("")

        return "\n".join(lines)

    def save(self, suite: BenchmarkSuite, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(suite))
        return path


class ChartReporter:
    """Generates visual charts using matplotlib."""

    def __init__(self, output_dir: Optional[Path] = None):
        self.output_dir = output_dir or Path("results/charts")
        self._matplotlib_available = False
        self._check_matplotlib()

    def _check_matplotlib(self):
        """Check if matplotlib is available."""
        try:
            import matplotlib
            matplotlib.use("Agg")  # Non-interactive backend
            self._matplotlib_available = True
        except ImportError:
            self._matplotlib_available = False

    def latency_bar_chart(
        self,
        suite: BenchmarkSuite,
        filename: Optional[str] = None,
    ) -> Optional[Path]:
        """Bar chart of p50/p95 latency per probe, skipping zero-latency results."""
        if not self._matplotlib_available:
            print("Warning: matplotlib not available for charts")
            return None

        import matplotlib.pyplot as plt
        import numpy as np

        results = [r for r in suite.results if r.metrics.avg_latency_ms > 0]
        if not results:
            return None

        names = [r.name for r in results]
        p50s = [r.metrics.p50_latency_ms for r in results]
        p95s = [r.metrics.p95_latency_ms for r in results]

        x = np.arange(len(names))
        width = 0.35

        fig, ax = plt.subplots(figsize=(12, 6))
        ax.bar(x - width / 2, p50s, width, label="p50", color="steelblue")
        ax.bar(x + width / 2, p95s, width, label="p95", color="coral")

        ax.set_xlabel("Benchmark")
        ax.set_ylabel("Latency (ms)")
        ax.set_yscale("log")
        ax.set_title(f"{suite.name} ({suite.device_tier.value} tier)")
        ax.set_xticks(x)
        ax.set_xticklabels(names, rotation=45, ha="right")
        ax.legend()

        fig.tight_layout()

        self.output_dir.mkdir(parents=True, exist_ok=True)
        filename = filename or "latency_bar_chart.png"
        filepath = self.output_dir / filename
        fig.savefig(filepath, dpi=150, bbox_inches="tight")
        plt.close(fig)

        return filepath


class JSONReporter:
    """Exports suites as JSON for further analysis."""

    def __init__(self, output_dir: Optional[Path] = None):
        self.output_dir = output_dir or Path("results")

    def save_suite(self, suite: BenchmarkSuite, filename: Optional[str] = None) -> Path:
        """Save a suite to a timestamped JSON file."""
        timestamp = suite.run_date.strftime("%Y%m%d_%H%M%S")
        slug = suite.name.lower().replace(" ", "_")
        filepath = self.output_dir / (filename or f"{slug}_{timestamp}.json")
        suite.save(filepath)
        return filepath

    def save_results(
        self,
        results: list[BenchmarkResult],
        name: str = "results",
    ) -> Path:
        """Save a bare list of results, e.g. a single phase run."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = self.output_dir / f"{name}_{timestamp}.json"

        data = {
            "name": name,
            "timestamp": timestamp,
            "results": [r.to_dict() for r in results],
        }

        return save_json(data, filepath)

    def load_suite(self, filepath: Path) -> dict:
        """Load a saved suite, e.g. as the previous run for SuiteComparison."""
        with open(filepath) as f:
            return json.load(f)

    def load_all_suites(self, pattern: str = "*.json") -> list[dict]:
        """Load all suites matching a pattern."""
        return [self.load_suite(p) for p in sorted(self.output_dir.glob(pattern))]
