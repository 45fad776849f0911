#!/usr/bin/env python3
"""
Device Profile Lab - Main entry point for profiling the current device.

Usage:
    python main.py [command] [options]

Commands:
    full    - Run the memory, vector and LLM phases
    quick   - Run the reduced quick profile
    memory  - Run the memory phase only
    vector  - Run the vector phase only
    llm     - Run the LLM phase only
"""

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from device_profile_lab.config import ProfileSettings  # noqa: E402
from device_profile_lab.engines import AnthropicInferenceEngine, InMemoryVectorBackend  # noqa: E402
from device_profile_lab.harness import (  # noqa: E402
    BenchmarkSuite,
    ChartReporter,
    ConsoleReporter,
    JSONReporter,
    MarkdownReporter,
    ProbeContext,
    SuiteOrchestrator,
)
from device_profile_lab.instrumentation import TracingConfig, init_tracing, shutdown_tracing  # noqa: E402


def build_context(args, settings: ProfileSettings) -> ProbeContext:
    """Wire the configured collaborators into a ProbeContext."""
    engine = AnthropicInferenceEngine() if args.engine == "anthropic" else None
    return ProbeContext(
        engine=engine,
        vector_backend=InMemoryVectorBackend(),
        verbose=settings.verbose,
    )


def build_orchestrator(args, settings: ProfileSettings, ctx: ProbeContext) -> SuiteOrchestrator:
    tracer = None
    if args.trace:
        tracer = init_tracing(TracingConfig(service_name="device-profile-lab"))

    return SuiteOrchestrator(
        ctx,
        settings.benchmark_config(),
        model_id=settings.model_id,
        llm_test_iterations=settings.llm_test_iterations,
        scale_vector_count=settings.scale_vector_count,
        tracer=tracer,
    )


def print_progress(phase: str, name: str, current: int, total: int) -> None:
    print(f"  [{phase}] {name}: {current}/{total}")


def write_reports(args, settings: ProfileSettings, suite: BenchmarkSuite) -> None:
    """Print the console report and write the requested files."""
    print(ConsoleReporter(use_color=sys.stdout.isatty()).suite_report(suite))

    json_path = JSONReporter(settings.output_dir).save_suite(suite)
    print(f"\nResults saved to {json_path}")

    if args.markdown:
        md_path = settings.output_dir / json_path.with_suffix(".md").name
        MarkdownReporter().save(suite, md_path)
        print(f"Markdown report saved to {md_path}")

    if args.chart:
        chart_path = ChartReporter(settings.output_dir / "charts").latency_bar_chart(suite)
        if chart_path:
            print(f"Chart saved to {chart_path}")


async def run_command(args, settings: ProfileSettings) -> BenchmarkSuite:
    """Run the selected command and return its suite."""
    ctx = build_context(args, settings)
    orchestrator = build_orchestrator(args, settings, ctx)
    on_progress = print_progress if settings.verbose else None

    try:
        if args.command == "full":
            return await orchestrator.run_full(on_progress)
        if args.command == "quick":
            return await orchestrator.run_quick(on_progress)
        return await orchestrator.run_phases([args.command], on_progress)
    finally:
        if ctx.engine is not None and ctx.engine.is_ready():
            await ctx.engine.unload()


def main():
    parser = argparse.ArgumentParser(
        description="Device Profile Lab - Profile inference, vector search and memory performance",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py quick --engine none
    python main.py full --runs 10 --scale 500
    python main.py llm --model sonnet --markdown
    python main.py vector --chart
        """,
    )

    parser.add_argument(
        "command",
        choices=["full", "quick", "memory", "vector", "llm"],
        help="Profile to run",
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Model alias or id for the LLM phase (default: haiku)",
    )
    parser.add_argument(
        "--runs",
        type=int,
        default=None,
        help="Measured iterations per probe (default: 5)",
    )
    parser.add_argument(
        "--warmup",
        type=int,
        default=None,
        help="Warmup iterations per probe (default: 2)",
    )
    parser.add_argument(
        "--timeout-ms",
        type=float,
        default=None,
        help="Per-iteration timeout in ms (default: 60000)",
    )
    parser.add_argument(
        "--cooldown-ms",
        type=float,
        default=None,
        help="Pause after each iteration in ms (default: 100)",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=None,
        help="Also run vector search at this store size",
    )
    parser.add_argument(
        "--engine",
        choices=["anthropic", "none"],
        default="anthropic",
        help="Inference engine to profile (default: anthropic)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory to save results (default: results/)",
    )
    parser.add_argument(
        "--markdown",
        action="store_true",
        help="Also write a markdown report",
    )
    parser.add_argument(
        "--chart",
        action="store_true",
        help="Also write a latency bar chart",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Emit OpenTelemetry spans per phase to the console",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress per-iteration progress",
    )

    args = parser.parse_args()

    try:
        settings = ProfileSettings.from_env(
            model_id=args.model,
            test_iterations=args.runs,
            warmup_iterations=args.warmup,
            timeout_ms=args.timeout_ms,
            cooldown_ms=args.cooldown_ms,
            scale_vector_count=args.scale,
            output_dir=args.output_dir,
            verbose=False if args.quiet else None,
        )
    except ValueError as e:
        print(f"Invalid settings: {e}")
        sys.exit(1)

    # Create output directory
    settings.output_dir.mkdir(parents=True, exist_ok=True)

    try:
        suite = asyncio.run(run_command(args, settings))
        write_reports(args, settings, suite)
    except KeyboardInterrupt:
        print("\nProfiling interrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)
    finally:
        shutdown_tracing()


if __name__ == "__main__":
    main()
