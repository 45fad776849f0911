"""
Device Profile Lab - self-profiling for an inference stack.

Measures language-model, vector-search and memory performance on the
current device and turns the samples into a device tier, a health score
and recommendations.

Key modules:
- instrumentation: Timing/statistics, memory and device probes, tracing
- engines: Inference and vector backend contracts plus reference adapters
- scenarios: Prompt and message pools used as probe inputs
- harness: Timed runner, suite orchestration, classification and reporting
- benchmarks: Probe definitions per capability category
"""

__version__ = "0.1.0"

from . import instrumentation
from . import engines
from . import scenarios
# harness before benchmarks: the probes import harness submodules
from . import harness
from . import benchmarks

__all__ = [
    "instrumentation",
    "engines",
    "scenarios",
    "harness",
    "benchmarks",
]
