"""
Instrumentation module for device profiling.

Provides timing/statistics utilities, memory and device probes, and tracing.
"""

from .timing import (
    Timer,
    LatencyStats,
    LatencyCollector,
    async_timed,
    aggregate,
    percentile,
    ops_per_second,
)

from .memory import (
    MemoryProbe,
    MemoryReading,
    MemorySnapshot,
    PsutilMemoryProbe,
    take_memory_snapshot,
    get_memory_stats,
    track_memory_over_time,
)

from .device import DeviceInfo, get_device_info

from .traces import (
    Tracer,
    TracingConfig,
    get_tracer,
    init_tracing,
    shutdown_tracing,
    OTEL_AVAILABLE,
)

__all__ = [
    # Timing
    "Timer",
    "LatencyStats",
    "LatencyCollector",
    "async_timed",
    "aggregate",
    "percentile",
    "ops_per_second",
    # Memory
    "MemoryProbe",
    "MemoryReading",
    "MemorySnapshot",
    "PsutilMemoryProbe",
    "take_memory_snapshot",
    "get_memory_stats",
    "track_memory_over_time",
    # Device
    "DeviceInfo",
    "get_device_info",
    # Tracing
    "Tracer",
    "TracingConfig",
    "get_tracer",
    "init_tracing",
    "shutdown_tracing",
    "OTEL_AVAILABLE",
]
