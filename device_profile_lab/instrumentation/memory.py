"""
Process memory probing.

Wraps psutil to report current/total/limit memory in MB. Probes depend only on
the MemoryProbe protocol so that platforms without the capability can report
"unavailable" instead of crashing.
"""

import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, Protocol

import psutil

BYTES_PER_MB = 1024 * 1024


@dataclass(frozen=True)
class MemoryReading:
    """A single memory reading in MB."""

    used_mb: float
    total_mb: Optional[float] = None
    limit_mb: Optional[float] = None


class MemoryProbe(Protocol):
    """Source of process memory readings."""

    def is_available(self) -> bool:
        ...

    def read(self) -> Optional[MemoryReading]:
        ...


class PsutilMemoryProbe:
    """Memory probe backed by psutil.

    used  = resident set size of this process
    total = virtual memory size of this process
    limit = total physical memory of the host
    """

    def __init__(self, pid: Optional[int] = None):
        try:
            self._process: Optional[psutil.Process] = psutil.Process(pid)
        except psutil.Error:
            self._process = None

    def is_available(self) -> bool:
        return self._process is not None

    def read(self) -> Optional[MemoryReading]:
        """Current reading, or None when the process cannot be inspected."""
        if self._process is None:
            return None
        try:
            info = self._process.memory_info()
            limit = psutil.virtual_memory().total
        except psutil.Error:
            return None
        return MemoryReading(
            used_mb=info.rss / BYTES_PER_MB,
            total_mb=info.vms / BYTES_PER_MB,
            limit_mb=limit / BYTES_PER_MB,
        )


@dataclass
class MemorySnapshot:
    """Point-in-time memory state."""

    timestamp: datetime = field(default_factory=datetime.now)
    used_mb: Optional[float] = None
    total_mb: Optional[float] = None
    limit_mb: Optional[float] = None

    @property
    def usage_percent(self) -> Optional[float]:
        """Used memory as a percentage of the limit."""
        if not self.used_mb or not self.limit_mb:
            return None
        return (self.used_mb / self.limit_mb) * 100

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "used_mb": self.used_mb,
            "total_mb": self.total_mb,
            "limit_mb": self.limit_mb,
            "usage_percent": self.usage_percent,
        }


def take_memory_snapshot(probe: MemoryProbe) -> MemorySnapshot:
    """Snapshot the current memory state."""
    reading = probe.read() if probe.is_available() else None
    if reading is None:
        return MemorySnapshot()
    return MemorySnapshot(
        used_mb=reading.used_mb,
        total_mb=reading.total_mb,
        limit_mb=reading.limit_mb,
    )


def get_memory_stats(probe: MemoryProbe) -> dict:
    """Summarize memory availability and usage."""
    if not probe.is_available():
        return {"available": False}

    snapshot = take_memory_snapshot(probe)
    return {
        "available": True,
        "current_mb": snapshot.used_mb,
        "total_mb": snapshot.total_mb,
        "limit_mb": snapshot.limit_mb,
        "usage_percent": snapshot.usage_percent,
    }


async def track_memory_over_time(
    probe: MemoryProbe,
    duration_seconds: float = 30.0,
    interval_seconds: float = 1.0,
    on_snapshot: Optional[Callable[[MemorySnapshot], None]] = None,
) -> list[MemorySnapshot]:
    """Sample memory at a fixed interval for a period of time."""
    snapshots: list[MemorySnapshot] = []
    start = time.monotonic()

    while time.monotonic() - start < duration_seconds:
        snapshot = take_memory_snapshot(probe)
        snapshots.append(snapshot)
        if on_snapshot:
            on_snapshot(snapshot)
        await asyncio.sleep(interval_seconds)

    return snapshots
