"""
Host capability snapshot.

Best-effort: every optional field may be missing and no field failing to
resolve is allowed to fail a probe.
"""

import os
import platform
import shutil
import subprocess
import sys
from dataclasses import dataclass
from typing import Optional

import psutil


@dataclass(frozen=True)
class DeviceInfo:
    """Snapshot of host capability consumed by the classifier."""

    user_agent: str
    platform: str
    core_count: int
    gpu_supported: bool
    screen_resolution: str = "unknown"
    memory_gb: Optional[float] = None
    gpu_adapter_name: Optional[str] = None
    connection_type: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "user_agent": self.user_agent,
            "platform": self.platform,
            "memory_gb": self.memory_gb,
            "core_count": self.core_count,
            "gpu_supported": self.gpu_supported,
            "gpu_adapter_name": self.gpu_adapter_name,
            "screen_resolution": self.screen_resolution,
            "connection_type": self.connection_type,
        }


def _detect_gpu() -> Optional[str]:
    """Name of the first NVIDIA adapter reported by nvidia-smi, if any."""
    if shutil.which("nvidia-smi") is None:
        return None
    try:
        output = subprocess.run(
            ["nvidia-smi", "--query-gpu=name", "--format=csv,noheader"],
            capture_output=True,
            text=True,
            timeout=5,
            check=True,
        ).stdout
    except (OSError, subprocess.SubprocessError):
        return None
    names = [line.strip() for line in output.splitlines() if line.strip()]
    return names[0] if names else None


def get_device_info() -> DeviceInfo:
    """Collect a device snapshot for the current host."""
    try:
        memory_gb: Optional[float] = round(psutil.virtual_memory().total / 1024**3, 1)
    except (OSError, RuntimeError):
        memory_gb = None

    adapter = _detect_gpu()
    python = f"{platform.python_implementation()}/{platform.python_version()}"

    return DeviceInfo(
        user_agent=f"{python} ({platform.platform()})",
        platform=sys.platform,
        memory_gb=memory_gb,
        core_count=os.cpu_count() or 1,
        gpu_supported=adapter is not None,
        gpu_adapter_name=adapter,
    )
