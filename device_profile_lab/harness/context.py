"""
Collaborators injected into every probe.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

from ..engines.base import InferenceEngine, VectorBackend
from ..instrumentation.device import DeviceInfo, get_device_info
from ..instrumentation.memory import MemoryProbe, PsutilMemoryProbe


@dataclass
class ProbeContext:
    """The engines, probes and output settings a probe runs against.

    engine / vector_backend may be None when the collaborator is not
    configured; probes then report a failed precondition.
    """

    engine: Optional[InferenceEngine] = None
    vector_backend: Optional[VectorBackend] = None
    memory_probe: MemoryProbe = field(default_factory=PsutilMemoryProbe)
    device_info_provider: Callable[[], DeviceInfo] = get_device_info
    verbose: bool = False

    def device_info(self) -> DeviceInfo:
        """Capture a fresh device snapshot."""
        return self.device_info_provider()

    def engine_ready(self) -> bool:
        return self.engine is not None and self.engine.is_ready()

    def embedding_available(self) -> bool:
        return self.vector_backend is not None and self.vector_backend.is_available()

    def memory_available(self) -> bool:
        return self.memory_probe.is_available()

    def memory_used_mb(self) -> Optional[float]:
        """Current memory usage, or None when it cannot be read."""
        if not self.memory_probe.is_available():
            return None
        reading = self.memory_probe.read()
        return reading.used_mb if reading else None
