"""
Tracing utilities for device profiling.

Provides optional OpenTelemetry spans around probes and suite phases.
When OpenTelemetry is not installed, spans are no-ops (None).
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

# OpenTelemetry imports - optional dependency
try:
    from opentelemetry import trace
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.trace import Status, StatusCode
    OTEL_AVAILABLE = True
except ImportError:
    OTEL_AVAILABLE = False
    trace = None


class TracingConfig:
    """Configuration for tracing setup."""

    def __init__(
        self,
        service_name: str = "device-profile-lab",
        enabled: bool = True,
        enable_console_export: bool = True,
    ):
        self.service_name = service_name
        self.enabled = enabled
        self.enable_console_export = enable_console_export


class Tracer:
    """Thin OpenTelemetry wrapper used by the suite orchestrator."""

    def __init__(self, config: Optional[TracingConfig] = None):
        self.config = config or TracingConfig()
        self._otel_tracer = None
        self._provider = None
        self._initialized = False

    def initialize(self) -> "Tracer":
        """Initialize the tracing backend."""
        if self._initialized:
            return self

        if OTEL_AVAILABLE and self.config.enabled:
            resource = Resource.create({"service.name": self.config.service_name})
            self._provider = TracerProvider(resource=resource)

            if self.config.enable_console_export:
                self._provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

            self._otel_tracer = self._provider.get_tracer(self.config.service_name)

        self._initialized = True
        return self

    def shutdown(self) -> None:
        """Flush and shut down the tracing backend."""
        if self._provider is not None:
            self._provider.shutdown()
            self._provider = None
            self._otel_tracer = None
        self._initialized = False

    @asynccontextmanager
    async def async_span(
        self,
        name: str,
        attributes: Optional[dict] = None,
    ) -> AsyncIterator[Any]:
        """Create a traced span for async operations.

        Usage:
            async with tracer.async_span("probe", {"probe.name": name}) as span:
                result = await probe()
                if span:
                    span.set_attribute("probe.status", result.status.value)
        """
        if not self._initialized:
            self.initialize()

        span_obj = None
        if self._otel_tracer:
            span_obj = self._otel_tracer.start_span(name)
            if attributes:
                for key, value in attributes.items():
                    span_obj.set_attribute(key, value)

        try:
            yield span_obj
        except Exception as e:
            if span_obj and OTEL_AVAILABLE:
                span_obj.set_status(Status(StatusCode.ERROR, str(e)))
                span_obj.record_exception(e)
            raise
        finally:
            if span_obj:
                span_obj.end()


# Global tracer instance
_global_tracer: Optional[Tracer] = None


def get_tracer(config: Optional[TracingConfig] = None) -> Tracer:
    """Get or create the global tracer instance."""
    global _global_tracer
    if _global_tracer is None:
        _global_tracer = Tracer(config)
    return _global_tracer


def init_tracing(config: Optional[TracingConfig] = None) -> Tracer:
    """Initialize global tracing."""
    tracer = get_tracer(config)
    return tracer.initialize()


def shutdown_tracing() -> None:
    """Shutdown global tracing."""
    global _global_tracer
    if _global_tracer:
        _global_tracer.shutdown()
        _global_tracer = None
