"""Run settings for device profiling, loaded from the environment."""

import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from .harness.runner import BenchmarkConfig

ENV_PREFIX = "DEVICE_PROFILE_"


class ProfileSettings(BaseModel):
    """Settings for a profiling run."""

    model_config = ConfigDict(protected_namespaces=())

    model_id: str = Field(
        default="haiku",
        description="Model alias or full id to load for the LLM phase",
    )
    warmup_iterations: int = Field(
        default=2,
        ge=0,
        description="Discarded warmup calls per probe",
    )
    test_iterations: int = Field(
        default=5,
        ge=0,
        description="Measured calls per probe",
    )
    llm_test_iterations: int = Field(
        default=3,
        ge=0,
        description="Measured calls per probe in the LLM phase",
    )
    cooldown_ms: float = Field(
        default=100,
        ge=0,
        description="Pause after every call",
    )
    timeout_ms: float = Field(
        default=60000,
        ge=0,
        description="Per-call timeout",
    )
    scale_vector_count: Optional[int] = Field(
        default=None,
        ge=1,
        description="When set, the full suite also runs search at this store size",
    )
    output_dir: Path = Field(
        default=Path("results"),
        description="Directory for JSON, markdown and chart output",
    )
    verbose: bool = Field(
        default=True,
        description="Print per-iteration progress",
    )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "ProfileSettings":
        """Build settings from DEVICE_PROFILE_* variables, then apply overrides.

        Empty variables are ignored. Overrides with a None value are ignored.
        """
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw:
                values[name] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)

    def benchmark_config(self) -> BenchmarkConfig:
        return BenchmarkConfig(
            warmup_iterations=self.warmup_iterations,
            test_iterations=self.test_iterations,
            cooldown_ms=self.cooldown_ms,
            timeout_ms=self.timeout_ms,
        )
