"""
LLM benchmarks - model cold start and inference latency.
"""

from .benchmark import (
    benchmark_model_load,
    benchmark_short_prompt_inference,
    benchmark_medium_prompt_inference,
    benchmark_conversation_inference,
    run_all_llm_benchmarks,
    model_load_name,
    DEFAULT_MODEL_ID,
    LLM_BENCHMARK_CONFIG,
    SHORT_PROMPT_NAME,
    MEDIUM_PROMPT_NAME,
    CONVERSATION_NAME,
)

__all__ = [
    "benchmark_model_load",
    "benchmark_short_prompt_inference",
    "benchmark_medium_prompt_inference",
    "benchmark_conversation_inference",
    "run_all_llm_benchmarks",
    "model_load_name",
    "DEFAULT_MODEL_ID",
    "LLM_BENCHMARK_CONFIG",
    "SHORT_PROMPT_NAME",
    "MEDIUM_PROMPT_NAME",
    "CONVERSATION_NAME",
]
