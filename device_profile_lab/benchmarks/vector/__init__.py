"""
Vector benchmarks - embedding, storage and similarity search latency.
"""

from .benchmark import (
    benchmark_embedding_init,
    benchmark_embedding_generation,
    benchmark_vector_storage,
    benchmark_vector_search,
    benchmark_vector_search_at_scale,
    run_all_vector_benchmarks,
    search_at_scale_name,
    EMBEDDING_INIT_NAME,
    EMBEDDING_GENERATION_NAME,
    VECTOR_STORAGE_NAME,
    VECTOR_SEARCH_NAME,
    DEFAULT_SCALE_VECTOR_COUNT,
)

__all__ = [
    "benchmark_embedding_init",
    "benchmark_embedding_generation",
    "benchmark_vector_storage",
    "benchmark_vector_search",
    "benchmark_vector_search_at_scale",
    "run_all_vector_benchmarks",
    "search_at_scale_name",
    "EMBEDDING_INIT_NAME",
    "EMBEDDING_GENERATION_NAME",
    "VECTOR_STORAGE_NAME",
    "VECTOR_SEARCH_NAME",
    "DEFAULT_SCALE_VECTOR_COUNT",
]
