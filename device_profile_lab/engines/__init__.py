"""
Engines under measurement: capability contracts and reference adapters.
"""

from .base import (
    ConversationTurn,
    GenerationOptions,
    InferenceEngine,
    SearchHit,
    VectorBackend,
    VectorStats,
)
from .anthropic_engine import AnthropicInferenceEngine, MODEL_ALIASES, resolve_model_id
from .local_vector import HashingEmbedder, InMemoryVectorBackend

__all__ = [
    "ConversationTurn",
    "GenerationOptions",
    "InferenceEngine",
    "SearchHit",
    "VectorBackend",
    "VectorStats",
    "AnthropicInferenceEngine",
    "MODEL_ALIASES",
    "resolve_model_id",
    "HashingEmbedder",
    "InMemoryVectorBackend",
]
