"""
Capability contracts for the engines under measurement.

The profiler never owns these engines: it only calls the operations below,
one at a time, and treats them as shared singletons.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Sequence


@dataclass(frozen=True)
class ConversationTurn:
    """One prior message in a conversation history."""

    role: str  # "user" or "assistant"
    content: str


@dataclass(frozen=True)
class GenerationOptions:
    """Optional knobs passed through to the inference engine."""

    max_tokens: int = 256
    temperature: Optional[float] = None


@dataclass(frozen=True)
class SearchHit:
    """A single vector search result."""

    id: str
    score: float
    text: str = ""
    metadata: dict = field(default_factory=dict)


@dataclass(frozen=True)
class VectorStats:
    """Vector store statistics."""

    item_count: int


class InferenceEngine(Protocol):
    """Language-model engine contract."""

    def is_ready(self) -> bool:
        ...

    async def initialize(self, model_id: str) -> None:
        ...

    async def unload(self) -> None:
        ...

    async def generate(
        self,
        prompt: str,
        options: Optional[GenerationOptions] = None,
        history: Optional[Sequence[ConversationTurn]] = None,
    ) -> str:
        ...


class VectorBackend(Protocol):
    """Embedding and vector search contract."""

    def is_available(self) -> bool:
        ...

    async def init(self) -> None:
        ...

    async def embed(self, text: str) -> Any:
        ...

    async def store(self, item_id: str, text: str, metadata: dict) -> None:
        ...

    async def search(self, query: str, k: int) -> list[SearchHit]:
        ...

    async def stats(self) -> VectorStats:
        ...
