"""
In-process vector backend.

A small numpy vector store with deterministic hashed bag-of-words embeddings.
It satisfies the VectorBackend contract without downloading a model, which
makes it the default backend for the CLI and a realistic stand-in for a
device-local embedding store.
"""

import hashlib
import re
from typing import Optional

import numpy as np

from .base import SearchHit, VectorStats

_TOKEN_RE = re.compile(r"[a-z0-9']+")


class HashingEmbedder:
    """Feature-hashing text embedder (signed buckets, L2-normalised)."""

    def __init__(self, dimensions: int = 384):
        if dimensions <= 0:
            raise ValueError("dimensions must be positive")
        self.dimensions = dimensions

    def embed(self, text: str) -> np.ndarray:
        vector = np.zeros(self.dimensions, dtype=np.float32)
        for token in _TOKEN_RE.findall(text.lower()):
            digest = hashlib.blake2b(token.encode(), digest_size=8).digest()
            bucket = int.from_bytes(digest[:4], "little") % self.dimensions
            sign = 1.0 if digest[4] & 1 else -1.0
            vector[bucket] += sign

        norm = np.linalg.norm(vector)
        if norm > 0:
            vector /= norm
        return vector


class InMemoryVectorBackend:
    """VectorBackend storing embeddings in a growing numpy matrix."""

    def __init__(self, embedder: Optional[HashingEmbedder] = None):
        self._embedder = embedder or HashingEmbedder()
        self._initialized = False
        self._ids: list[str] = []
        self._texts: list[str] = []
        self._metadata: list[dict] = []
        self._matrix = np.empty((0, self._embedder.dimensions), dtype=np.float32)

    def is_available(self) -> bool:
        return self._initialized

    async def init(self) -> None:
        self._initialized = True

    async def embed(self, text: str) -> np.ndarray:
        self._require_init()
        return self._embedder.embed(text)

    async def store(self, item_id: str, text: str, metadata: dict) -> None:
        vector = await self.embed(text)
        self._ids.append(item_id)
        self._texts.append(text)
        self._metadata.append(dict(metadata))
        self._matrix = np.vstack([self._matrix, vector[np.newaxis, :]])

    async def search(self, query: str, k: int) -> list[SearchHit]:
        query_vector = await self.embed(query)
        if not self._ids or k <= 0:
            return []

        # rows are unit length, so the dot product is the cosine similarity
        scores = self._matrix @ query_vector
        top = np.argsort(-scores)[:k]
        return [
            SearchHit(
                id=self._ids[i],
                score=float(scores[i]),
                text=self._texts[i],
                metadata=self._metadata[i],
            )
            for i in top
        ]

    async def stats(self) -> VectorStats:
        return VectorStats(item_count=len(self._ids))

    def _require_init(self) -> None:
        if not self._initialized:
            raise RuntimeError("Vector backend not initialized")
