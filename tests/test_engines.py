"""Tests for the reference engine and vector backend."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import numpy as np
import pytest

from device_profile_lab.engines.anthropic_engine import (
    MODEL_ALIASES,
    AnthropicInferenceEngine,
    resolve_model_id,
)
from device_profile_lab.engines.base import ConversationTurn, GenerationOptions
from device_profile_lab.engines.local_vector import HashingEmbedder, InMemoryVectorBackend


class TestHashingEmbedder:
    def test_unit_norm_and_deterministic(self):
        embedder = HashingEmbedder(dimensions=64)
        first = embedder.embed("What is the weather like today?")
        second = embedder.embed("What is the weather like today?")

        assert first.shape == (64,)
        assert np.linalg.norm(first) == pytest.approx(1.0, abs=1e-6)
        assert np.array_equal(first, second)

    def test_empty_text_is_zero_vector(self):
        assert not HashingEmbedder(dimensions=8).embed("...").any()

    def test_rejects_bad_dimensions(self):
        with pytest.raises(ValueError):
            HashingEmbedder(dimensions=0)


class TestInMemoryVectorBackend:
    def test_requires_init(self):
        backend = InMemoryVectorBackend()
        assert not backend.is_available()
        with pytest.raises(RuntimeError):
            asyncio.run(backend.embed("hello"))

    def test_search_ranks_closest_first(self):
        async def scenario():
            backend = InMemoryVectorBackend()
            await backend.init()
            await backend.store("a", "remind me about the dentist appointment", {"role": "user"})
            await backend.store("b", "plan a hiking trip to the mountains", {"role": "user"})
            await backend.store("c", "what is the capital of france", {"role": "user"})
            hits = await backend.search("dentist appointment reminder", 2)
            return backend, hits

        backend, hits = asyncio.run(scenario())

        assert backend.is_available()
        assert len(hits) == 2
        assert hits[0].id == "a"
        assert hits[0].score >= hits[1].score
        assert hits[0].metadata == {"role": "user"}

    def test_stats_and_empty_search(self):
        async def scenario():
            backend = InMemoryVectorBackend()
            await backend.init()
            empty = await backend.search("anything", 10)
            await backend.store("a", "one", {})
            return empty, await backend.stats(), await backend.search("one", 10)

        empty, stats, hits = asyncio.run(scenario())

        assert empty == []
        assert stats.item_count == 1
        assert len(hits) == 1


def fake_client():
    client = MagicMock()
    client.models.retrieve = AsyncMock()
    client.close = AsyncMock()
    client.messages.create = AsyncMock(
        return_value=SimpleNamespace(
            content=[
                SimpleNamespace(type="text", text="Blue"),
                SimpleNamespace(type="tool_use", text="ignored"),
            ]
        )
    )
    return client


class TestAnthropicInferenceEngine:
    def test_resolve_aliases(self):
        assert resolve_model_id("haiku") == MODEL_ALIASES["haiku"]
        assert resolve_model_id("custom-model") == "custom-model"

    def test_generate_before_initialize(self):
        engine = AnthropicInferenceEngine(api_key="test")
        assert not engine.is_ready()
        with pytest.raises(RuntimeError, match="Model not loaded"):
            asyncio.run(engine.generate("hi"))

    def test_lifecycle(self):
        client = fake_client()
        engine = AnthropicInferenceEngine(api_key="test")
        history = [ConversationTurn("user", "Hi"), ConversationTurn("assistant", "Hello")]

        async def scenario():
            await engine.initialize("haiku")
            ready = engine.is_ready()
            text = await engine.generate(
                "Name a color.",
                GenerationOptions(max_tokens=16, temperature=0.0),
                history,
            )
            await engine.unload()
            return ready, text

        with patch("anthropic.AsyncAnthropic", return_value=client):
            ready, text = asyncio.run(scenario())

        assert ready
        assert text == "Blue"
        assert not engine.is_ready()
        client.models.retrieve.assert_awaited_once_with(MODEL_ALIASES["haiku"])
        client.close.assert_awaited_once()
        kwargs = client.messages.create.await_args.kwargs
        assert kwargs["model"] == MODEL_ALIASES["haiku"]
        assert kwargs["max_tokens"] == 16
        assert kwargs["temperature"] == 0.0
        assert kwargs["messages"][-1] == {"role": "user", "content": "Name a color."}
        assert len(kwargs["messages"]) == 3
