"""
Inference engine backed by the Anthropic SDK.

Implements the InferenceEngine contract so the LLM probes can profile a hosted
model end to end (network included). Authentication uses the SDK defaults,
i.e. ANTHROPIC_API_KEY from the environment or a .env file.

Usage:
    engine = AnthropicInferenceEngine()
    await engine.initialize("haiku")
    text = await engine.generate("Name a color.")
    await engine.unload()
"""

from typing import Optional, Sequence

import anthropic

from .base import ConversationTurn, GenerationOptions

MODEL_ALIASES = {
    "sonnet": "claude-sonnet-4-20250514",
    "opus": "claude-opus-4-5-20251101",
    "haiku": "claude-3-5-haiku-20241022",
}


def resolve_model_id(model_id: str) -> str:
    """Convert a short model alias to a full model identifier."""
    return MODEL_ALIASES.get(model_id, model_id)


class AnthropicInferenceEngine:
    """InferenceEngine over anthropic.AsyncAnthropic."""

    def __init__(self, api_key: Optional[str] = None, max_retries: int = 0):
        self._api_key = api_key
        self._max_retries = max_retries
        self._client: Optional[anthropic.AsyncAnthropic] = None
        self.model_id: Optional[str] = None

    def is_ready(self) -> bool:
        return self._client is not None and self.model_id is not None

    async def initialize(self, model_id: str) -> None:
        """Create the client and verify the model exists."""
        client = anthropic.AsyncAnthropic(api_key=self._api_key, max_retries=self._max_retries)
        full_model_id = resolve_model_id(model_id)
        try:
            await client.models.retrieve(full_model_id)
        except anthropic.APIError:
            await client.close()
            raise
        self._client = client
        self.model_id = full_model_id

    async def unload(self) -> None:
        if self._client is not None:
            await self._client.close()
        self._client = None
        self.model_id = None

    async def generate(
        self,
        prompt: str,
        options: Optional[GenerationOptions] = None,
        history: Optional[Sequence[ConversationTurn]] = None,
    ) -> str:
        if not self.is_ready():
            raise RuntimeError("Model not loaded")

        options = options or GenerationOptions()
        messages = [{"role": turn.role, "content": turn.content} for turn in history or ()]
        messages.append({"role": "user", "content": prompt})

        kwargs = {
            "model": self.model_id,
            "max_tokens": options.max_tokens,
            "messages": messages,
        }
        if options.temperature is not None:
            kwargs["temperature"] = options.temperature

        response = await self._client.messages.create(**kwargs)
        return "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
