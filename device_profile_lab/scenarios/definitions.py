"""
Prompt and message pools for device profiling.

Each probe rotates through a small fixed pool of representative inputs:
1. Short prompts (< 20 tokens)
2. Medium prompts (50-100 tokens)
3. Conversation follow-ups on a 4-turn history
4. Journal-style messages for embedding and storage
5. Search queries at two scales
"""

import random
from dataclasses import dataclass, field
from typing import Optional

from ..engines.base import ConversationTurn


@dataclass(frozen=True)
class PromptPool:
    """A named pool of inputs for one probe."""

    name: str
    description: str
    category: str
    prompts: tuple[str, ...]
    max_tokens: int = 256
    metadata: dict = field(default_factory=dict)

    def pick(self, rng: Optional[random.Random] = None) -> str:
        """Uniform random selection."""
        return (rng or random).choice(self.prompts)

    def at(self, index: int) -> str:
        """Modulo-indexed selection."""
        return self.prompts[index % len(self.prompts)]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "prompts": list(self.prompts),
            "max_tokens": self.max_tokens,
            "metadata": self.metadata,
        }


# ============================================================================
# LLM prompts
# ============================================================================

SHORT_PROMPTS = PromptPool(
    name="short_prompts",
    description="Trivial prompts under 20 tokens",
    category="llm",
    prompts=(
        "Hello, how are you?",
        "What is 2 + 2?",
        "Name a color.",
        "Say yes or no.",
        "Count to 3.",
    ),
    max_tokens=64,
)

MEDIUM_PROMPTS = PromptPool(
    name="medium_prompts",
    description="One-paragraph prompts of 50-100 tokens",
    category="llm",
    prompts=(
        "Explain in one paragraph why exercise is important for mental health.",
        "Describe the basic process of photosynthesis in simple terms.",
        "What are three key factors to consider when making an important decision?",
        "Summarize the benefits of learning a second language.",
        "Explain what emotional intelligence means and why it matters.",
    ),
    max_tokens=256,
)

CONVERSATION_HISTORY = (
    ConversationTurn("user", "Hi, I'm interested in learning about psychology."),
    ConversationTurn(
        "assistant",
        "Psychology is fascinating! It's the scientific study of mind and behavior. "
        "Are you interested in any particular area - like cognitive psychology, "
        "social psychology, or clinical psychology?",
    ),
    ConversationTurn("user", "I think cognitive psychology sounds interesting. What does it cover?"),
    ConversationTurn(
        "assistant",
        "Cognitive psychology focuses on mental processes like perception, memory, "
        "thinking, and problem-solving. It explores how we acquire, process, and store "
        "information. Key topics include attention, language, decision-making, and learning.",
    ),
)

FOLLOW_UP_QUESTIONS = PromptPool(
    name="follow_up_questions",
    description="Follow-up questions asked on top of a 4-turn conversation",
    category="llm",
    prompts=(
        "Can you give me an example of a cognitive bias?",
        "How does memory actually work?",
        "What's the difference between short-term and long-term memory?",
        "How do emotions affect our decision-making?",
        "What is confirmation bias?",
    ),
    max_tokens=256,
    metadata={"history_turns": len(CONVERSATION_HISTORY)},
)


# ============================================================================
# Vector inputs
# ============================================================================

TEST_MESSAGES = PromptPool(
    name="test_messages",
    description="Journal-style messages used for embedding and storage",
    category="vector",
    prompts=(
        "I've been thinking about how technology shapes our daily lives and interactions.",
        "My approach to problem-solving usually involves breaking things down into smaller steps.",
        "I find that creative activities help me relax and process my thoughts better.",
        "Learning new skills is something I genuinely enjoy, even when it's challenging.",
        "I believe that understanding different perspectives makes us better communicators.",
        "Time management has always been something I work on improving.",
        "I tend to reflect on my experiences to understand patterns in my behavior.",
        "Building meaningful relationships requires both patience and genuine interest.",
        "I'm curious about how artificial intelligence will change education.",
        "My values guide most of my important decisions in life.",
    ),
)

SEARCH_QUERIES = PromptPool(
    name="search_queries",
    description="Queries for top-10 similarity search over a small store",
    category="vector",
    prompts=(
        "technology and daily life",
        "problem solving approaches",
        "creative activities and relaxation",
        "learning new skills",
        "understanding perspectives",
    ),
)

SCALE_SEARCH_QUERIES = PromptPool(
    name="scale_search_queries",
    description="Queries for top-10 similarity search over a seeded store",
    category="vector",
    prompts=(
        "technology impacts",
        "learning challenges",
        "emotional processing",
        "decision making",
        "relationship building",
    ),
)


def generate_test_messages(count: int) -> list[str]:
    """Cycle through the test message templates to produce count messages."""
    return [TEST_MESSAGES.at(i) for i in range(count)]

