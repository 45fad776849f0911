"""
Input pools for device profiling probes.
"""

from .definitions import (
    PromptPool,
    SHORT_PROMPTS,
    MEDIUM_PROMPTS,
    FOLLOW_UP_QUESTIONS,
    CONVERSATION_HISTORY,
    TEST_MESSAGES,
    SEARCH_QUERIES,
    SCALE_SEARCH_QUERIES,
    generate_test_messages,
)

__all__ = [
    "PromptPool",
    "SHORT_PROMPTS",
    "MEDIUM_PROMPTS",
    "FOLLOW_UP_QUESTIONS",
    "CONVERSATION_HISTORY",
    "TEST_MESSAGES",
    "SEARCH_QUERIES",
    "SCALE_SEARCH_QUERIES",
    "generate_test_messages",
]
