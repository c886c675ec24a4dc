"""
Token counting and usage tracking.

Holds token counts and the character-based approximation used when a
provider does not report its own usage.
"""

import math
from dataclasses import dataclass

# Rough average for English text and code; not a real tokenizer
CHARS_PER_TOKEN = 4


@dataclass(frozen=True)
class TokenUsage:
    """Token usage data for cost calculation.

    Counts are either provider-reported or estimated with estimate_tokens().
    """
    prompt_tokens: int
    completion_tokens: int

    @property
    def total_tokens(self) -> int:
        """Total tokens used (prompt + completion)."""
        return self.prompt_tokens + self.completion_tokens


def estimate_tokens(text: str) -> int:
    """Approximate token count of a text as ceil(len / 4).

    This is an estimate only and must never be treated as billed usage.
    """
    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def estimate_usage(prompt_text: str, response_text: str) -> TokenUsage:
    """Estimate token usage for a prompt/response pair."""
    return TokenUsage(
        prompt_tokens=estimate_tokens(prompt_text),
        completion_tokens=estimate_tokens(response_text),
    )
