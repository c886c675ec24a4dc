"""
Pricing calculations and usage estimation.

Turns token counts into approximate monetary cost. All figures are
advisory estimates, never billed truth.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
from decimal import Decimal, ROUND_HALF_UP

from .token_counter import TokenUsage, estimate_usage

PER_MILLION = Decimal("1000000")
COST_QUANTUM = Decimal("0.000001")


@dataclass(frozen=True)
class ModelPricing:
    """Per-token pricing for a specific model."""
    input_cost_per_million: Decimal  # USD per 1M input tokens
    output_cost_per_million: Decimal  # USD per 1M output tokens


@dataclass(frozen=True)
class UsageStats:
    """Approximate token counts and cost of one generation call."""
    input_tokens: int
    output_tokens: int
    total_tokens: int
    estimated_cost_usd: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inputTokens": self.input_tokens,
            "outputTokens": self.output_tokens,
            "totalTokens": self.total_tokens,
            "estimatedCostUsd": self.estimated_cost_usd,
        }


@dataclass(frozen=True)
class PricingTable:
    """Fixed pricing table for supported models."""
    prices: Dict[str, ModelPricing]

    def find_pricing(self, model: str) -> Optional[ModelPricing]:
        return self.prices.get(model)


PRICING_TABLE = PricingTable({
    "anthropic.claude-3-haiku-20240307-v1:0": ModelPricing(
        input_cost_per_million=Decimal("0.25"),
        output_cost_per_million=Decimal("1.25")
    ),
    "gpt-4o-mini": ModelPricing(
        input_cost_per_million=Decimal("0.15"),
        output_cost_per_million=Decimal("0.60")
    ),
})


def calculate_cost(usage: TokenUsage, pricing: ModelPricing) -> Decimal:
    """Calculate cost of token usage, quantized to 6 decimal places.

    Args:
        usage: Token usage data
        pricing: Per-million token rates

    Returns:
        Cost in USD
    """
    input_cost = Decimal(usage.prompt_tokens) * pricing.input_cost_per_million
    output_cost = Decimal(usage.completion_tokens) * pricing.output_cost_per_million
    total_cost = (input_cost + output_cost) / PER_MILLION
    return total_cost.quantize(COST_QUANTUM, rounding=ROUND_HALF_UP)


def usage_stats(usage: TokenUsage, pricing: ModelPricing) -> UsageStats:
    """Build UsageStats from token counts (estimated or provider-reported)."""
    cost = calculate_cost(usage, pricing)
    return UsageStats(
        input_tokens=usage.prompt_tokens,
        output_tokens=usage.completion_tokens,
        total_tokens=usage.total_tokens,
        estimated_cost_usd=f"{cost:.6f}",
    )


def estimate(
    prompt_text: str,
    response_text: str,
    input_rate_per_million,
    output_rate_per_million,
) -> UsageStats:
    """Estimate usage and cost from prompt and response lengths.

    Token counts use the ceil(len / 4) heuristic from token_counter.

    Args:
        prompt_text: Text sent to the provider
        response_text: Text returned by the provider
        input_rate_per_million: USD per 1M input tokens
        output_rate_per_million: USD per 1M output tokens

    Returns:
        UsageStats with cost rendered to 6 decimals
    """
    pricing = ModelPricing(
        input_cost_per_million=Decimal(str(input_rate_per_million)),
        output_cost_per_million=Decimal(str(output_rate_per_million)),
    )
    return usage_stats(estimate_usage(prompt_text, response_text), pricing)
