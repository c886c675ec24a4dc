"""
Data models for generation results.

Results are ephemeral: held in a response body or session state only.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .pricing import UsageStats


@dataclass(frozen=True)
class GenerationResult:
    """Generated text plus advisory usage statistics."""
    text: str
    usage: Optional[UsageStats] = None

    def to_dict(self) -> Dict[str, Any]:
        """Response body shape of the generate endpoint."""
        body: Dict[str, Any] = {"config": self.text}
        if self.usage is not None:
            body["usage"] = self.usage.to_dict()
        return body

    @classmethod
    def from_dict(cls, body: Dict[str, Any]) -> "GenerationResult":
        """Parse a generate endpoint response body.

        Raises:
            ValueError: If the body has no string "config" field
        """
        text = body.get("config")
        if not isinstance(text, str):
            raise ValueError("response body missing 'config'")

        usage = None
        raw_usage = body.get("usage")
        if isinstance(raw_usage, dict):
            usage = UsageStats(
                input_tokens=int(raw_usage["inputTokens"]),
                output_tokens=int(raw_usage["outputTokens"]),
                total_tokens=int(raw_usage["totalTokens"]),
                estimated_cost_usd=str(raw_usage["estimatedCostUsd"]),
            )
        return cls(text=text, usage=usage)
