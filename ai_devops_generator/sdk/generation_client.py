"""
Generation client.

Sends a prompt to the configured provider under a hard timeout and
returns the flat text completion. Failures are surfaced, never retried.
"""

import asyncio
import logging
from typing import Optional

from ..config.loader import GeneratorConfig
from ..core.models import GenerationResult
from ..core.pricing import UsageStats, usage_stats
from ..core.token_counter import estimate_usage
from ..exceptions import (
    GenerationError,
    GenerationTimeout,
    InvalidInput,
    UnknownGenerationError,
)
from .providers import Completion, GenerationProvider, create_provider

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert DevOps engineer. Generate clean, well-commented, "
    "production-ready configurations and scripts following industry best practices."
)


class GenerationClient:
    """Provider-agnostic client for configuration generation.

    Holds no per-request state, so one instance can serve concurrent
    requests.
    """

    def __init__(self, config: GeneratorConfig, provider: Optional[GenerationProvider] = None):
        """Initialize the client.

        Args:
            config: Runtime configuration (timeout, provider selection)
            provider: Explicit provider; built from config when omitted

        Raises:
            MissingCredentials: If no credential is configured for the provider
        """
        self.config = config
        self.timeout = config.timeout_seconds
        self.provider = provider or create_provider(config)

    async def generate(self, prompt: str, use_case: str) -> Completion:
        """Generate a configuration for a prompt.

        Args:
            prompt: Fully composed prompt text
            use_case: Use case key, for logging

        Returns:
            Completion with the text and any provider-reported usage

        Raises:
            InvalidInput: If prompt is blank
            GenerationError: Classified provider failure or timeout
        """
        if not prompt or not prompt.strip():
            raise InvalidInput(detail="prompt is empty")

        try:
            completion = await asyncio.wait_for(
                self.provider.complete(SYSTEM_PROMPT, prompt),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as exc:
            raise GenerationTimeout(
                detail=f"No response for {use_case} within {self.timeout:g}s"
            ) from exc
        except GenerationError:
            raise
        except Exception as exc:
            raise UnknownGenerationError(detail=f"{type(exc).__name__}: {exc}") from exc

        logger.debug("Provider returned %d characters for %s", len(completion.text), use_case)
        return completion

    async def generate_result(self, prompt: str, use_case: str) -> GenerationResult:
        """Generate and attach usage statistics.

        Provider-reported token counts are preferred; the character heuristic
        is the fallback. A failed estimate never blocks returning the text.
        """
        completion = await self.generate(prompt, use_case)
        return GenerationResult(
            text=completion.text,
            usage=self._usage_for(prompt, completion),
        )

    def _usage_for(self, prompt: str, completion: Completion) -> Optional[UsageStats]:
        try:
            token_usage = completion.usage or estimate_usage(prompt, completion.text)
            return usage_stats(token_usage, self.config.pricing)
        except (ArithmeticError, TypeError, ValueError) as exc:
            logger.warning("Usage estimation failed: %s", exc)
            return None
