"""
Upstream text-generation providers.

Each provider implements one capability, complete(system_prompt, user_prompt),
and is responsible for unwrapping its own response envelope and translating
its SDK errors into the generation error taxonomy.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import anthropic
import openai
from anthropic import AsyncAnthropicBedrock
from openai import AsyncOpenAI

from ..config.loader import GeneratorConfig, ProviderKind
from ..core.token_counter import TokenUsage
from ..exceptions import (
    GenerationError,
    GenerationTimeout,
    MissingCredentials,
    ProviderContractViolation,
    RateLimited,
    Unauthorized,
    UnknownGenerationError,
    UpstreamServerError,
)

logger = logging.getLogger(__name__)

THROTTLING_ERROR_NAMES = {"ThrottlingException", "TooManyRequestsException"}
ACCESS_DENIED_ERROR_NAMES = {"AccessDeniedException", "UnrecognizedClientException"}


@dataclass(frozen=True)
class Completion:
    """Flat text completion plus provider-reported usage when available."""
    text: str
    usage: Optional[TokenUsage] = None


class GenerationProvider(ABC):
    """A text-generation backend."""

    name = "provider"

    def __init__(self, config: GeneratorConfig):
        if not config.has_credentials:
            raise MissingCredentials(
                detail=f"No credentials configured for provider '{config.provider.value}'"
            )
        self.config = config
        self.model = config.model_id

    @abstractmethod
    async def complete(self, system_prompt: str, user_prompt: str) -> Completion:
        """Send a single-turn chat request and return the text completion.

        Raises:
            GenerationError: Any provider failure, already classified
        """


def error_for_status(status_code: Optional[int], detail: str, error_name: str = "") -> GenerationError:
    """Classify an upstream failure by HTTP status and error name."""
    if status_code == 429 or error_name in THROTTLING_ERROR_NAMES:
        return RateLimited(detail=detail)
    if status_code in (401, 403) or error_name in ACCESS_DENIED_ERROR_NAMES:
        return Unauthorized(detail=detail)
    if status_code is not None and status_code >= 500:
        return UpstreamServerError(detail=detail)
    return UnknownGenerationError(detail=detail)


def _describe(exc: Exception) -> str:
    return f"{type(exc).__name__}: {exc}"


def _error_name(exc: Any) -> str:
    """Provider-specific error code carried in an SDK error body, if any."""
    body = getattr(exc, "body", None)
    if isinstance(body, dict):
        for key in ("__type", "type", "code"):
            value = body.get(key)
            if isinstance(value, str):
                return value.split("#")[-1].split(":")[-1]
    return ""


def _translate_sdk_error(exc: Exception, sdk) -> GenerationError:
    """Map an openai/anthropic SDK exception to the taxonomy.

    Both SDKs share the same exception hierarchy shape, so one mapping
    serves both.
    """
    detail = _describe(exc)
    if isinstance(exc, sdk.APITimeoutError):
        return GenerationTimeout(detail=detail)
    if isinstance(exc, sdk.APIStatusError):
        return error_for_status(exc.status_code, detail, _error_name(exc))
    if isinstance(exc, sdk.APIConnectionError):
        return UpstreamServerError(detail=detail)
    return UnknownGenerationError(detail=detail)


class BedrockProvider(GenerationProvider):
    """Anthropic Claude models hosted on AWS Bedrock."""

    name = "bedrock"

    def __init__(self, config: GeneratorConfig):
        super().__init__(config)
        self.client = AsyncAnthropicBedrock(
            aws_access_key=config.aws_access_key_id,
            aws_secret_key=config.aws_secret_access_key,
            aws_session_token=config.aws_session_token,
            aws_region=config.aws_region,
            timeout=config.timeout_seconds,
            max_retries=0,
        )

    async def complete(self, system_prompt: str, user_prompt: str) -> Completion:
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.config.max_tokens,
                system=system_prompt,
                messages=[
                    {
                        "role": "user",
                        "content": [{"type": "text", "text": user_prompt}],
                    }
                ],
                temperature=self.config.temperature,
            )
        except anthropic.AnthropicError as exc:
            raise _translate_sdk_error(exc, anthropic) from exc

        # Envelope: {"content": [{"type": "text", "text": ...}], "usage": {...}}
        try:
            text = response.content[0].text
        except (AttributeError, IndexError, TypeError) as exc:
            raise ProviderContractViolation(
                detail=f"Bedrock response has no content[0].text: {exc}"
            ) from exc
        if not isinstance(text, str):
            raise ProviderContractViolation(detail="Bedrock content[0].text is not a string")

        usage = None
        reported = getattr(response, "usage", None)
        if reported is not None:
            usage = TokenUsage(
                prompt_tokens=reported.input_tokens,
                completion_tokens=reported.output_tokens
            )
        return Completion(text=text, usage=usage)


class OpenAIProvider(GenerationProvider):
    """OpenAI or any OpenAI-compatible chat completion API."""

    name = "openai"

    def __init__(self, config: GeneratorConfig):
        super().__init__(config)
        self.client = AsyncOpenAI(
            api_key=config.openai_api_key,
            base_url=config.openai_base_url,
            timeout=config.timeout_seconds,
            max_retries=0,
        )

    async def complete(self, system_prompt: str, user_prompt: str) -> Completion:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
        except openai.OpenAIError as exc:
            raise _translate_sdk_error(exc, openai) from exc

        # Envelope: {"choices": [{"message": {"content": ...}}], "usage": {...}}
        try:
            text = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as exc:
            raise ProviderContractViolation(
                detail=f"OpenAI response has no choices[0].message.content: {exc}"
            ) from exc
        if not isinstance(text, str):
            raise ProviderContractViolation(detail="OpenAI choices[0].message.content is not a string")

        usage = None
        reported = getattr(response, "usage", None)
        if reported is not None:
            usage = TokenUsage(
                prompt_tokens=reported.prompt_tokens,
                completion_tokens=reported.completion_tokens
            )
        return Completion(text=text, usage=usage)


PROVIDERS: Dict[ProviderKind, Callable[[GeneratorConfig], GenerationProvider]] = {
    ProviderKind.BEDROCK: BedrockProvider,
    ProviderKind.OPENAI: OpenAIProvider,
}


def create_provider(config: GeneratorConfig) -> GenerationProvider:
    """Instantiate the provider selected by configuration.

    Raises:
        MissingCredentials: If the selected provider has no credential
    """
    provider = PROVIDERS[config.provider](config)
    logger.info("Using %s provider with model %s", provider.name, provider.model)
    return provider
