"""
SDK for the AI DevOps Generator.

Provides programmatic access to configuration generation.
"""

from .api_client import ApiClientError, ConfigGeneratorAPI
from .generation_client import SYSTEM_PROMPT, GenerationClient
from .providers import (
    BedrockProvider,
    Completion,
    GenerationProvider,
    OpenAIProvider,
    create_provider,
)

__all__ = [
    "ApiClientError",
    "BedrockProvider",
    "Completion",
    "ConfigGeneratorAPI",
    "GenerationClient",
    "GenerationProvider",
    "OpenAIProvider",
    "SYSTEM_PROMPT",
    "create_provider",
]
