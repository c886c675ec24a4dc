"""Shared test fixtures."""

import pytest

from ai_devops_generator.config.loader import GeneratorConfig, ProviderKind
from ai_devops_generator.sdk.providers import Completion, GenerationProvider


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def openai_config():
    return GeneratorConfig(provider=ProviderKind.OPENAI, openai_api_key="sk-test")


@pytest.fixture
def bedrock_config():
    return GeneratorConfig(
        aws_access_key_id="AKIATEST",
        aws_secret_access_key="secret",
        aws_region="us-east-1"
    )


class StubProvider(GenerationProvider):
    """Provider double that records calls and returns or raises a fixed outcome."""

    name = "stub"

    def __init__(self, config, text="FROM python:3.12-slim\n", usage=None, error=None, delay=0.0):
        super().__init__(config)
        self.text = text
        self.usage = usage
        self.error = error
        self.delay = delay
        self.calls = []

    async def complete(self, system_prompt, user_prompt):
        self.calls.append((system_prompt, user_prompt))
        if self.delay:
            import asyncio
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return Completion(text=self.text, usage=self.usage)


@pytest.fixture
def stub_provider_factory(openai_config):
    def factory(**kwargs):
        return StubProvider(openai_config, **kwargs)
    return factory
