"""
Unit tests for configuration loading and validation.

Tests environment parsing, strict YAML validation and error handling.
"""

import os
import tempfile
from decimal import Decimal

import pytest
import yaml

from ai_devops_generator.config.loader import (
    AppMode,
    GeneratorConfig,
    ProviderKind,
    load_config,
    with_overrides,
)


class TestGeneratorConfig:
    """Test config defaults and derived properties."""

    def test_defaults(self):
        config = GeneratorConfig()
        assert config.provider == ProviderKind.BEDROCK
        assert config.model_id == "anthropic.claude-3-haiku-20240307-v1:0"
        assert config.aws_region == "us-east-1"
        assert config.timeout_seconds == 30.0
        assert config.max_tokens == 1000
        assert config.temperature == 0.3
        assert config.port == 3001
        assert config.mode == AppMode.DEVELOPMENT

    def test_has_credentials_bedrock(self):
        assert not GeneratorConfig().has_credentials
        assert GeneratorConfig(aws_access_key_id="AKIA123").has_credentials

    def test_has_credentials_openai(self):
        assert not GeneratorConfig(provider=ProviderKind.OPENAI, aws_access_key_id="AKIA123").has_credentials
        assert GeneratorConfig(provider=ProviderKind.OPENAI, openai_api_key="sk-test").has_credentials

    def test_pricing_from_table(self):
        config = GeneratorConfig(provider=ProviderKind.OPENAI)
        assert config.model_id == "gpt-4o-mini"
        assert config.pricing.input_cost_per_million == Decimal("0.15")
        assert config.pricing.output_cost_per_million == Decimal("0.60")

    def test_pricing_defaults_for_unknown_model(self):
        config = GeneratorConfig(provider=ProviderKind.OPENAI, model="llama-3-70b")
        assert config.pricing.input_cost_per_million == Decimal("0.25")
        assert config.pricing.output_cost_per_million == Decimal("1.25")

    def test_explicit_rates_win(self):
        config = GeneratorConfig(input_rate_per_million=Decimal("1"), output_rate_per_million=Decimal("2"))
        assert config.pricing.input_cost_per_million == Decimal("1")
        assert config.pricing.output_cost_per_million == Decimal("2")

    def test_cors_origins(self):
        assert GeneratorConfig().cors_origins == ["http://localhost:3000", "http://127.0.0.1:3000"]
        production = GeneratorConfig(mode=AppMode.PRODUCTION, frontend_url="https://devops.example.com")
        assert production.cors_origins == ["https://devops.example.com"]
        assert GeneratorConfig(mode=AppMode.PRODUCTION).cors_origins == []

    @pytest.mark.parametrize("field, value, message", [
        ("timeout_seconds", 0, "timeout_seconds must be > 0"),
        ("max_tokens", -1, "max_tokens must be between 1 and 4096"),
        ("max_tokens", 200000, "max_tokens must be between 1 and 4096"),
        ("temperature", 1.5, "temperature must be between 0 and 1"),
        ("port", 70000, "port must be between 1 and 65535"),
        ("input_rate_per_million", Decimal("-1"), "input_rate_per_million must be >= 0"),
    ])
    def test_invalid_values_rejected(self, field, value, message):
        with pytest.raises(ValueError, match=message):
            GeneratorConfig(**{field: value})

    def test_with_overrides_ignores_none(self):
        config = GeneratorConfig()
        assert with_overrides(config, port=None) is config
        assert with_overrides(config, port=8080).port == 8080


class TestEnvironmentLoading:
    """Test configuration from environment variables."""

    def test_empty_environment_gives_defaults(self):
        assert load_config(environ={}) == GeneratorConfig()

    def test_environment_values(self):
        config = load_config(environ={
            "GENERATOR_PROVIDER": "OpenAI",
            "OPENAI_API_KEY": "sk-test",
            "OPENAI_BASE_URL": "https://llm.internal/v1",
            "GENERATION_TIMEOUT": "12.5",
            "PORT": "8080",
            "APP_ENV": "production",
            "FRONTEND_URL": "https://devops.example.com",
            "LOG_LEVEL": "debug",
        })
        assert config.provider == ProviderKind.OPENAI
        assert config.openai_api_key == "sk-test"
        assert config.openai_base_url == "https://llm.internal/v1"
        assert config.timeout_seconds == 12.5
        assert config.port == 8080
        assert config.mode == AppMode.PRODUCTION
        assert config.log_level == "DEBUG"

    def test_aws_credentials(self):
        config = load_config(environ={
            "AWS_ACCESS_KEY_ID": "AKIA123",
            "AWS_SECRET_ACCESS_KEY": "secret",
            "AWS_REGION": "eu-west-1",
        })
        assert config.has_credentials
        assert config.aws_region == "eu-west-1"

    def test_empty_values_ignored(self):
        config = load_config(environ={"AWS_ACCESS_KEY_ID": "", "PORT": ""})
        assert not config.has_credentials
        assert config.port == 3001

    def test_invalid_provider(self):
        with pytest.raises(ValueError, match="GENERATOR_PROVIDER"):
            load_config(environ={"GENERATOR_PROVIDER": "watsonx"})

    def test_invalid_number(self):
        with pytest.raises(ValueError, match="Invalid value for PORT"):
            load_config(environ={"PORT": "eighty"})

    def test_invalid_rate(self):
        with pytest.raises(ValueError, match="Invalid value for INPUT_RATE_PER_MILLION"):
            load_config(environ={"INPUT_RATE_PER_MILLION": "cheap"})

    def test_output_ceiling_enforced(self):
        with pytest.raises(ValueError, match="max_tokens must be between 1 and 4096"):
            load_config(environ={"GENERATION_MAX_TOKENS": "200000"})


class TestYamlLoading:
    """Test strict YAML configuration loading."""

    def setup_method(self):
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        """Clean up test environment."""
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write_config(self, config_data, filename: str = "config.yaml") -> str:
        """Write configuration data to temporary file."""
        config_path = os.path.join(self.temp_dir, filename)
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config_data, f)
        return config_path

    def test_valid_config_loads_correctly(self):
        config_path = self._write_config({
            "generation": {
                "provider": "openai",
                "model": "gpt-4o-mini",
                "base_url": "https://llm.internal/v1",
                "timeout_seconds": 45,
                "max_tokens": 800,
            },
            "pricing": {
                "input_rate_per_million": 0.2,
                "output_rate_per_million": 0.8,
            },
            "server": {
                "mode": "production",
                "frontend_url": "https://devops.example.com",
                "port": 9000,
            },
        })
        config = load_config(config_path, environ={})

        assert config.provider == ProviderKind.OPENAI
        assert config.openai_base_url == "https://llm.internal/v1"
        assert config.timeout_seconds == 45.0
        assert config.max_tokens == 800
        assert config.input_rate_per_million == Decimal("0.2")
        assert config.output_rate_per_million == Decimal("0.8")
        assert config.mode == AppMode.PRODUCTION
        assert config.port == 9000

    def test_environment_overrides_file(self):
        config_path = self._write_config({"server": {"port": 9000}, "generation": {"region": "eu-west-1"}})
        config = load_config(config_path, environ={"PORT": "7000"})
        assert config.port == 7000
        assert config.aws_region == "eu-west-1"

    def test_path_from_environment(self):
        config_path = self._write_config({"generation": {"max_tokens": 900}})
        config = load_config(environ={"GENERATOR_CONFIG": config_path})
        assert config.max_tokens == 900

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError, match="Generator config file not found"):
            load_config(os.path.join(self.temp_dir, "missing.yaml"), environ={})

    def test_empty_file(self):
        config_path = os.path.join(self.temp_dir, "empty.yaml")
        with open(config_path, 'w', encoding='utf-8') as f:
            f.write("")
        with pytest.raises(ValueError, match="Configuration file is empty"):
            load_config(config_path, environ={})

    def test_invalid_yaml(self):
        config_path = os.path.join(self.temp_dir, "bad.yaml")
        with open(config_path, 'w', encoding='utf-8') as f:
            f.write("generation: [unclosed")
        with pytest.raises(yaml.YAMLError, match="Invalid YAML"):
            load_config(config_path, environ={})

    def test_unknown_section_rejected(self):
        config_path = self._write_config({"credentials": {"aws_access_key_id": "AKIA"}})
        with pytest.raises(ValueError, match="Unknown configuration keys"):
            load_config(config_path, environ={})

    def test_unknown_key_rejected(self):
        config_path = self._write_config({"generation": {"api_key": "sk-test"}})
        with pytest.raises(ValueError, match="Unknown keys in generation"):
            load_config(config_path, environ={})

    def test_section_must_be_mapping(self):
        config_path = self._write_config({"server": ["port", 9000]})
        with pytest.raises(ValueError, match="'server' must be a dictionary"):
            load_config(config_path, environ={})

    def test_invalid_value_type(self):
        config_path = self._write_config({"server": {"port": "lots"}})
        with pytest.raises(ValueError, match="Invalid value for 'server.port'"):
            load_config(config_path, environ={})

    def test_validation_applies_to_file_values(self):
        config_path = self._write_config({"generation": {"timeout_seconds": 0}})
        with pytest.raises(ValueError, match="timeout_seconds must be > 0"):
            load_config(config_path, environ={})
