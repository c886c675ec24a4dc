"""
Configuration management and loading.

Handles application settings from environment variables and an optional
YAML file. Credentials are only ever read from the environment.
"""

import os
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

from ai_devops_generator.core.pricing import PRICING_TABLE, ModelPricing


class ProviderKind(Enum):
    """Supported upstream text-generation providers."""
    BEDROCK = "bedrock"
    OPENAI = "openai"


class AppMode(Enum):
    """Process mode; production restricts CORS and serves the built UI."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"


DEFAULT_MODELS = {
    ProviderKind.BEDROCK: "anthropic.claude-3-haiku-20240307-v1:0",
    ProviderKind.OPENAI: "gpt-4o-mini",
}

# Claude 3 Haiku list prices, used when the model is not in the pricing table
DEFAULT_INPUT_RATE = Decimal("0.25")
DEFAULT_OUTPUT_RATE = Decimal("1.25")

DEV_ORIGINS = ("http://localhost:3000", "http://127.0.0.1:3000")

# Hard ceiling on generated output; one config file never needs more
MAX_OUTPUT_TOKENS = 4096


@dataclass(frozen=True)
class GeneratorConfig:
    """Complete runtime configuration."""
    provider: ProviderKind = ProviderKind.BEDROCK
    model: Optional[str] = None
    aws_region: str = "us-east-1"
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_session_token: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    timeout_seconds: float = 30.0
    max_tokens: int = 1000
    temperature: float = 0.3
    input_rate_per_million: Optional[Decimal] = None
    output_rate_per_million: Optional[Decimal] = None
    mode: AppMode = AppMode.DEVELOPMENT
    frontend_url: Optional[str] = None
    port: int = 3001
    static_dir: Optional[str] = None
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate numeric settings."""
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")
        if not 0 < self.max_tokens <= MAX_OUTPUT_TOKENS:
            raise ValueError(f"max_tokens must be between 1 and {MAX_OUTPUT_TOKENS}")
        if not 0 <= self.temperature <= 1:
            raise ValueError("temperature must be between 0 and 1")
        if not 0 < self.port < 65536:
            raise ValueError("port must be between 1 and 65535")
        for name in ("input_rate_per_million", "output_rate_per_million"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must be >= 0")

    @property
    def model_id(self) -> str:
        return self.model or DEFAULT_MODELS[self.provider]

    @property
    def has_credentials(self) -> bool:
        """Whether the selected provider has a credential configured."""
        if self.provider == ProviderKind.BEDROCK:
            return bool(self.aws_access_key_id)
        return bool(self.openai_api_key)

    @property
    def pricing(self) -> ModelPricing:
        """Rates for usage estimation: explicit settings, then table, then defaults."""
        known = PRICING_TABLE.find_pricing(self.model_id)
        input_rate = self.input_rate_per_million
        output_rate = self.output_rate_per_million
        if input_rate is None:
            input_rate = known.input_cost_per_million if known else DEFAULT_INPUT_RATE
        if output_rate is None:
            output_rate = known.output_cost_per_million if known else DEFAULT_OUTPUT_RATE
        return ModelPricing(
            input_cost_per_million=input_rate,
            output_cost_per_million=output_rate
        )

    @property
    def is_production(self) -> bool:
        return self.mode == AppMode.PRODUCTION

    @property
    def cors_origins(self):
        if self.is_production:
            return [self.frontend_url] if self.frontend_url else []
        return list(DEV_ORIGINS)


# Environment variable -> (field, converter)
ENV_FIELDS = {
    "GENERATOR_PROVIDER": ("provider", lambda v: _parse_enum(ProviderKind, v, "GENERATOR_PROVIDER")),
    "GENERATOR_MODEL": ("model", str),
    "AWS_REGION": ("aws_region", str),
    "AWS_ACCESS_KEY_ID": ("aws_access_key_id", str),
    "AWS_SECRET_ACCESS_KEY": ("aws_secret_access_key", str),
    "AWS_SESSION_TOKEN": ("aws_session_token", str),
    "OPENAI_API_KEY": ("openai_api_key", str),
    "OPENAI_BASE_URL": ("openai_base_url", str),
    "GENERATION_TIMEOUT": ("timeout_seconds", float),
    "GENERATION_MAX_TOKENS": ("max_tokens", int),
    "INPUT_RATE_PER_MILLION": ("input_rate_per_million", Decimal),
    "OUTPUT_RATE_PER_MILLION": ("output_rate_per_million", Decimal),
    "APP_ENV": ("mode", lambda v: _parse_enum(AppMode, v, "APP_ENV")),
    "FRONTEND_URL": ("frontend_url", str),
    "PORT": ("port", int),
    "STATIC_DIR": ("static_dir", str),
    "LOG_LEVEL": ("log_level", lambda v: v.upper()),
}

# YAML section -> allowed keys -> converter
YAML_SCHEMA = {
    "generation": {
        "provider": lambda v: _parse_enum(ProviderKind, v, "generation.provider"),
        "model": str,
        "region": str,
        "base_url": str,
        "timeout_seconds": float,
        "max_tokens": int,
        "temperature": float,
    },
    "pricing": {
        "input_rate_per_million": lambda v: Decimal(str(v)),
        "output_rate_per_million": lambda v: Decimal(str(v)),
    },
    "server": {
        "mode": lambda v: _parse_enum(AppMode, v, "server.mode"),
        "frontend_url": str,
        "port": int,
        "static_dir": str,
        "log_level": lambda v: str(v).upper(),
    },
}

# YAML keys whose field name differs
YAML_FIELD_NAMES = {
    "region": "aws_region",
    "base_url": "openai_base_url",
}


def load_config(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> GeneratorConfig:
    """Load and validate configuration.

    Values from the YAML file (if any) are applied first, then environment
    variables override them. When ``environ`` is not given, a local ``.env``
    file is loaded into the process environment before reading it.

    Args:
        path: Optional path to a YAML configuration file; defaults to the
            ``GENERATOR_CONFIG`` environment variable
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Validated GeneratorConfig

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the YAML is invalid
        ValueError: If any setting is invalid
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    values: Dict[str, Any] = {}
    path = path or environ.get("GENERATOR_CONFIG")
    if path:
        values.update(_load_yaml(path))

    for variable, (field_name, convert) in ENV_FIELDS.items():
        raw = environ.get(variable)
        if raw is None or raw == "":
            continue
        try:
            values[field_name] = convert(raw)
        except (ValueError, ArithmeticError) as e:
            raise ValueError(f"Invalid value for {variable}: {raw!r}") from e

    return GeneratorConfig(**values)


def with_overrides(config: GeneratorConfig, **overrides: Any) -> GeneratorConfig:
    """Copy of a config with non-None overrides applied."""
    changes = {key: value for key, value in overrides.items() if value is not None}
    return replace(config, **changes) if changes else config


def _load_yaml(path: str) -> Dict[str, Any]:
    """Read a YAML config file into GeneratorConfig field values.

    Strict validation: unknown sections and keys are rejected.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Generator config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if not raw_config:
        raise ValueError("Configuration file is empty")
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration file must contain a mapping")

    unknown_sections = set(raw_config.keys()) - set(YAML_SCHEMA)
    if unknown_sections:
        raise ValueError(f"Unknown configuration keys: {unknown_sections}")

    values: Dict[str, Any] = {}
    for section, schema in YAML_SCHEMA.items():
        data = raw_config.get(section)
        if data is None:
            continue
        if not isinstance(data, dict):
            raise ValueError(f"'{section}' must be a dictionary")

        unknown_keys = set(data.keys()) - set(schema)
        if unknown_keys:
            raise ValueError(f"Unknown keys in {section}: {unknown_keys}")

        for key, raw in data.items():
            if isinstance(raw, (dict, list)):
                raise ValueError(f"'{section}.{key}' must be a scalar value")
            try:
                values[YAML_FIELD_NAMES.get(key, key)] = schema[key](raw)
            except (ValueError, ArithmeticError, TypeError) as e:
                raise ValueError(f"Invalid value for '{section}.{key}': {raw!r}") from e

    return values


def _parse_enum(enum_cls, raw: Any, path: str):
    if not isinstance(raw, str):
        raise ValueError(f"'{path}' must be a string")
    try:
        return enum_cls(raw.strip().lower())
    except ValueError:
        valid = [member.value for member in enum_cls]
        raise ValueError(f"'{path}' must be one of: {valid}")
