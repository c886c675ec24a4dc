"""
Logging configuration.

Console logging for the server and CLI, configured once at startup.
"""

import logging
from logging.config import dictConfig

from ai_devops_generator.config.loader import GeneratorConfig, ProviderKind

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def get_logging_config(level: str = "INFO") -> dict:
    """Logging configuration dict for dictConfig."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": LOG_FORMAT,
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            }
        },
        "loggers": {
            "ai_devops_generator": {
                "level": level,
                "handlers": ["console"],
                "propagate": False,
            },
            "uvicorn.error": {
                "level": level,
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def setup_logging(level: str = "INFO") -> None:
    dictConfig(get_logging_config(level))


def log_startup_info(config: GeneratorConfig) -> None:
    logger = logging.getLogger("ai_devops_generator.server")
    logger.info("Server running at http://0.0.0.0:%d", config.port)
    logger.info("Provider: %s (model %s)", config.provider.value, config.model_id)
    if config.provider == ProviderKind.BEDROCK:
        logger.info("AWS Region: %s", config.aws_region)
    logger.info("Environment: %s", config.mode.value)
    if config.is_production and not config.frontend_url:
        logger.warning("FRONTEND_URL is not set; cross-origin requests will be refused")
