"""Engine settings using Pydantic Settings.

Centralized configuration for the computation engine. Settings only
choose where parameters come from and how the embedding application
logs; they never change tax arithmetic.

Environment variables (prefix ``TAX_ENGINE_``):
- TAX_ENGINE_TAX_PARAMETERS_DIR: directory holding tax_year_{year}.yaml files
- TAX_ENGINE_DEFAULT_TAX_YEAR: year assumed by callers that do not pass one
- TAX_ENGINE_LOG_LEVEL: level applied by configure_logging()
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EngineSettings(BaseSettings):
    """Computation engine configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TAX_ENGINE_",
        env_file=".env",
        extra="ignore",
    )

    tax_parameters_dir: Optional[Path] = Field(
        default=None,
        description="Directory with tax_year_{year}.yaml files; defaults to the bundled parameters",
    )
    default_tax_year: int = Field(default=2025, description="Tax year assumed when a caller does not specify one")
    log_level: str = Field(default="INFO", description="Logging level for configure_logging()")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level


@lru_cache
def get_settings() -> EngineSettings:
    """
    Get cached engine settings instance.

    Returns:
        EngineSettings: Cached settings loaded from environment.
    """
    return EngineSettings()


def configure_logging(settings: Optional[EngineSettings] = None) -> None:
    """Apply the configured level to the engine's loggers.

    The engine itself never installs handlers; applications call this
    once at startup if they want the level taken from settings.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level)
    for name in ("calculator", "config", "validation"):
        logging.getLogger(name).setLevel(level)
    logger.debug(f"Engine log level set to {settings.log_level}")
