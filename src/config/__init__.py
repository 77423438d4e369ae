"""Configuration module for the tax computation engine."""

from .settings import EngineSettings, configure_logging, get_settings

__all__ = [
    "EngineSettings",
    "configure_logging",
    "get_settings",
]
