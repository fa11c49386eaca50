"""Configuration module: exports the Settings class."""

from knowledge_base.config.settings import Settings

__all__ = ["Settings"]
