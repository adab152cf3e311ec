"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator for the engine
"""

from functools import lru_cache

from pydantic import Field

from engine.configs.base import BaseSettings
from engine.configs.keyword_store import AzureSearchSettings
from engine.configs.vector_store import PineconeSettings, TurbopufferSettings


class Settings(BaseSettings):
    """Unified settings aggregating all config modules."""

    log_level: str = Field(
        default="INFO",
        description="Root logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    pinecone: PineconeSettings = Field(default_factory=PineconeSettings)
    turbopuffer: TurbopufferSettings = Field(default_factory=TurbopufferSettings)
    azure_search: AzureSearchSettings = Field(default_factory=AzureSearchSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get settings singleton.

    Environment variables are loaded once per process. Tests that change the
    environment call ``get_settings.cache_clear()``.

    Returns:
        Settings: Engine settings instance

    Usage:
        from engine.configs import get_settings
        settings = get_settings()
    """
    return Settings()
