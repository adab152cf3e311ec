"""
Keyword store configuration settings.

Azure AI Search endpoint, index and admin key for the lexical backend.

Dependencies: pydantic, pydantic_settings
System role: Lexical backend configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from engine.configs.base import BaseSettings


class AzureSearchSettings(BaseSettings):
    """Azure AI Search configuration for keyword search."""

    model_config = SettingsConfigDict(env_prefix="AZURE_SEARCH_")

    url: str | None = Field(default=None, description="Search service endpoint URL")
    index: str | None = Field(default=None, description="Name of the chunk index")
    key: str | None = Field(default=None, description="Admin API key for the search service")

    @property
    def is_configured(self) -> bool:
        """Whether endpoint, index and key are all present."""
        return bool(self.url and self.index and self.key)
