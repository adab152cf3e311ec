"""
Vector store configuration settings.

Platform-owned credentials for the managed dense-vector tiers.
Every field is optional at load time; the store factory checks the
credentials a provider actually needs when a namespace resolves to it.

Dependencies: pydantic, pydantic_settings
System role: Managed-tier credential configuration
"""

from pydantic import Field

from engine.configs.base import BaseSettings


class PineconeSettings(BaseSettings):
    """Managed Pinecone credentials (legacy and current tiers)."""

    default_pinecone_api_key: str | None = Field(
        default=None,
        description="API key of the legacy managed Pinecone index",
    )
    default_pinecone_host: str | None = Field(
        default=None,
        description="Index host URL of the legacy managed Pinecone index",
    )
    secondary_pinecone_api_key: str | None = Field(
        default=None,
        description="API key of the current managed Pinecone index",
    )
    secondary_pinecone_host: str | None = Field(
        default=None,
        description="Index host URL of the current managed Pinecone index",
    )


class TurbopufferSettings(BaseSettings):
    """Managed turbopuffer credentials and namespace defaults."""

    default_turbopuffer_api_key: str | None = Field(
        default=None,
        description="API key used by the managed turbopuffer tier",
    )
    turbopuffer_managed_region: str = Field(
        default="aws-us-east-1",
        description="Region of the managed turbopuffer tier",
    )
    turbopuffer_distance_metric: str = Field(
        default="cosine_distance",
        description="Distance metric for new namespaces (cosine_distance or euclidean_squared)",
    )
