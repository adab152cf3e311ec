"""
Namespace configuration models.

Read-only view of the namespace record persisted by the platform database.
Parsed from camelCase JSON (``vectorStoreConfig``, ``apiKey``, ``indexHost``).

Dependencies: pydantic
System role: Store Factory input
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class VectorStoreProvider(str, Enum):
    """Closed set of provider tags a namespace may be configured with."""

    MANAGED_PINECONE = "MANAGED_PINECONE"
    MANAGED_PINECONE_OLD = "MANAGED_PINECONE_OLD"
    PINECONE = "PINECONE"
    MANAGED_TURBOPUFFER = "MANAGED_TURBOPUFFER"
    TURBOPUFFER = "TURBOPUFFER"


class VectorStoreConfig(BaseModel):
    """Provider tag plus caller-supplied credentials for bring-your-own tiers."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    provider: VectorStoreProvider
    api_key: str | None = Field(default=None, repr=False)
    index_host: str | None = None
    region: str | None = None


class Namespace(BaseModel):
    """Isolated logical collection of chunks."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    vector_store_config: VectorStoreConfig | None = Field(
        default=None,
        description="None means the default managed provider",
    )
