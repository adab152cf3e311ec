"""
Chunk domain models.

Represents indexed content chunks and the search results projected from them.

Dependencies: pydantic
System role: Store Contract data structures
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Chunk(BaseModel):
    """
    Atomic unit of indexed content.

    The id is stable across re-indexing of the same logical chunk, so writes
    are upserts. Canonical ids follow ``"{documentId}#{index}"``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(description="Caller-assigned identifier, unique within namespace and tenant")
    document_id: str = Field(description="Source document the chunk belongs to")
    text: str = Field(description="Raw chunk content")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Open key/value mapping of JSON-compatible values",
    )
    embedding: list[float] | None = Field(
        default=None,
        description="Dense vector, required by dense-vector drivers",
    )


class SearchResult(BaseModel):
    """Single matched chunk, shaped the same way for every backend."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(description="Canonical chunk identifier")
    score: float = Field(description="Backend-defined relevance score, higher is better")
    text: str = Field(description="Chunk content")
    metadata: dict[str, Any] | None = Field(
        default=None,
        description="Logical chunk metadata, present when requested",
    )
    relationships: dict[str, Any] | None = Field(
        default=None,
        description="Links to parent/sibling content, present when requested",
    )
    highlights: list[str] = Field(
        default_factory=list,
        description="Matched-term excerpts, empty when the backend cannot highlight",
    )
