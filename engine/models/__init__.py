"""
Domain models.

Pydantic models shared by the store factory and every driver.
"""

from engine.models.chunk import Chunk, SearchResult
from engine.models.common import PaginatedResult
from engine.models.namespace import Namespace, VectorStoreConfig, VectorStoreProvider

__all__ = [
    "Chunk",
    "SearchResult",
    "PaginatedResult",
    "Namespace",
    "VectorStoreConfig",
    "VectorStoreProvider",
]
