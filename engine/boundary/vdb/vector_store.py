"""
Store Contract shared by every backend driver.

Every driver, dense or lexical, is bound to one namespace (and optionally one
tenant) at construction and exposes the same four async operations.
Results are always scoped to that namespace and tenant, whatever extra filter
the caller supplies.

Dependencies: engine.models
System role: Polymorphic interface between callers and search backends
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from engine.models import Chunk, PaginatedResult, SearchResult


class VectorStore(ABC):
    """Namespace-scoped store interface implemented by each backend driver."""

    def __init__(self, namespace_id: str, tenant_id: str | None = None) -> None:
        self._namespace_id = namespace_id
        self._tenant_id = tenant_id or None

    @property
    def namespace_id(self) -> str:
        return self._namespace_id

    @property
    def tenant_id(self) -> str | None:
        return self._tenant_id

    @abstractmethod
    async def upsert(self, chunks: Sequence[Chunk]) -> None:
        """
        Write chunks, fully replacing any existing chunk with the same id.

        Args:
            chunks: Chunks to write
        """

    @abstractmethod
    async def search(
        self,
        query: str | Sequence[float],
        *,
        document_id: str | None = None,
        page: int = 1,
        limit: int = 10,
        include_metadata: bool = False,
        include_relationships: bool = False,
        min_score: float | None = None,
        filter: Any = None,
    ) -> PaginatedResult[SearchResult]:
        """
        Search the namespace.

        Args:
            query: Raw text for lexical drivers, an embedding for dense drivers
            document_id: Restrict matches to one document
            page: 1-based page number
            limit: Page size
            include_metadata: Attach logical metadata to each result
            include_relationships: Attach node relationships to each result
            min_score: Drop results scoring below this, after the page is fetched
            filter: Backend-native extra predicate, AND-ed with the scope clauses

        Returns:
            PaginatedResult[SearchResult]: One page of shaped results
        """

    @abstractmethod
    async def list_ids(
        self,
        *,
        document_id: str | None = None,
        page: int = 1,
        limit: int = 1000,
    ) -> PaginatedResult[str]:
        """
        Enumerate canonical chunk ids in scope without fetching content.

        Args:
            document_id: Restrict to one document
            page: 1-based page number
            limit: Page size

        Returns:
            PaginatedResult[str]: One page of ids
        """

    @abstractmethod
    async def delete_by_ids(self, ids: Sequence[str]) -> None:
        """
        Delete chunks by canonical id. Unknown ids are ignored.

        Args:
            ids: Canonical chunk ids
        """
