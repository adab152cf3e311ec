"""
Pinecone vector store driver.

Each platform namespace (and tenant) lives in its own Pinecone namespace
partition; search additionally filters on the promoted identity metadata.
Pinecone has no result offset, so page N of a search fetches the top
``N * limit`` matches and keeps the last slice. The total match count is not
reported, so search pages set has_next_page when a full page came back.

Stored record metadata:
- text: raw chunk text
- namespaceId, documentId, tenantId: promoted identity columns
- metadata: JSON blob of the remaining chunk metadata
- scalar user metadata spread as native keys for per-key filtering

Upsert failure policy: whole call. Batches are sent in order and the first
failing batch raises; earlier batches stay written.

Document-scoped id listings match the id prefix ``"{documentId}#"`` because
the list endpoint cannot filter on metadata. Chunks whose ids do not follow
that convention are missing from their document's listing.

Deleting from a namespace that was never written is a no-op.

Dependencies: pinecone (asyncio client), engine.boundary.vdb
System role: Dense-vector driver (Pinecone)
"""

import logging
from collections.abc import AsyncIterator, Sequence
from typing import Any

from pinecone import PineconeAsyncio
from pinecone.exceptions import NotFoundException

from engine.boundary.driver_cache import DriverCache, credential_fingerprint, default_driver_cache
from engine.boundary.vdb.filters import build_pinecone_filter, partition_name
from engine.boundary.vdb.metadata import (
    restore_metadata,
    searchable_attributes,
    serialize_metadata,
    strip_promoted_keys,
)
from engine.boundary.vdb.result_shaper import (
    apply_min_score,
    build_paginated,
    to_search_result,
    validate_paging,
)
from engine.boundary.vdb.vector_store import VectorStore
from engine.core.exceptions import ConfigurationError, VectorStoreError
from engine.models import Chunk, PaginatedResult, SearchResult

logger = logging.getLogger(__name__)

UPSERT_BATCH_SIZE = 100
# Maximum page size accepted by the Pinecone list endpoint
LIST_BATCH_SIZE = 100


def get_pinecone_index(
    api_key: str | None,
    index_host: str | None,
    cache: DriverCache | None = None,
) -> Any:
    """
    Return the cached async index handle for an api key and host.

    Raises:
        ConfigurationError: If api_key or index_host is missing
    """
    missing = [name for name, value in (("apiKey", api_key), ("indexHost", index_host)) if not value]
    if missing:
        raise ConfigurationError(
            "Pinecone requires an API key and an index host",
            provider="pinecone",
            missing=missing,
        )

    cache = cache or default_driver_cache
    key = ("pinecone", credential_fingerprint(api_key), index_host)
    return cache.get_or_create(
        key,
        lambda: PineconeAsyncio(api_key=api_key).IndexAsyncio(host=index_host),
    )


def _as_vector(query: str | Sequence[float]) -> list[float]:
    if isinstance(query, str):
        raise VectorStoreError(
            "Dense-vector search requires an embedding, got text",
            operation="search",
        )
    return [float(value) for value in query]


class PineconeVectorStore(VectorStore):
    """Store Contract over one Pinecone serverless index."""

    def __init__(
        self,
        *,
        api_key: str | None,
        index_host: str | None,
        namespace_id: str,
        tenant_id: str | None = None,
        cache: DriverCache | None = None,
        index: Any = None,
    ) -> None:
        """
        Initialize the driver.

        Args:
            api_key: Pinecone API key
            index_host: Index host URL
            namespace_id: Platform namespace id
            tenant_id: Optional tenant scope
            cache: Handle cache, defaults to the process-wide cache
            index: Pre-built async index handle (skips credential resolution)
        """
        super().__init__(namespace_id, tenant_id)
        self._index = index if index is not None else get_pinecone_index(api_key, index_host, cache)
        self._partition = partition_name(namespace_id, self._tenant_id)

    def _to_record(self, chunk: Chunk) -> dict[str, Any]:
        if chunk.embedding is None:
            raise VectorStoreError(
                f"Chunk {chunk.id} has no embedding",
                operation="upsert",
                details={"chunk_id": chunk.id},
            )

        metadata = strip_promoted_keys(chunk.metadata)
        record_metadata: dict[str, Any] = {
            **searchable_attributes(metadata),
            "text": chunk.text,
            "namespaceId": self._namespace_id,
            "documentId": chunk.document_id,
            "metadata": serialize_metadata(metadata),
        }
        # Pinecone rejects null metadata values
        if self._tenant_id:
            record_metadata["tenantId"] = self._tenant_id

        return {"id": chunk.id, "values": chunk.embedding, "metadata": record_metadata}

    async def upsert(self, chunks: Sequence[Chunk]) -> None:
        # Build every record first so a bad chunk fails before any write
        records = [self._to_record(chunk) for chunk in chunks]
        for start in range(0, len(records), UPSERT_BATCH_SIZE):
            await self._index.upsert(
                vectors=records[start : start + UPSERT_BATCH_SIZE],
                namespace=self._partition,
            )
        logger.debug(f"{__name__}:upsert - Upserted {len(records)} vectors into {self._partition}")

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
        filter: dict[str, Any] | None = None,
    ) -> PaginatedResult[SearchResult]:
        validate_paging(page, limit)
        vector = _as_vector(query)

        response = await self._index.query(
            vector=vector,
            top_k=page * limit,
            namespace=self._partition,
            filter=build_pinecone_filter(self._namespace_id, self._tenant_id, document_id, filter),
            include_metadata=True,
            include_values=False,
        )

        matches = list(response.matches or [])[(page - 1) * limit :]
        results = []
        for match in matches:
            stored = match.metadata or {}
            results.append(
                to_search_result(
                    chunk_id=match.id,
                    score=match.score,
                    text=stored.get("text", ""),
                    metadata=restore_metadata(stored.get("metadata"), stored),
                    include_metadata=include_metadata,
                    include_relationships=include_relationships,
                )
            )

        logger.debug(f"{__name__}:search - {len(matches)} matches on page {page} of {self._partition}")
        return build_paginated(
            apply_min_score(results, min_score),
            page=page,
            per_page=limit,
            has_next_page=len(matches) == limit,
        )

    async def _iter_ids(self, prefix: str | None) -> AsyncIterator[str]:
        """Follow the list pagination cursor, yielding ids in backend order."""
        token = None
        while True:
            response = await self._index.list_paginated(
                prefix=prefix,
                limit=LIST_BATCH_SIZE,
                pagination_token=token,
                namespace=self._partition,
            )
            for vector in response.vectors or []:
                yield vector.id
            token = response.pagination.next if response.pagination else None
            if not token:
                return

    async def _count(self) -> int:
        stats = await self._index.describe_index_stats()
        summary = (stats.namespaces or {}).get(self._partition)
        return summary.vector_count if summary else 0

    async def list_ids(
        self,
        *,
        document_id: str | None = None,
        page: int = 1,
        limit: int = 1000,
    ) -> PaginatedResult[str]:
        validate_paging(page, limit)
        prefix = f"{document_id}#" if document_id else None
        offset = (page - 1) * limit

        ids: list[str] = []
        has_next_page = False
        position = 0
        async for chunk_id in self._iter_ids(prefix):
            if position >= offset:
                if len(ids) == limit:
                    has_next_page = True
                    break
                ids.append(chunk_id)
            position += 1

        # Index stats count the whole partition, so only unscoped listings get a total
        total = None if document_id else await self._count()
        return build_paginated(ids, page=page, per_page=limit, total=total, has_next_page=has_next_page)

    async def delete_by_ids(self, ids: Sequence[str]) -> None:
        if not ids:
            return
        try:
            for start in range(0, len(ids), UPSERT_BATCH_SIZE):
                await self._index.delete(
                    ids=list(ids[start : start + UPSERT_BATCH_SIZE]),
                    namespace=self._partition,
                )
        except NotFoundException:
            logger.debug(f"{__name__}:delete_by_ids - Namespace {self._partition} has no data yet")
            return
        logger.debug(f"{__name__}:delete_by_ids - Deleted {len(ids)} ids from {self._partition}")
