"""
turbopuffer vector store driver.

Each platform namespace (and tenant) maps to one turbopuffer namespace;
queries also filter on the promoted identity attributes. turbopuffer has no
result offset and reports no total, so search fetches the top
``page * limit`` rows and keeps the last slice, and id listings walk an
``id > last_id`` cursor ordered by id.

A turbopuffer namespace only exists after its first write. Reads against a
namespace that does not exist yet return an empty page.

Upsert failure policy: whole call (one write request).

Dependencies: turbopuffer (async client), engine.boundary.vdb
System role: Dense-vector driver (turbopuffer)
"""

import logging
from collections.abc import Sequence
from typing import Any

from turbopuffer import AsyncTurbopuffer, NotFoundError

from engine.boundary.driver_cache import DriverCache, credential_fingerprint, default_driver_cache
from engine.boundary.vdb.filters import build_turbopuffer_filter, partition_name
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

STORED_ATTRIBUTES = ["text", "namespaceId", "tenantId", "documentId", "metadata"]


def get_turbopuffer_client(
    api_key: str | None,
    region: str | None,
    cache: DriverCache | None = None,
) -> AsyncTurbopuffer:
    """
    Return the cached async client for an api key and region.

    Raises:
        ConfigurationError: If api_key or region is missing
    """
    missing = [name for name, value in (("apiKey", api_key), ("region", region)) if not value]
    if missing:
        raise ConfigurationError(
            "turbopuffer requires an API key and a region",
            provider="turbopuffer",
            missing=missing,
        )

    cache = cache or default_driver_cache
    key = ("turbopuffer", credential_fingerprint(api_key), region)
    return cache.get_or_create(key, lambda: AsyncTurbopuffer(api_key=api_key, region=region))


def _row_to_dict(row: Any) -> dict[str, Any]:
    if isinstance(row, dict):
        return row
    return row.to_dict()


class TurbopufferVectorStore(VectorStore):
    """Store Contract over turbopuffer namespaces."""

    def __init__(
        self,
        *,
        api_key: str | None,
        region: str | None,
        namespace_id: str,
        tenant_id: str | None = None,
        distance_metric: str = "cosine_distance",
        cache: DriverCache | None = None,
        client: Any = None,
    ) -> None:
        """
        Initialize the driver.

        Args:
            api_key: turbopuffer API key
            region: turbopuffer region (e.g. aws-us-east-1)
            namespace_id: Platform namespace id
            tenant_id: Optional tenant scope
            distance_metric: cosine_distance or euclidean_squared
            cache: Handle cache, defaults to the process-wide cache
            client: Pre-built async client (skips credential resolution)
        """
        super().__init__(namespace_id, tenant_id)
        client = client if client is not None else get_turbopuffer_client(api_key, region, cache)
        self._distance_metric = distance_metric
        self._partition = partition_name(namespace_id, self._tenant_id)
        self._namespace = client.namespace(self._partition)

    def _score(self, distance: float) -> float:
        # Higher is better: cosine similarity, or negated squared distance
        if self._distance_metric == "cosine_distance":
            return 1.0 - distance
        return -distance

    def _to_row(self, chunk: Chunk) -> dict[str, Any]:
        if chunk.embedding is None:
            raise VectorStoreError(
                f"Chunk {chunk.id} has no embedding",
                operation="upsert",
                details={"chunk_id": chunk.id},
            )

        metadata = strip_promoted_keys(chunk.metadata)
        row: dict[str, Any] = {
            **searchable_attributes(metadata),
            "id": chunk.id,
            "vector": chunk.embedding,
            "text": chunk.text,
            "namespaceId": self._namespace_id,
            "documentId": chunk.document_id,
            "metadata": serialize_metadata(metadata),
        }
        if self._tenant_id:
            row["tenantId"] = self._tenant_id
        return row

    async def upsert(self, chunks: Sequence[Chunk]) -> None:
        rows = [self._to_row(chunk) for chunk in chunks]
        if not rows:
            return
        await self._namespace.write(upsert_rows=rows, distance_metric=self._distance_metric)
        logger.debug(f"{__name__}:upsert - Upserted {len(rows)} rows into {self._partition}")

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
        validate_paging(page, limit)
        if isinstance(query, str):
            raise VectorStoreError(
                "Dense-vector search requires an embedding, got text",
                operation="search",
            )

        try:
            response = await self._namespace.query(
                rank_by=("vector", "ANN", [float(value) for value in query]),
                top_k=page * limit,
                filters=build_turbopuffer_filter(self._namespace_id, self._tenant_id, document_id, filter),
                include_attributes=STORED_ATTRIBUTES,
            )
        except NotFoundError:
            logger.debug(f"{__name__}:search - Namespace {self._partition} has no data yet")
            return build_paginated([], page=page, per_page=limit, has_next_page=False)

        rows = [_row_to_dict(row) for row in (response.rows or [])][(page - 1) * limit :]
        results = [
            to_search_result(
                chunk_id=str(row["id"]),
                score=self._score(row.get("$dist", 0.0)),
                text=row.get("text") or "",
                metadata=restore_metadata(row.get("metadata"), row),
                include_metadata=include_metadata,
                include_relationships=include_relationships,
            )
            for row in rows
        ]

        return build_paginated(
            apply_min_score(results, min_score),
            page=page,
            per_page=limit,
            has_next_page=len(rows) == limit,
        )

    async def _list_page(self, filters: tuple, after: str | None, top_k: int) -> list[str]:
        if after is not None:
            filters = ("And", [filters, ("id", "Gt", after)])
        response = await self._namespace.query(
            rank_by=("id", "asc"),
            top_k=top_k,
            filters=filters,
        )
        return [str(_row_to_dict(row)["id"]) for row in (response.rows or [])]

    async def list_ids(
        self,
        *,
        document_id: str | None = None,
        page: int = 1,
        limit: int = 1000,
    ) -> PaginatedResult[str]:
        validate_paging(page, limit)
        filters = build_turbopuffer_filter(self._namespace_id, self._tenant_id, document_id)

        try:
            last_id = None
            for _ in range(page - 1):
                skipped = await self._list_page(filters, last_id, limit)
                if len(skipped) < limit:
                    return build_paginated([], page=page, per_page=limit, has_next_page=False)
                last_id = skipped[-1]

            # One extra row tells whether another page exists
            ids = await self._list_page(filters, last_id, limit + 1)
        except NotFoundError:
            logger.debug(f"{__name__}:list_ids - Namespace {self._partition} has no data yet")
            return build_paginated([], page=page, per_page=limit, has_next_page=False)

        return build_paginated(ids[:limit], page=page, per_page=limit, has_next_page=len(ids) > limit)

    async def delete_by_ids(self, ids: Sequence[str]) -> None:
        if not ids:
            return
        # Rows outside this namespace and tenant never match, whatever the partition holds
        scope = build_turbopuffer_filter(self._namespace_id, self._tenant_id, extra=("id", "In", list(ids)))
        try:
            await self._namespace.write(delete_by_filter=scope)
        except NotFoundError:
            logger.debug(f"{__name__}:delete_by_ids - Namespace {self._partition} has no data yet")
            return
        logger.debug(f"{__name__}:delete_by_ids - Deleted {len(ids)} ids from {self._partition}")
