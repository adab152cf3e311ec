"""
Keyword store over Azure AI Search.

Lexical counterpart of the dense-vector drivers. Every chunk is one search
document with the fixed schema:

    {id, text, namespaceId, tenantId?, documentId, metadata, metadata_array?}

- id: chunk id passed through the identifier codec
- namespaceId, documentId, tenantId: promoted columns used for filtering
- metadata: JSON blob of the remaining metadata, for exact round trips
- metadata_array: ``{key, value}`` string pairs for per-key filtering

Search asks the service for highlights of the text field and the total
count, and pages with top/skip. Score thresholds are applied after the page
is fetched.

Upsert failure policy: per item. The service reports each document's status;
any failed document makes the call raise VectorStoreError after the batch,
while the documents that succeeded stay written.

Dependencies: azure-search-documents (async client), engine.boundary
System role: Lexical (keyword) driver
"""

import logging
from collections.abc import Sequence
from typing import Any

from azure.core.credentials import AzureKeyCredential
from azure.search.documents.aio import SearchClient

from engine.boundary.driver_cache import DriverCache, credential_fingerprint, default_driver_cache
from engine.boundary.keyword.id_codec import decode_id, encode_id
from engine.boundary.keyword.odata import build_scope_filter
from engine.boundary.vdb.metadata import (
    explode_metadata,
    restore_metadata,
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
from engine.configs import get_settings
from engine.configs.keyword_store import AzureSearchSettings
from engine.core.exceptions import ConfigurationError, VectorStoreError
from engine.models import Chunk, PaginatedResult, SearchResult

logger = logging.getLogger(__name__)

SEARCH_SELECT = ["id", "namespaceId", "documentId", "tenantId", "metadata", "text"]


def get_keyword_search_client(
    settings: AzureSearchSettings | None = None,
    cache: DriverCache | None = None,
) -> SearchClient:
    """
    Return the process-wide Azure AI Search client.

    Args:
        settings: Azure Search settings, defaults to the loaded settings
        cache: Handle cache, defaults to the process-wide cache

    Returns:
        SearchClient: Async client bound to the chunk index

    Raises:
        ConfigurationError: If url, index or key is not configured
    """
    settings = settings or get_settings().azure_search
    if not settings.is_configured:
        missing = [
            f"AZURE_SEARCH_{name.upper()}"
            for name in ("url", "index", "key")
            if not getattr(settings, name)
        ]
        raise ConfigurationError(
            "Azure Search environment variables (AZURE_SEARCH_URL, AZURE_SEARCH_INDEX, "
            "AZURE_SEARCH_KEY) are required for keyword search but are not configured.",
            provider="azure_search",
            missing=missing,
        )

    cache = cache or default_driver_cache
    key = ("azure_search", credential_fingerprint(settings.key), settings.url, settings.index)
    return cache.get_or_create(
        key,
        lambda: SearchClient(
            endpoint=settings.url,
            index_name=settings.index,
            credential=AzureKeyCredential(settings.key),
        ),
    )


class KeywordStore(VectorStore):
    """Store Contract over the Azure AI Search chunk index."""

    def __init__(
        self,
        namespace_id: str,
        tenant_id: str | None = None,
        client: SearchClient | None = None,
    ) -> None:
        """
        Initialize the keyword store.

        Args:
            namespace_id: Platform namespace id
            tenant_id: Optional tenant scope
            client: Search client, defaults to the process-wide client
        """
        super().__init__(namespace_id, tenant_id)
        self._client = client

    @property
    def client(self) -> SearchClient:
        # Resolved on first use so a store can be built without Azure configured
        if self._client is None:
            self._client = get_keyword_search_client()
        return self._client

    def _to_document(self, chunk: Chunk) -> dict[str, Any]:
        metadata = strip_promoted_keys(chunk.metadata)
        return {
            "id": encode_id(chunk.id),
            "text": chunk.text,
            "namespaceId": self._namespace_id,
            "tenantId": self._tenant_id,
            "documentId": chunk.document_id,
            "metadata": serialize_metadata(metadata),
            "metadata_array": explode_metadata(metadata),
        }

    async def upsert(self, chunks: Sequence[Chunk]) -> None:
        documents = [self._to_document(chunk) for chunk in chunks]
        if not documents:
            return

        results = await self.client.upload_documents(documents=documents)
        failed = [result for result in results if not result.succeeded]
        if failed:
            for result in failed:
                logger.warning(
                    f"{__name__}:upsert - Document {result.key} rejected "
                    f"({result.status_code}): {result.error_message}"
                )
            raise VectorStoreError(
                f"{len(failed)} of {len(documents)} chunks failed to index",
                operation="upsert",
                details={"failed_ids": [decode_id(result.key) for result in failed]},
            )
        logger.debug(f"{__name__}:upsert - Indexed {len(documents)} chunks for namespace {self._namespace_id}")

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
        filter: str | None = None,
    ) -> PaginatedResult[SearchResult]:
        validate_paging(page, limit)
        if not isinstance(query, str):
            raise VectorStoreError("Keyword search requires a text query", operation="search")

        response = await self.client.search(
            search_text=query,
            filter=build_scope_filter(self._namespace_id, self._tenant_id, document_id, filter),
            top=limit,
            skip=(page - 1) * limit,
            search_fields=["text"],
            highlight_fields="text",
            include_total_count=True,
            select=SEARCH_SELECT,
        )
        total = await response.get_count()

        results = []
        async for document in response:
            chunk_id = decode_id(document["id"])
            highlights = document.get("@search.highlights") or {}
            results.append(
                to_search_result(
                    chunk_id=chunk_id,
                    score=document.get("@search.score", 0.0),
                    text=document.get("text") or "",
                    metadata=restore_metadata(document.get("metadata"), document),
                    highlights=highlights.get("text", []),
                    include_metadata=include_metadata,
                    include_relationships=include_relationships,
                )
            )

        logger.debug(f"{__name__}:search - {len(results)} of {total} matches on page {page}")
        return build_paginated(
            apply_min_score(results, min_score),
            page=page,
            per_page=limit,
            total=total,
            has_next_page=len(results) == limit,
        )

    async def list_ids(
        self,
        *,
        document_id: str | None = None,
        page: int = 1,
        limit: int = 1000,
    ) -> PaginatedResult[str]:
        validate_paging(page, limit)

        response = await self.client.search(
            search_text=None,
            filter=build_scope_filter(self._namespace_id, self._tenant_id, document_id),
            top=limit,
            skip=(page - 1) * limit,
            select=["id"],
            include_total_count=True,
        )
        total = await response.get_count()

        ids = [decode_id(document["id"]) async for document in response]
        return build_paginated(
            ids,
            page=page,
            per_page=limit,
            total=total,
            has_next_page=len(ids) == limit,
        )

    async def delete_by_ids(self, ids: Sequence[str]) -> None:
        if not ids:
            return
        await self.client.delete_documents(documents=[{"id": encode_id(chunk_id)} for chunk_id in ids])
        logger.debug(f"{__name__}:delete_by_ids - Deleted {len(ids)} chunks for namespace {self._namespace_id}")
