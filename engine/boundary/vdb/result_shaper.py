"""
Result shaping shared by all drivers.

Turns raw backend matches into SearchResult objects and wraps pages into the
uniform PaginatedResult shape. Score thresholds are applied after the page is
fetched, so a page can hold fewer than ``limit`` items.

Dependencies: llama_index.core, engine.models
System role: Result Shaper
"""

import logging
import math
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from llama_index.core.schema import BaseNode, MetadataMode, TextNode
from llama_index.core.vector_stores.utils import metadata_dict_to_node

from engine.models import PaginatedResult, SearchResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


def metadata_to_node(metadata: Mapping[str, Any], text: str | None = None) -> BaseNode | None:
    """
    Reconstruct a llama-index node from stored metadata.

    Returns None when the metadata does not describe a recognized node shape.
    """
    if "_node_content" not in metadata:
        return None
    try:
        return metadata_dict_to_node(dict(metadata), text=text)
    except (KeyError, TypeError, ValueError) as e:
        logger.debug(f"{__name__}:metadata_to_node - Unrecognized node content: {e}")
        return None


def _dump_relationships(node: BaseNode) -> dict[str, Any]:
    relationships: dict[str, Any] = {}
    for relation, info in node.relationships.items():
        key = relation.value if hasattr(relation, "value") else str(relation)
        if isinstance(info, list):
            relationships[key] = [item.model_dump(mode="json") for item in info]
        else:
            relationships[key] = info.model_dump(mode="json")
    return relationships


def to_search_result(
    *,
    chunk_id: str,
    score: float,
    text: str,
    metadata: dict[str, Any],
    highlights: Sequence[str] | None = None,
    include_metadata: bool = False,
    include_relationships: bool = False,
) -> SearchResult:
    """
    Shape one backend match.

    Args:
        chunk_id: Canonical (decoded) chunk id
        score: Backend score, higher is better
        text: Stored chunk text
        metadata: Logical metadata with identity fields reinjected
        highlights: Matched-term excerpts, if the backend returns any
        include_metadata: Attach node metadata
        include_relationships: Attach node relationships

    Returns:
        SearchResult: Backend-independent result
    """
    node = metadata_to_node(metadata, text) or TextNode(id_=chunk_id, text=text, metadata=metadata)
    return SearchResult(
        id=chunk_id,
        score=float(score),
        text=node.get_content(metadata_mode=MetadataMode.NONE),
        metadata=node.metadata if include_metadata else None,
        relationships=_dump_relationships(node) if include_relationships else None,
        highlights=list(highlights or []),
    )


def apply_min_score(results: list[SearchResult], min_score: float | None) -> list[SearchResult]:
    """Drop results scoring below min_score; no-op when min_score is None."""
    if min_score is None:
        return results
    return [result for result in results if result.score >= min_score]


def build_paginated(
    items: list[T],
    *,
    page: int,
    per_page: int,
    total: int | None = None,
    has_next_page: bool | None = None,
) -> PaginatedResult[T]:
    """
    Wrap one page of items.

    With a reported total the page count and next-page flag derive from it.
    Without one, total_pages is 1 and the caller supplies has_next_page
    (a full page was fetched, or the backend cursor is still open).

    Args:
        items: Items on this page, after any score filtering
        page: 1-based page number
        per_page: Requested page size
        total: Backend-reported total, None when the backend cannot count
        has_next_page: Driver-derived flag, used only when total is None

    Returns:
        PaginatedResult: Uniform page shape
    """
    if total is not None:
        total_pages = max(1, math.ceil(total / per_page))
        next_page = page < total_pages
    else:
        total_pages = 1
        next_page = bool(has_next_page)

    return PaginatedResult(
        total=total,
        total_pages=total_pages,
        per_page=per_page,
        current_page=page,
        has_next_page=next_page,
        has_previous_page=page > 1,
        items=items,
    )


def validate_paging(page: int, limit: int) -> None:
    """Reject non-positive page numbers and page sizes before any request."""
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")
