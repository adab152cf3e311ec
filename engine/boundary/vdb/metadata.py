"""
Metadata reconciliation between logical chunk metadata and backend storage.

Three identity fields are promoted to dedicated backend columns. They are
stripped from the stored JSON blob on write and reinjected from the columns on
read. Everything else round-trips through the blob exactly; a parallel
searchable projection supports per-key filtering in the backend.

Dependencies: json (stdlib), engine.core.exceptions
System role: Metadata Reconciler used on every driver read/write path
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from engine.core.exceptions import VectorStoreError

logger = logging.getLogger(__name__)

PROMOTED_METADATA_KEYS = ("namespaceId", "documentId", "tenantId")

# Node cache fields written by llama-index; redundant with the blob
NODE_CONTENT_KEYS = ("_node_content", "_node_type")

# Column names a spread metadata key must never overwrite
RESERVED_ATTRIBUTE_KEYS = frozenset({"id", "text", "metadata", "metadata_array", "vector", "values"})


def strip_promoted_keys(metadata: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a copy of metadata without the promoted identity fields."""
    if not metadata:
        return {}
    return {key: value for key, value in metadata.items() if key not in PROMOTED_METADATA_KEYS}


def serialize_metadata(metadata: Mapping[str, Any]) -> str:
    """
    Serialize stripped metadata into the stored JSON blob.

    Raises:
        VectorStoreError: If a value is not JSON-compatible
    """
    try:
        return json.dumps(dict(metadata), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise VectorStoreError(
            f"Chunk metadata is not JSON-serializable: {e}",
            operation="upsert",
        ) from e


def explode_metadata(metadata: Mapping[str, Any]) -> list[dict[str, str]]:
    """
    Project metadata into ``{key, value}`` string pairs for per-key filtering.

    Non-string values are JSON-encoded. Node cache fields are left out.
    """
    return [
        {"key": key, "value": value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)}
        for key, value in metadata.items()
        if key not in NODE_CONTENT_KEYS
    ]


def searchable_attributes(metadata: Mapping[str, Any]) -> dict[str, Any]:
    """
    Select metadata values a dense backend can store as native attributes.

    Keeps scalars and lists of strings; skips nulls, nested structures,
    node cache fields and names that collide with driver columns.
    """
    attributes: dict[str, Any] = {}
    for key, value in metadata.items():
        if key in NODE_CONTENT_KEYS or key in RESERVED_ATTRIBUTE_KEYS or key.startswith("$"):
            continue
        if key in PROMOTED_METADATA_KEYS:
            continue
        if isinstance(value, (str, bool, int, float)):
            attributes[key] = value
        elif isinstance(value, list) and value and all(isinstance(item, str) for item in value):
            attributes[key] = value
    return attributes


def parse_metadata(blob: str | None) -> dict[str, Any]:
    """
    Decode a stored metadata blob.

    Malformed or non-object blobs degrade to an empty dict; reads never fail
    because of legacy metadata.
    """
    if not blob:
        return {}
    try:
        decoded = json.loads(blob)
    except (TypeError, ValueError) as e:
        logger.debug(f"{__name__}:parse_metadata - Ignoring malformed metadata blob: {e}")
        return {}
    if not isinstance(decoded, dict):
        logger.debug(f"{__name__}:parse_metadata - Ignoring non-object metadata blob ({type(decoded).__name__})")
        return {}
    return decoded


def restore_metadata(blob: str | None, columns: Mapping[str, Any]) -> dict[str, Any]:
    """
    Rebuild logical metadata from the blob and the promoted columns.

    Args:
        blob: Stored JSON metadata
        columns: Backend record holding the promoted identity columns

    Returns:
        dict: Metadata with namespaceId, documentId and tenantId reinjected
    """
    metadata = parse_metadata(blob)
    for key in PROMOTED_METADATA_KEYS:
        metadata[key] = columns.get(key)
    return metadata
