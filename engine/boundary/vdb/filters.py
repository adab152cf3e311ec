"""
Scope filters for the dense-vector backends.

Each builder combines, in order: the mandatory namespace clause, the optional
tenant clause, the optional document clause and the caller's native clause,
all joined by AND. Values are passed as structured literals, never spliced
into strings.

Dependencies: None
System role: Filter Builder (Pinecone and turbopuffer dialects)
"""

from typing import Any


def build_pinecone_filter(
    namespace_id: str,
    tenant_id: str | None = None,
    document_id: str | None = None,
    extra: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a Pinecone metadata filter (``$and`` of ``$eq`` clauses)."""
    clauses: list[dict[str, Any]] = [{"namespaceId": {"$eq": namespace_id}}]
    if tenant_id:
        clauses.append({"tenantId": {"$eq": tenant_id}})
    if document_id:
        clauses.append({"documentId": {"$eq": document_id}})
    if extra:
        clauses.append(extra)
    return {"$and": clauses}


def build_turbopuffer_filter(
    namespace_id: str,
    tenant_id: str | None = None,
    document_id: str | None = None,
    extra: Any = None,
) -> tuple:
    """Build a turbopuffer filter (``("And", [...])`` of ``Eq`` conditions)."""
    clauses: list[Any] = [("namespaceId", "Eq", namespace_id)]
    if tenant_id:
        clauses.append(("tenantId", "Eq", tenant_id))
    if document_id:
        clauses.append(("documentId", "Eq", document_id))
    if extra:
        clauses.append(extra)
    return ("And", clauses)


# Within a component "." is written as "..", and "._" joins namespace and
# tenant. Both are valid in Pinecone and turbopuffer namespace names.
ESCAPE_CHAR = "."
TENANT_SEPARATOR = "._"


def _escape_component(value: str) -> str:
    return value.replace(ESCAPE_CHAR, ESCAPE_CHAR * 2)


def partition_name(namespace_id: str, tenant_id: str | None = None) -> str:
    """
    Backend partition holding one namespace's (and tenant's) chunks.

    Reading left to right, ``..`` is a literal dot and ``._`` the tenant
    separator, so the name decodes back to exactly one pair.
    """
    if tenant_id:
        return f"{_escape_component(namespace_id)}{TENANT_SEPARATOR}{_escape_component(tenant_id)}"
    return _escape_component(namespace_id)
