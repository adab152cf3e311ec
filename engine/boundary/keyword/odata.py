"""
OData filter construction for the keyword index.

Combines the namespace clause, the optional tenant and document clauses and
a caller-supplied raw clause with ``and``. Every embedded literal is quoted
with single quotes doubled, so values cannot break out of the literal.

Dependencies: None
System role: Filter Builder (Azure AI Search dialect)
"""


def quote_literal(value: str) -> str:
    """Render a string as an OData string literal."""
    return "'" + str(value).replace("'", "''") + "'"


def eq(field: str, value: str) -> str:
    """Render an equality clause against a string field."""
    return f"{field} eq {quote_literal(value)}"


def build_scope_filter(
    namespace_id: str,
    tenant_id: str | None = None,
    document_id: str | None = None,
    extra: str | None = None,
) -> str:
    """
    Build the filter expression for one scoped request.

    Args:
        namespace_id: Mandatory namespace scope
        tenant_id: Optional tenant scope
        document_id: Optional document scope
        extra: Raw OData clause supplied by the caller

    Returns:
        str: Clauses joined by ``and``
    """
    clauses = [eq("namespaceId", namespace_id)]
    if tenant_id:
        clauses.append(eq("tenantId", tenant_id))
    if document_id:
        clauses.append(eq("documentId", document_id))
    if extra:
        # Parenthesized so an ``or`` in the caller clause cannot widen the scope
        clauses.append(f"({extra})")
    return " and ".join(clauses)
