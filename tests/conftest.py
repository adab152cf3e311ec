"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory fakes for the Azure AI Search, Pinecone and turbopuffer
clients, settings builders and an isolated driver cache.
Dependencies: pytest
System role: Test infrastructure and fixture management
"""

import re
from types import SimpleNamespace
from typing import Any

import httpx
import pytest
from pinecone.exceptions import NotFoundException
from turbopuffer import NotFoundError

from engine.boundary.driver_cache import DriverCache
from engine.configs.keyword_store import AzureSearchSettings
from engine.configs.settings import Settings
from engine.configs.vector_store import PineconeSettings, TurbopufferSettings

_EQ_CLAUSE = re.compile(r"(\w+) eq '((?:[^']|'')*)'")


class FakeSearchResponse:
    """Async-iterable page of search documents with a total count."""

    def __init__(self, documents: list[dict[str, Any]], count: int | None) -> None:
        self._documents = documents
        self._count = count

    async def get_count(self) -> int | None:
        return self._count

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for document in self._documents:
            yield document


class FakeSearchClient:
    """
    In-memory stand-in for ``azure.search.documents.aio.SearchClient``.

    Understands the ``field eq 'value'`` clauses the keyword store emits and
    scores documents by how many query terms their text contains.
    """

    def __init__(self, report_count: bool = True) -> None:
        self.documents: dict[str, dict[str, Any]] = {}
        self.search_calls: list[dict[str, Any]] = []
        self.report_count = report_count
        self.rejected_keys: set[str] = set()

    async def upload_documents(self, documents: list[dict[str, Any]]):
        results = []
        for document in documents:
            if document["id"] in self.rejected_keys:
                results.append(
                    SimpleNamespace(key=document["id"], succeeded=False, status_code=400, error_message="bad")
                )
                continue
            self.documents[document["id"]] = dict(document)
            results.append(SimpleNamespace(key=document["id"], succeeded=True, status_code=201, error_message=None))
        return results

    async def delete_documents(self, documents: list[dict[str, Any]]):
        for document in documents:
            self.documents.pop(document["id"], None)
        return [SimpleNamespace(key=document["id"], succeeded=True) for document in documents]

    def _matches_filter(self, document: dict[str, Any], filter_expression: str | None) -> bool:
        for field, literal in _EQ_CLAUSE.findall(filter_expression or ""):
            if document.get(field) != literal.replace("''", "'"):
                return False
        return True

    async def search(self, search_text=None, **kwargs):
        self.search_calls.append({"search_text": search_text, **kwargs})
        terms = [term.lower() for term in (search_text or "").split()]

        matched = []
        for document in self.documents.values():
            if not self._matches_filter(document, kwargs.get("filter")):
                continue
            text = (document.get("text") or "").lower()
            score = float(sum(text.count(term) for term in terms)) if terms else 1.0
            if terms and score == 0:
                continue
            matched.append((score, document))

        matched.sort(key=lambda item: (-item[0], item[1]["id"]))
        skip = kwargs.get("skip") or 0
        top = kwargs.get("top") or 50
        page = []
        for score, document in matched[skip : skip + top]:
            selected = {key: document.get(key) for key in kwargs.get("select") or document}
            selected["@search.score"] = score
            if kwargs.get("highlight_fields") and terms:
                selected["@search.highlights"] = {"text": [f"<em>{term}</em>" for term in terms]}
            page.append(selected)

        count = len(matched) if kwargs.get("include_total_count") and self.report_count else None
        return FakeSearchResponse(page, count)


class FakePineconeIndex:
    """In-memory stand-in for a Pinecone ``IndexAsyncio`` handle."""

    def __init__(self) -> None:
        self.partitions: dict[str, dict[str, dict[str, Any]]] = {}
        self.query_calls: list[dict[str, Any]] = []
        self.scores: dict[str, float] = {}

    async def upsert(self, vectors, namespace):
        partition = self.partitions.setdefault(namespace, {})
        for vector in vectors:
            partition[vector["id"]] = vector

    @staticmethod
    def _matches(metadata: dict[str, Any], filter_dict: dict[str, Any] | None) -> bool:
        if not filter_dict:
            return True
        if "$and" in filter_dict:
            return all(FakePineconeIndex._matches(metadata, clause) for clause in filter_dict["$and"])
        for key, condition in filter_dict.items():
            if metadata.get(key) != condition["$eq"]:
                return False
        return True

    async def query(self, vector, top_k, namespace, filter=None, include_metadata=True, include_values=False):
        self.query_calls.append({"top_k": top_k, "namespace": namespace, "filter": filter})
        records = [
            record
            for record in self.partitions.get(namespace, {}).values()
            if self._matches(record["metadata"], filter)
        ]
        records.sort(key=lambda record: (-self.scores.get(record["id"], 0.5), record["id"]))
        matches = [
            SimpleNamespace(id=record["id"], score=self.scores.get(record["id"], 0.5), metadata=record["metadata"])
            for record in records[:top_k]
        ]
        return SimpleNamespace(matches=matches)

    async def list_paginated(self, prefix=None, limit=100, pagination_token=None, namespace=None):
        ids = sorted(
            chunk_id
            for chunk_id in self.partitions.get(namespace, {})
            if prefix is None or chunk_id.startswith(prefix)
        )
        start = int(pagination_token or 0)
        batch = ids[start : start + limit]
        next_token = str(start + limit) if start + limit < len(ids) else None
        return SimpleNamespace(
            vectors=[SimpleNamespace(id=chunk_id) for chunk_id in batch],
            pagination=SimpleNamespace(next=next_token) if next_token else None,
        )

    async def describe_index_stats(self):
        return SimpleNamespace(
            namespaces={
                name: SimpleNamespace(vector_count=len(records)) for name, records in self.partitions.items()
            }
        )

    async def delete(self, ids, namespace):
        if namespace not in self.partitions:
            raise NotFoundException(status=404, reason="Not Found")
        partition = self.partitions[namespace]
        for chunk_id in ids:
            partition.pop(chunk_id, None)


def namespace_not_found(name: str) -> NotFoundError:
    """Build the error turbopuffer raises for a namespace that was never written."""
    request = httpx.Request("POST", f"https://aws-us-east-1.turbopuffer.com/v2/namespaces/{name}/query")
    response = httpx.Response(404, request=request)
    return NotFoundError(f"namespace '{name}' not found", response=response, body=None)


class FakeTurbopufferNamespace:
    """In-memory stand-in for a turbopuffer async namespace handle."""

    def __init__(self, name: str, store: dict[str, dict[str, dict[str, Any]]]) -> None:
        self.name = name
        self._store = store
        self.write_calls: list[dict[str, Any]] = []
        self.distances: dict[str, float] = {}

    @property
    def rows(self) -> dict[str, dict[str, Any]]:
        return self._store.setdefault(self.name, {})

    async def write(self, upsert_rows=None, deletes=None, delete_by_filter=None, distance_metric=None):
        self.write_calls.append(
            {
                "upsert_rows": upsert_rows,
                "deletes": deletes,
                "delete_by_filter": delete_by_filter,
                "distance_metric": distance_metric,
            }
        )
        if delete_by_filter is not None and self.name not in self._store:
            raise namespace_not_found(self.name)
        for row in upsert_rows or []:
            self.rows[row["id"]] = dict(row)
        for chunk_id in deletes or []:
            self.rows.pop(chunk_id, None)
        if delete_by_filter is not None:
            for chunk_id in [key for key, row in self.rows.items() if self._matches(row, delete_by_filter)]:
                del self.rows[chunk_id]

    @staticmethod
    def _matches(row: dict[str, Any], filters) -> bool:
        if filters is None:
            return True
        if filters[0] == "And":
            return all(FakeTurbopufferNamespace._matches(row, clause) for clause in filters[1])
        field, operator, value = filters
        if operator == "Eq":
            return row.get(field) == value
        if operator == "Gt":
            return row.get(field) > value
        if operator == "In":
            return row.get(field) in value
        raise AssertionError(f"unsupported operator {operator}")

    async def query(self, rank_by, top_k, filters=None, include_attributes=None):
        if self.name not in self._store:
            raise namespace_not_found(self.name)
        rows = [row for row in self.rows.values() if self._matches(row, filters)]
        if rank_by[0] == "vector":
            rows.sort(key=lambda row: (self.distances.get(row["id"], 0.25), row["id"]))
            shaped = [
                {"id": row["id"], "$dist": self.distances.get(row["id"], 0.25), **{k: row.get(k) for k in include_attributes or []}}
                for row in rows
            ]
        else:
            rows.sort(key=lambda row: row["id"])
            shaped = [{"id": row["id"]} for row in rows]
        return SimpleNamespace(rows=shaped[:top_k])


class FakeTurbopufferClient:
    """In-memory stand-in for ``turbopuffer.AsyncTurbopuffer``."""

    def __init__(self) -> None:
        self.store: dict[str, dict[str, dict[str, Any]]] = {}
        self.handles: dict[str, FakeTurbopufferNamespace] = {}

    def namespace(self, name: str) -> FakeTurbopufferNamespace:
        if name not in self.handles:
            self.handles[name] = FakeTurbopufferNamespace(name, self.store)
        return self.handles[name]


@pytest.fixture
def search_client() -> FakeSearchClient:
    """Provide an empty in-memory Azure AI Search client."""
    return FakeSearchClient()


@pytest.fixture
def pinecone_index() -> FakePineconeIndex:
    """Provide an empty in-memory Pinecone index."""
    return FakePineconeIndex()


@pytest.fixture
def turbopuffer_client() -> FakeTurbopufferClient:
    """Provide an empty in-memory turbopuffer client."""
    return FakeTurbopufferClient()


@pytest.fixture
def driver_cache() -> DriverCache:
    """Provide an isolated driver cache."""
    return DriverCache()


@pytest.fixture
def configured_settings() -> Settings:
    """Provide settings with every managed credential present."""
    return Settings(
        pinecone=PineconeSettings(
            default_pinecone_api_key="old-key",
            default_pinecone_host="https://old-index.svc.pinecone.io",
            secondary_pinecone_api_key="new-key",
            secondary_pinecone_host="https://new-index.svc.pinecone.io",
        ),
        turbopuffer=TurbopufferSettings(default_turbopuffer_api_key="tpuf-key"),
        azure_search=AzureSearchSettings(
            url="https://search.example.net",
            index="chunks",
            key="azure-key",
        ),
    )


@pytest.fixture
def empty_settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Provide settings with no credentials, ignoring the process environment."""
    for name in (
        "DEFAULT_PINECONE_API_KEY",
        "DEFAULT_PINECONE_HOST",
        "SECONDARY_PINECONE_API_KEY",
        "SECONDARY_PINECONE_HOST",
        "DEFAULT_TURBOPUFFER_API_KEY",
        "AZURE_SEARCH_URL",
        "AZURE_SEARCH_INDEX",
        "AZURE_SEARCH_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
    return Settings(
        pinecone=PineconeSettings(_env_file=None),
        turbopuffer=TurbopufferSettings(_env_file=None),
        azure_search=AzureSearchSettings(_env_file=None),
    )
