"""
Vector database boundary layer.

Provides the Store Contract and its dense-vector drivers.
- PineconeVectorStore: Pinecone serverless indexes
- TurbopufferVectorStore: turbopuffer namespaces

Drivers are imported lazily by the store factory so that a process only
loads the SDK of the providers it actually resolves.

Dependencies: pinecone, turbopuffer, llama_index.core
System role: Vector store adapters for RAG retrieval
"""

from engine.boundary.vdb.vector_store import VectorStore
from engine.boundary.vdb.vector_store_factory import get_namespace_vector_store

__all__ = ["VectorStore", "get_namespace_vector_store"]
