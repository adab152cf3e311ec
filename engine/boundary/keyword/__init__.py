"""
Keyword (lexical) search boundary.

- KeywordStore: Azure AI Search driver implementing the Store Contract
- id_codec: backend-safe document keys
- odata: scoped filter expressions
"""

from engine.boundary.keyword.id_codec import decode_id, encode_id
from engine.boundary.keyword.keyword_store import KeywordStore, get_keyword_search_client

__all__ = ["KeywordStore", "get_keyword_search_client", "encode_id", "decode_id"]
