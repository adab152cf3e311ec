"""
Identifier codec for the keyword index.

Azure AI Search document keys may only contain letters, digits, underscore,
dash and equal sign. Canonical chunk ids use ``#`` as the document/index
separator, so it is swapped for ``_`` on the way in and back on the way out.
Ids that already contain ``_`` do not survive the round trip.

Dependencies: None
System role: Identifier Codec
"""

RESERVED_CHAR = "#"
PLACEHOLDER_CHAR = "_"


def encode_id(chunk_id: str) -> str:
    """Map a canonical chunk id to a backend-safe key."""
    return chunk_id.replace(RESERVED_CHAR, PLACEHOLDER_CHAR)


def decode_id(key: str) -> str:
    """Map a backend key back to the canonical chunk id."""
    return key.replace(PLACEHOLDER_CHAR, RESERVED_CHAR)
