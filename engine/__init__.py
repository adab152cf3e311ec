"""
Retrieval engine.

Stores, updates, deletes and queries indexed content chunks across pluggable
dense-vector and lexical search backends behind one Store Contract.
"""

__version__ = "0.1.0"
