"""
Core module.

Contains the exception hierarchy shared by every driver and the store factory.
"""

from engine.core.exceptions import (
    ConfigurationError,
    EngineException,
    UnknownProviderError,
    VectorStoreError,
)

__all__ = [
    "EngineException",
    "ConfigurationError",
    "UnknownProviderError",
    "VectorStoreError",
]
