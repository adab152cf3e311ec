"""
Observability module.

Provides logging configuration for the engine and its backend SDKs.
"""

from engine.observability.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
