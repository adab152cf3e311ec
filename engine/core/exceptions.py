"""
Exception hierarchy for the retrieval engine.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Backend SDK errors (network, authentication, malformed responses) are not
wrapped: they propagate to the caller unchanged.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the engine
"""

from typing import Any


class EngineException(Exception):
    """Base exception for all retrieval engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(EngineException):
    """
    Raised when a provider is missing required credentials or endpoints.

    Always raised before any network call is attempted. Not retryable.
    """

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        missing: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize configuration error.

        Args:
            message: Error message
            provider: Provider tag being resolved
            missing: Names of the missing settings or config fields
            details: Additional context
        """
        details = details or {}
        if provider:
            details["provider"] = provider
        if missing:
            details["missing"] = missing
        super().__init__(message, details)


class UnknownProviderError(ConfigurationError):
    """Raised when a provider tag falls outside the closed set of providers."""

    def __init__(self, provider: object) -> None:
        super().__init__(f"Unknown vector store provider: {provider}", provider=str(provider))


class VectorStoreError(EngineException):
    """Raised when a driver rejects an operation or the backend reports item failures."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize vector store error.

        Args:
            message: Error message
            operation: Operation that failed (upsert, search, list_ids, delete_by_ids)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)
