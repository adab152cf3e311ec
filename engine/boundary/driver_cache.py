"""
Process-scoped cache of backend client handles.

Backend clients are built on first use and reused for every namespace that
resolves to the same provider identity. Entries are never torn down
explicitly; a rebuilt entry is equivalent to the original because clients
are immutable after construction.

Dependencies: threading, hashlib (stdlib)
System role: Shared driver state, injectable for tests
"""

import hashlib
import logging
import threading
from typing import Any, Callable, Hashable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def credential_fingerprint(secret: str) -> str:
    """Short stable digest of a credential, safe to use in cache keys and logs."""
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()[:16]


class DriverCache:
    """Build-once-per-key container for backend client handles."""

    def __init__(self) -> None:
        self._handles: dict[Hashable, Any] = {}
        self._lock = threading.Lock()

    def get_or_create(self, key: Hashable, factory: Callable[[], T]) -> T:
        """
        Return the handle cached under key, building it with factory on first use.

        Args:
            key: Provider identity (family plus credential fingerprint and host/region)
            factory: Zero-argument constructor for the handle

        Returns:
            The cached handle
        """
        with self._lock:
            handle = self._handles.get(key)
            if handle is None:
                logger.info(f"{__name__}:get_or_create - Building client for {key[0] if isinstance(key, tuple) else key}")
                handle = factory()
                self._handles[key] = handle
            return handle

    def __contains__(self, key: Hashable) -> bool:
        return key in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    def clear(self) -> None:
        """Drop every cached handle."""
        with self._lock:
            self._handles.clear()


default_driver_cache = DriverCache()
