"""
Test suite for the driver cache.

System role: Verification of shared client handle caching
"""

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

from engine.boundary.driver_cache import DriverCache, credential_fingerprint


class TestDriverCache:
    """Test suite for DriverCache."""

    def test_factory_should_run_once_per_key(self) -> None:
        """Test repeated lookups return the first handle."""
        cache = DriverCache()
        factory = MagicMock(side_effect=lambda: object())

        first = cache.get_or_create(("pinecone", "abc", "host"), factory)
        second = cache.get_or_create(("pinecone", "abc", "host"), factory)

        assert first is second
        factory.assert_called_once()
        assert ("pinecone", "abc", "host") in cache

    def test_distinct_keys_should_build_distinct_handles(self) -> None:
        cache = DriverCache()

        first = cache.get_or_create(("turbopuffer", "abc", "aws-us-east-1"), object)
        second = cache.get_or_create(("turbopuffer", "abc", "gcp-us-central1"), object)

        assert first is not second
        assert len(cache) == 2

    def test_concurrent_lookups_should_share_one_handle(self) -> None:
        """Test simultaneous first use builds a single handle."""
        cache = DriverCache()
        factory = MagicMock(side_effect=lambda: object())

        with ThreadPoolExecutor(max_workers=8) as pool:
            handles = list(pool.map(lambda _: cache.get_or_create("key", factory), range(32)))

        assert all(handle is handles[0] for handle in handles)
        factory.assert_called_once()

    def test_clear_should_drop_handles(self) -> None:
        cache = DriverCache()
        cache.get_or_create("key", object)

        cache.clear()

        assert len(cache) == 0


class TestCredentialFingerprint:
    """Test suite for credential_fingerprint."""

    def test_fingerprint_should_hide_secret(self) -> None:
        fingerprint = credential_fingerprint("super-secret-key")

        assert "super-secret" not in fingerprint
        assert len(fingerprint) == 16
        assert fingerprint == credential_fingerprint("super-secret-key")
