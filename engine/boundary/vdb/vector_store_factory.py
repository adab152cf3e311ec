"""
Vector store factory.

Resolves a namespace's persisted provider configuration into a live driver.

Tiers per provider family:
- managed (current): platform credentials, e.g. SECONDARY_PINECONE_*
- managed (legacy): a second platform credential set, e.g. DEFAULT_PINECONE_*
- bring-your-own: apiKey/indexHost/region from the namespace config

Managed tiers of a family share the driver and differ only in the injected
credentials, so the backing infrastructure can move without changing the
stored configuration. Missing credentials raise ConfigurationError before
any network call.

Dependencies: engine.configs, engine.models, engine.boundary.vdb drivers
System role: Store Factory
"""

import logging
from typing import Never, NoReturn

from engine.boundary.driver_cache import DriverCache
from engine.boundary.vdb.vector_store import VectorStore
from engine.configs import Settings, get_settings
from engine.core.exceptions import ConfigurationError, UnknownProviderError
from engine.models import Namespace, VectorStoreConfig, VectorStoreProvider

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = VectorStoreProvider.MANAGED_PINECONE


def _require(provider: VectorStoreProvider, **values: str | None) -> None:
    missing = [name for name, value in values.items() if not value]
    if missing:
        tag = VectorStoreProvider(provider).value
        raise ConfigurationError(
            f"{', '.join(missing)} required for {tag} provider but not configured.",
            provider=tag,
            missing=missing,
        )


def _unknown_provider(provider: Never) -> NoReturn:
    # Type checkers reject this call while any provider tag is left unhandled
    raise UnknownProviderError(provider)


def get_namespace_vector_store(
    namespace: Namespace,
    tenant_id: str | None = None,
    *,
    settings: Settings | None = None,
    cache: DriverCache | None = None,
) -> VectorStore:
    """
    Build the dense-vector driver for a namespace.

    Args:
        namespace: Namespace record (id and optional vector store config)
        tenant_id: Optional tenant scope
        settings: Engine settings, defaults to the loaded settings
        cache: Client handle cache, defaults to the process-wide cache

    Returns:
        VectorStore: Driver bound to the namespace and tenant

    Raises:
        ConfigurationError: If the resolved provider lacks credentials
        UnknownProviderError: If the provider tag is outside the closed set
    """
    settings = settings or get_settings()
    config = namespace.vector_store_config or VectorStoreConfig(provider=DEFAULT_PROVIDER)
    provider = config.provider

    logger.debug(f"{__name__}:get_namespace_vector_store - Resolving {provider} for namespace {namespace.id}")

    match provider:
        case (
            VectorStoreProvider.MANAGED_PINECONE
            | VectorStoreProvider.MANAGED_PINECONE_OLD
            | VectorStoreProvider.PINECONE
        ):
            if provider == VectorStoreProvider.MANAGED_PINECONE_OLD:
                api_key = settings.pinecone.default_pinecone_api_key
                index_host = settings.pinecone.default_pinecone_host
                _require(provider, DEFAULT_PINECONE_API_KEY=api_key, DEFAULT_PINECONE_HOST=index_host)
            elif provider == VectorStoreProvider.MANAGED_PINECONE:
                api_key = settings.pinecone.secondary_pinecone_api_key
                index_host = settings.pinecone.secondary_pinecone_host
                _require(provider, SECONDARY_PINECONE_API_KEY=api_key, SECONDARY_PINECONE_HOST=index_host)
            else:
                api_key = config.api_key
                index_host = config.index_host
                _require(provider, apiKey=api_key, indexHost=index_host)

            from engine.boundary.vdb.pinecone_store import PineconeVectorStore

            return PineconeVectorStore(
                api_key=api_key,
                index_host=index_host,
                namespace_id=namespace.id,
                tenant_id=tenant_id,
                cache=cache,
            )

        case VectorStoreProvider.MANAGED_TURBOPUFFER | VectorStoreProvider.TURBOPUFFER:
            if provider == VectorStoreProvider.MANAGED_TURBOPUFFER:
                api_key = settings.turbopuffer.default_turbopuffer_api_key
                region = settings.turbopuffer.turbopuffer_managed_region
                _require(provider, DEFAULT_TURBOPUFFER_API_KEY=api_key)
            else:
                api_key = config.api_key
                region = config.region
                _require(provider, apiKey=api_key, region=region)

            from engine.boundary.vdb.turbopuffer_store import TurbopufferVectorStore

            return TurbopufferVectorStore(
                api_key=api_key,
                region=region,
                namespace_id=namespace.id,
                tenant_id=tenant_id,
                distance_metric=settings.turbopuffer.turbopuffer_distance_metric,
                cache=cache,
            )

        case _:
            _unknown_provider(provider)
