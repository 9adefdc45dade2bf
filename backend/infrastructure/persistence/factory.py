"""Key-value store factory.

Picks the adapter behind ``KeyValueStorePort`` from ``KV_STORE_PROVIDER`` so the
application layer never imports a concrete backend.
"""

from __future__ import annotations

import logging
from typing import Literal

from application.ports.kv_store_port import KeyValueStorePort
from infrastructure.config.database import get_postgres_dsn, get_redis_url
from infrastructure.config.settings import (
    KV_POSTGRES_POOL_MAX,
    KV_POSTGRES_TABLE,
    KV_REDIS_PREFIX,
    KV_STORE_PROVIDER,
)

logger = logging.getLogger(__name__)

ProviderType = Literal["memory", "postgres", "redis", ""]


class KeyValueStoreFactory:
    """Factory for creating key-value store instances based on configuration."""

    @staticmethod
    def create(provider: ProviderType | None = None) -> KeyValueStorePort:
        """Create a key-value store for the given provider.

        Args:
            provider: 'memory', 'postgres', 'redis' or None.
                      If None, reads from KV_STORE_PROVIDER.

        Raises:
            ValueError: If an unsupported provider is specified.
        """
        if provider is None:
            provider = KV_STORE_PROVIDER  # type: ignore[assignment]

        provider = (provider or "").strip().lower()

        match provider:
            case "postgres":
                dsn = get_postgres_dsn()
                if not dsn:
                    logger.warning(
                        "KV_STORE_PROVIDER=postgres but no Postgres DSN is configured; "
                        "falling back to InMemoryKeyValueStore"
                    )
                    from infrastructure.persistence.postgres.kv_store import (
                        InMemoryKeyValueStore,
                    )

                    return InMemoryKeyValueStore()

                from infrastructure.persistence.postgres.kv_store import (
                    PostgresKeyValueStore,
                )

                return PostgresKeyValueStore(
                    dsn=dsn,
                    table=KV_POSTGRES_TABLE,
                    max_size=KV_POSTGRES_POOL_MAX,
                )

            case "redis":
                redis_url = get_redis_url()
                if not redis_url:
                    logger.warning(
                        "KV_STORE_PROVIDER=redis but REDIS_URL is not set; "
                        "falling back to InMemoryKeyValueStore"
                    )
                    from infrastructure.persistence.postgres.kv_store import (
                        InMemoryKeyValueStore,
                    )

                    return InMemoryKeyValueStore()

                from infrastructure.persistence.redis.kv_store import RedisKeyValueStore

                return RedisKeyValueStore(redis_url=redis_url, prefix=KV_REDIS_PREFIX)

            case "memory" | "":
                from infrastructure.persistence.postgres.kv_store import (
                    InMemoryKeyValueStore,
                )

                return InMemoryKeyValueStore()

            case _:
                raise ValueError(
                    f"Unsupported KV_STORE_PROVIDER: {provider!r}. "
                    f"Supported values: 'memory', 'postgres', 'redis'"
                )


def create_kv_store(provider: ProviderType | None = None) -> KeyValueStorePort:
    """Shorthand for KeyValueStoreFactory.create()."""
    return KeyValueStoreFactory.create(provider)
