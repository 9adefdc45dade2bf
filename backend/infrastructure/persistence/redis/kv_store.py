from __future__ import annotations

import logging
from typing import Optional

from application.ports.kv_store_port import KeyValueStorePort

logger = logging.getLogger(__name__)


class RedisKeyValueStore(KeyValueStorePort):
    """Redis-backed key-value storage (``redis.asyncio``).

    Notes:
    - Values are stored as plain strings under ``<prefix><key>``.
    - No TTL: personal-library data lives until removed.
    """

    def __init__(self, *, redis_url: str, prefix: str = "") -> None:
        try:
            import redis.asyncio as redis  # type: ignore[import-not-found]
        except ImportError as e:  # pragma: no cover
            raise ImportError(
                "Redis key-value store requires the 'redis' package. "
                "Install it via: pip install redis"
            ) from e

        self._client = redis.from_url(
            redis_url,
            decode_responses=True,  # return str, not bytes
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        self._prefix = prefix or ""

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> Optional[str]:
        return await self._client.get(self._key(key))

    async def set(self, key: str, value: str) -> None:
        await self._client.set(self._key(key), str(value))

    async def remove(self, key: str) -> None:
        await self._client.delete(self._key(key))

    async def close(self) -> None:
        await self._client.aclose()
