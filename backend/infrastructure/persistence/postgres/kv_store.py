from __future__ import annotations

import asyncio
import logging
import re
from typing import Dict, Optional

from application.ports.kv_store_port import KeyValueStorePort

logger = logging.getLogger(__name__)

_TABLE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class InMemoryKeyValueStore(KeyValueStorePort):
    """In-memory key-value store for dev/tests when no backend is configured."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)

    async def close(self) -> None:
        return None


class PostgresKeyValueStore(KeyValueStorePort):
    """Postgres-backed key-value storage (asyncpg).

    Table:
      - kv_entries(key text pk, value text, updated_at timestamptz)
    """

    def __init__(
        self,
        *,
        dsn: str,
        table: str = "kv_entries",
        min_size: int = 1,
        max_size: int = 5,
    ) -> None:
        if not _TABLE_RE.match(table or ""):
            raise ValueError(f"invalid table name: {table!r}")
        self._dsn = dsn
        self._table = table
        self._min_size = min_size
        self._max_size = max_size
        self._pool = None
        self._pool_lock = asyncio.Lock()

    async def _get_pool(self):
        if self._pool is not None:
            return self._pool
        async with self._pool_lock:
            if self._pool is not None:
                return self._pool
            import asyncpg  # type: ignore

            self._pool = await asyncpg.create_pool(
                self._dsn,
                min_size=self._min_size,
                max_size=self._max_size,
                ssl=False,
            )
            await self._ensure_schema()
            logger.info("PostgreSQL key-value store pool initialized table=%s", self._table)
            return self._pool

    async def _ensure_schema(self) -> None:
        pool = self._pool
        if pool is None:
            return
        async with pool.acquire() as conn:
            await conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self._table} (
                    key text PRIMARY KEY,
                    value text NOT NULL,
                    updated_at timestamptz NOT NULL DEFAULT NOW()
                );
                """
            )

    async def get(self, key: str) -> Optional[str]:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(f"SELECT value FROM {self._table} WHERE key = $1", str(key))
        return row["value"] if row else None

    async def set(self, key: str, value: str) -> None:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            await conn.execute(
                f"""
                INSERT INTO {self._table} (key, value, updated_at)
                VALUES ($1, $2, NOW())
                ON CONFLICT (key) DO UPDATE SET value = EXCLUDED.value, updated_at = NOW()
                """,
                str(key),
                str(value),
            )

    async def remove(self, key: str) -> None:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            await conn.execute(f"DELETE FROM {self._table} WHERE key = $1", str(key))

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
