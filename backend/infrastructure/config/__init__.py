from __future__ import annotations

from infrastructure.config.database import get_postgres_dsn, get_redis_url  # noqa: F401

__all__ = [
    "get_postgres_dsn",
    "get_redis_url",
]
