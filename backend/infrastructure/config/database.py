from __future__ import annotations

import os
from typing import Optional


def _get_env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"env var {key} expects an integer, got {raw}") from exc


def get_postgres_dsn() -> Optional[str]:
    """Postgres DSN for the key-value table, or None when Postgres is not set up.

    Lookup order: KV_POSTGRES_DSN, POSTGRES_DSN, then the
    POSTGRES_HOST/PORT/USER/PASSWORD/DB parts (host is mandatory).
    """
    for key in ("KV_POSTGRES_DSN", "POSTGRES_DSN"):
        dsn = (os.getenv(key) or "").strip()
        if dsn:
            return dsn

    host = (os.getenv("POSTGRES_HOST") or "").strip()
    if not host:
        return None

    port = _get_env_int("POSTGRES_PORT", 5432)
    user = os.getenv("POSTGRES_USER", "postgres")
    password = os.getenv("POSTGRES_PASSWORD", "postgres")
    db = os.getenv("POSTGRES_DB", "movie_club")
    return f"postgresql://{user}:{password}@{host}:{port}/{db}"


def get_redis_url() -> Optional[str]:
    return (os.getenv("REDIS_URL") or "").strip() or None
