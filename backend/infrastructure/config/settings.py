import os
import warnings
from typing import Optional

from dotenv import load_dotenv

# Load the project .env once for every infrastructure setting.
# The .env file wins over the shell environment so edits take effect on restart.
load_dotenv(override=True)


def _get_env_int(key: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"env var {key} expects an integer, got {raw}") from exc


def _get_env_float(key: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"env var {key} expects a float, got {raw}") from exc


def _get_env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    return raw.lower() in {"1", "true", "yes", "y", "on"}


def _get_positive_int(key: str, default: int) -> int:
    value = _get_env_int(key, default)
    if value is None or value <= 0:
        warnings.warn(
            f"{key} must be a positive integer; using default {default}.",
            RuntimeWarning,
            stacklevel=2,
        )
        return default
    return value


# ===== Key-value store =====

# memory | postgres | redis
KV_STORE_PROVIDER = os.getenv("KV_STORE_PROVIDER", "memory").strip().lower()
KV_POSTGRES_TABLE = os.getenv("KV_POSTGRES_TABLE", "kv_entries").strip() or "kv_entries"
KV_POSTGRES_POOL_MAX = _get_positive_int("KV_POSTGRES_POOL_MAX", 5)
KV_REDIS_PREFIX = os.getenv("KV_REDIS_PREFIX", "movieclub:").strip()


# ===== TMDB API =====

TMDB_BASE_URL = os.getenv("TMDB_BASE_URL", "https://api.themoviedb.org/3").strip()
TMDB_API_TOKEN = os.getenv("TMDB_API_TOKEN", "").strip()
TMDB_API_KEY = os.getenv("TMDB_API_KEY", "").strip()
TMDB_TIMEOUT_S = _get_env_float("TMDB_TIMEOUT_S", 5.0) or 5.0
TMDB_LANGUAGE = os.getenv("TMDB_LANGUAGE", "en-US").strip() or "en-US"
TMDB_INCLUDE_ADULT = _get_env_bool("TMDB_INCLUDE_ADULT", False)


# ===== Identity service =====

IDENTITY_BASE_URL = os.getenv("IDENTITY_BASE_URL", "").strip()
IDENTITY_TIMEOUT_S = _get_env_float("IDENTITY_TIMEOUT_S", 10.0) or 10.0
IDENTITY_LOGIN_PATH = os.getenv("IDENTITY_LOGIN_PATH", "/users/login").strip() or "/users/login"
IDENTITY_REGISTER_PATH = (
    os.getenv("IDENTITY_REGISTER_PATH", "/users/register").strip() or "/users/register"
)
