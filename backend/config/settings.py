import os
import warnings

from dotenv import load_dotenv

# Service-side settings: focus on HTTP/runtime switches.
# Infrastructure env settings (stores, TMDB, identity) live under `backend/infrastructure/config/`.
load_dotenv(override=True)


def _get_env_int(key: str, default: int) -> int:
    """Read an integer env var; unset or empty falls back to the default."""
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"env var {key} expects an integer, got {raw}") from exc


def _get_env_bool(key: str, default: bool) -> bool:
    """Read a boolean env var (true/false/1/0/yes/no/on)."""
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    return raw.lower() in {"1", "true", "y", "yes", "on"}


def _get_positive_int(key: str, default: int) -> int:
    value = _get_env_int(key, default)
    if value <= 0:
        warnings.warn(
            f"{key} must be a positive integer; using default {default}.",
            RuntimeWarning,
            stacklevel=2,
        )
        return default
    return value


# ===== FastAPI / Uvicorn =====

SERVER_HOST = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT = _get_env_int("SERVER_PORT", 8000)
SERVER_RELOAD = _get_env_bool("SERVER_RELOAD", False)
SERVER_LOG_LEVEL = os.getenv("SERVER_LOG_LEVEL", "info")

# The in-memory store is per process; more than one worker only makes sense
# with the postgres or redis provider.
SERVER_WORKERS = _get_env_int("SERVER_WORKERS", 1) or 1

UVICORN_CONFIG = {
    "host": SERVER_HOST,
    "port": SERVER_PORT,
    "reload": SERVER_RELOAD,
    "log_level": SERVER_LOG_LEVEL,
    "workers": SERVER_WORKERS,
}

# ===== Home feed =====

# Run the notification synchronizer as part of GET /catalog/home.
HOME_FEED_SYNC_NOTIFICATIONS = _get_env_bool("HOME_FEED_SYNC_NOTIFICATIONS", True)

# ===== Library policy =====
#
# Trailing release window for new-movie notifications and the caps on the
# notification feed and the shared upload feed.

NOTIFICATION_WINDOW_DAYS = _get_positive_int("NOTIFICATION_WINDOW_DAYS", 14)
NOTIFICATION_FEED_LIMIT = _get_positive_int("NOTIFICATION_FEED_LIMIT", 40)
USER_MOVIES_GLOBAL_LIMIT = _get_positive_int("USER_MOVIES_GLOBAL_LIMIT", 80)
